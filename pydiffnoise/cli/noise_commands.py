"""
Noise raster CLI Commands for PyDiffNoise

Command line interface to sample gradient-noise rasters and write them to
.npy or PNG files.

Author: B.G.
"""

import sys

import click
import taichi as ti

import pydiffnoise as pdn


def _grid_options(func):
    """Options shared by every raster command."""
    options = [
        click.option("--nx", default=256, show_default=True, type=int, help="Raster width in cells"),
        click.option("--ny", default=256, show_default=True, type=int, help="Raster height in cells"),
        click.option(
            "--frequency",
            "-f",
            default=8.0,
            show_default=True,
            type=float,
            help="Lattice cells across the raster",
        ),
        click.option("--amplitude", "-a", default=1.0, show_default=True, type=float, help="Scale of the values"),
        click.option("--seed", "-s", default=42, show_default=True, type=int, help="Field seed"),
        click.option(
            "--tileable",
            is_flag=True,
            default=False,
            help="Wrap seamlessly on both axes (integer frequency only)",
        ),
        click.option(
            "--arch",
            type=click.Choice(["cpu", "gpu"]),
            default="cpu",
            show_default=True,
            help="Taichi backend",
        ),
        click.option("--verbose", "-v", is_flag=True, help="Enable verbose output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _init_taichi(arch):
    ti.init(arch=ti.gpu if arch == "gpu" else ti.cpu)


@click.command()
@click.argument("output", type=click.Path())
@_grid_options
@click.option(
    "--curl",
    is_flag=True,
    default=False,
    help="Sample the 2D curl-noise flow field instead (shape ny x nx x 2)",
)
def noise2npy(output, nx, ny, frequency, amplitude, seed, tileable, arch, verbose, curl):
    """
    Sample a noise raster and save it as a numpy array.

    OUTPUT: Path of the .npy file to write

    Examples:

        # 256x256 noise with 8 lattice cells across
        pdn-noise2npy noise.npy

        # Seamless texture
        pdn-noise2npy texture.npy --nx 512 --ny 512 -f 16 --tileable

        # Divergence-free flow field
        pdn-noise2npy flow.npy --curl -s 7
    """
    try:
        if curl and tileable:
            raise click.UsageError("--curl and --tileable cannot be combined")

        _init_taichi(arch)

        if verbose:
            kind = "curl-noise" if curl else "noise"
            click.echo(f"Sampling {kind} raster ({ny}x{nx}, frequency={frequency}, seed={seed})...")

        if curl:
            data = pdn.noise.curlnoise_grid(nx, ny, frequency=frequency, amplitude=amplitude, seed=seed)
        else:
            data = pdn.noise.noise_grid(
                nx, ny, frequency=frequency, amplitude=amplitude, seed=seed, tileable=tileable
            )

        pdn.misc.save_numpy(data, output)

        if verbose:
            click.echo(f"Saved array of shape {data.shape} to '{output}'")
        else:
            click.echo(f"Wrote '{output}'")

    except click.UsageError:
        raise
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.command()
@click.argument("output", type=click.Path())
@_grid_options
@click.option(
    "--uint",
    is_flag=True,
    default=False,
    help="Save as uint8 (0-255), otherwise 16-bit grayscale",
)
@click.option("--cmap", default=None, type=str, help="Matplotlib colormap name (RGB output)")
def noise2png(output, nx, ny, frequency, amplitude, seed, tileable, arch, verbose, uint, cmap):
    """
    Sample a noise raster and save it as a PNG image.

    Values are rescaled to the full range of the image.

    OUTPUT: Path of the PNG file to write

    Examples:

        # 16-bit grayscale preview
        pdn-noise2png noise.png

        # Tileable 8-bit texture
        pdn-noise2png tile.png -f 4 --tileable --uint

        # Colored preview
        pdn-noise2png preview.png --cmap terrain -v
    """
    try:
        _init_taichi(arch)

        if verbose:
            click.echo(f"Sampling noise raster ({ny}x{nx}, frequency={frequency}, seed={seed})...")

        data = pdn.noise.noise_grid(
            nx, ny, frequency=frequency, amplitude=amplitude, seed=seed, tileable=tileable
        )

        if verbose:
            click.echo(f"Saving PNG to '{output}'...")

        pdn.misc.save_png(data, output, uint=uint, cmap=cmap)

        if verbose:
            click.echo(f"Done! Range: {data.min()}-{data.max()}")
        else:
            click.echo(f"Wrote '{output}'")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    noise2npy()
