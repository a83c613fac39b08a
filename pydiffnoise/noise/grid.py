"""
Raster sampling of noise fields for PyDiffNoise.

Samples a 2D slice of the noise (or curl noise) on a regular grid, for
previews, textures and flow maps. Only one frequency is sampled; octave sums
are left to the caller.

Author: B.G.
"""

import taichi as ti

from .. import constants as cte
from .. import pool
from .curl import curlnoise_at
from .perlin import as_seed, noise_at, pnoise_at


@ti.func
def _grid_point(i: ti.i32, j: ti.i32, nx: ti.i32, ny: ti.i32, frequency: cte.FLOAT_TYPE_TI):
    """Noise-space coordinates of cell (j, i): ``frequency`` lattice cells across the grid."""
    x = ti.cast(i, cte.FLOAT_TYPE_TI) * frequency / ti.cast(nx, cte.FLOAT_TYPE_TI)
    y = ti.cast(j, cte.FLOAT_TYPE_TI) * frequency / ti.cast(ny, cte.FLOAT_TYPE_TI)
    return ti.Vector([x, y])


@ti.kernel
def noise_grid_kernel(
    noise_field: ti.template(),
    seed: ti.u32,
    frequency: cte.FLOAT_TYPE_TI,
    amplitude: cte.FLOAT_TYPE_TI,
    tileable: ti.template(),
):
    """
    Fill a 2D field with noise.

    Args:
        noise_field: Scalar field of shape (ny, nx)
        seed: Field seed
        frequency: Number of lattice cells across the grid on each axis
        amplitude: Scale applied to the noise values
        tileable: If True, use periodic noise with period ``frequency`` so the
                  raster wraps seamlessly (frequency must be an integer)
    """
    ny, nx = noise_field.shape
    period = ti.cast(frequency, ti.i32)

    for j, i in noise_field:
        p = _grid_point(i, j, nx, ny, frequency)
        if ti.static(tileable):
            noise_field[j, i] = pnoise_at(seed, p, ti.Vector([period, period])) * amplitude
        else:
            noise_field[j, i] = noise_at(seed, p) * amplitude


@ti.kernel
def curlnoise_grid_kernel(
    flow_field: ti.template(),
    seed: ti.u32,
    frequency: cte.FLOAT_TYPE_TI,
    amplitude: cte.FLOAT_TYPE_TI,
):
    ny, nx = flow_field.shape
    for j, i in flow_field:
        flow_field[j, i] = curlnoise_at(seed, _grid_point(i, j, nx, ny, frequency)) * amplitude


def _check_grid_args(nx, ny, frequency):
    if nx <= 0 or ny <= 0:
        raise ValueError(f"Grid dimensions must be > 0, got ({ny}, {nx})")
    if frequency <= 0:
        raise ValueError("frequency must be > 0")


def noise_grid(
    nx: int,
    ny: int,
    frequency: float = 8.0,
    amplitude: float = 1.0,
    seed: int = 42,
    tileable: bool = False,
    return_field: bool = False,
):
    """
    Sample a 2D gradient-noise raster.

    Args:
        nx: Number of cells in x direction
        ny: Number of cells in y direction
        frequency: Lattice cells across the raster (default: 8.0)
                   Higher values give smaller features
        amplitude: Scale of the output values (default: 1.0)
        seed: Field seed (default: 42)
        tileable: If True the raster wraps seamlessly on both axes; requires an
                  integer frequency (default: False)
        return_field: If True, return Taichi field; if False, return numpy array (default: False)

    Returns:
        numpy.ndarray or taichi.Field of shape (ny, nx)

    Example:
        texture = noise_grid(256, 256, frequency=16, tileable=True, seed=3)
    """
    _check_grid_args(nx, ny, frequency)
    if tileable and float(frequency) != int(frequency):
        raise ValueError("Tileable rasters need an integer frequency")

    noise_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (ny, nx))
    noise_grid_kernel(noise_field.field, as_seed(seed), frequency, amplitude, bool(tileable))

    if return_field:
        return noise_field.field
    result = noise_field.field.to_numpy()
    noise_field.release()
    return result


def curlnoise_grid(
    nx: int,
    ny: int,
    frequency: float = 8.0,
    amplitude: float = 1.0,
    seed: int = 42,
    return_field: bool = False,
):
    """
    Sample a divergence-free 2D flow field on a raster.

    Returns:
        numpy.ndarray of shape (ny, nx, 2) holding (vx, vy), or a Taichi
        vector field of shape (ny, nx)
    """
    _check_grid_args(nx, ny, frequency)

    flow_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (ny, nx), n=2)
    curlnoise_grid_kernel(flow_field.field, as_seed(seed), frequency, amplitude)

    if return_field:
        return flow_field.field
    result = flow_field.field.to_numpy()
    flow_field.release()
    return result
