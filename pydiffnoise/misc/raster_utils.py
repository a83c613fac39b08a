"""
Raster output utilities for PyDiffNoise.

Helpers to write sampled noise rasters to disk, as .npy arrays or as PNG
images (16-bit or 8-bit grayscale, or RGB through a matplotlib colormap).

Dependencies:
- numpy: array handling and .npy output
- pillow: PNG encoding
- matplotlib: colormaps

Author: B.G.
"""

import numpy as np
from PIL import Image


def normalize(data):
    """
    Rescale an array to [0, 1].

    Constant arrays map to zeros, NaN values to 0.

    Returns:
        tuple: (normalized array, min, max)
    """
    data = np.asarray(data, dtype=np.float64)
    dmin = np.nanmin(data)
    dmax = np.nanmax(data)
    if dmin == dmax:
        normalized = np.zeros_like(data)
    else:
        normalized = (data - dmin) / (dmax - dmin)
    return np.nan_to_num(normalized, nan=0.0), dmin, dmax


def to_image(data, uint=False, cmap=None):
    """
    Convert a 2D array to a PIL image.

    Args:
        data: 2D array
        uint: Save as 8-bit (0-255) instead of 16-bit grayscale
        cmap: Optional matplotlib colormap name, gives an 8-bit RGB image

    Returns:
        PIL.Image.Image
    """
    data = np.asarray(data)
    if data.ndim != 2:
        raise ValueError("Raster must be 2D")

    normalized, _, _ = normalize(data)

    if cmap is not None:
        import matplotlib

        rgba = matplotlib.colormaps[cmap](normalized)
        return Image.fromarray((rgba[..., :3] * 255).astype(np.uint8), mode="RGB")
    if uint:
        return Image.fromarray((normalized * 255).astype(np.uint8), mode="L")
    return Image.fromarray((normalized * 65535).astype(np.uint16), mode="I;16")


def save_png(data, output_path, uint=False, cmap=None):
    """
    Save a 2D array as PNG.

    Args:
        data: 2D array
        output_path: Destination file
        uint: 8-bit grayscale instead of 16-bit
        cmap: Optional matplotlib colormap name (RGB output)

    Raises:
        ValueError: If the raster is not 2D or the colormap is unknown
        OSError: If the file cannot be written
    """
    try:
        img = to_image(data, uint=uint, cmap=cmap)
    except KeyError:
        raise ValueError(f"Unknown colormap '{cmap}'")
    try:
        img.save(output_path)
    except Exception as e:
        raise OSError(f"Failed to save PNG to '{output_path}': {e}")


def save_numpy(data, output_path):
    """Save an array as .npy, raising OSError on failure."""
    try:
        np.save(output_path, np.asarray(data))
    except Exception as e:
        raise OSError(f"Failed to save numpy array to '{output_path}': {e}")
