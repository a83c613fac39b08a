"""
Miscellaneous Utilities for PyDiffNoise

Raster output helpers used by the command line tools.

Available Functions:
- normalize: Rescale an array to [0, 1]
- to_image: Convert a 2D array to a PIL image
- save_png: Write a 2D array as PNG
- save_numpy: Write an array as .npy

Author: B.G.
"""

from .raster_utils import normalize, to_image, save_png, save_numpy

# Export public API
__all__ = [
    "normalize",
    "to_image",
    "save_png",
    "save_numpy",
]
