"""
Shared Taichi building blocks for PyDiffNoise.

- rand: PCG hash and pure samplers (uniform, normal) driven by a 32-bit state
- interpolation: smootherstep blending and its chain-rule derivative

Author: B.G.
"""

from .rand import (
    pcg,
    rand_init,
    rand_init_offset,
    randf,
    randf_range,
    box_muller,
    sample_uniform_kernel,
    sample_normal_kernel,
    rand_init_kernel,
)
from .interpolation import (
    smootherstep,
    smootherstep_gradient,
    interpolate,
    interpolate_gradient,
    smootherstep_kernel,
)

__all__ = [
    "pcg",
    "rand_init",
    "rand_init_offset",
    "randf",
    "randf_range",
    "box_muller",
    "sample_uniform_kernel",
    "sample_normal_kernel",
    "rand_init_kernel",
    "smootherstep",
    "smootherstep_gradient",
    "interpolate",
    "interpolate_gradient",
    "smootherstep_kernel",
]
