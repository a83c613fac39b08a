"""
PyDiffNoise: differentiable procedural noise for Taichi.

Seeded gradient noise in 1 to 4 dimensions, its periodic variant and curl
noise, with exact analytic derivatives that plug into Taichi's reverse-mode
autodiff.

Call ``ti.init(arch=...)`` before using the package.

Author: B.G.
"""

from . import constants
from . import pool
from . import general_algorithms
from . import noise
from . import misc

__version__ = "0.0.1"

__all__ = ["constants", "pool", "general_algorithms", "noise", "misc"]
