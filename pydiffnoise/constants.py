"""
Global constants for PyDiffNoise.

Values here are read by Taichi kernels at compile time, so they must be set
before the first kernel launch. The float precision can be switched to 64 bits
by exporting PYDIFFNOISE_PRECISION=64 before importing the package.

Author: B.G.
"""

import os

import numpy as np
import taichi as ti

PREC = int(os.environ.get("PYDIFFNOISE_PRECISION", "32"))

if PREC == 64:
    FLOAT_TYPE_TI = ti.f64
    FLOAT_TYPE_NP = np.float64
else:
    FLOAT_TYPE_TI = ti.f32
    FLOAT_TYPE_NP = np.float32

# Fractional offsets below this are treated as sitting on a lattice node,
# which zeroes the offset term of the analytic derivative on that axis
HEAVISIDE_EPSILON = 1e-6

# Seeds are 32-bit unsigned integers
SEED_MASK = 0xFFFFFFFF

# Supported coordinate dimensionality
MIN_DIM = 1
MAX_DIM = 4
