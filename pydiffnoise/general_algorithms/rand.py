"""
Counter-based random sampling for PyDiffNoise.

A PCG hash turns a 32-bit state into a new 32-bit state. Samplers read floats
out of an already advanced state, so callers thread the state explicitly:

    state = pcg(state)
    u = randf(state)

This keeps every sampler a pure function, which is what the lattice gradient
hashing relies on (same seed and node, same gradient, on every backend).

Author: B.G.
"""

import math

import taichi as ti

from .. import constants as cte

TWO_PI = 2.0 * math.pi

# 2^-24, the smallest non-zero value randf can return
UNIT_EPSILON = 1.0 / 16777216.0


@ti.func
def pcg(state: ti.u32) -> ti.u32:
    """Advance a 32-bit state with the PCG output permutation."""
    b = state * ti.u32(747796405) + ti.u32(2891336453)
    c = ((b >> ((b >> 28) + ti.u32(4))) ^ b) * ti.u32(277803737)
    return (c >> 22) ^ c


@ti.func
def rand_init(seed: ti.u32) -> ti.u32:
    return pcg(seed)


@ti.func
def rand_init_offset(seed: ti.u32, offset: ti.u32) -> ti.u32:
    """Derive an independent stream from ``seed`` and a fixed ``offset``."""
    return pcg(seed + pcg(offset))


@ti.func
def randf(state: ti.u32) -> cte.FLOAT_TYPE_TI:
    """Uniform float in [0, 1) from the top 24 bits of ``state``."""
    return ti.cast(state >> 8, cte.FLOAT_TYPE_TI) * UNIT_EPSILON


@ti.func
def randf_range(state: ti.u32, low: cte.FLOAT_TYPE_TI, high: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    return low + (high - low) * randf(state)


@ti.func
def box_muller(u1: cte.FLOAT_TYPE_TI, u2: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    """Standard normal sample from two uniforms in [0, 1)."""
    u = ti.max(u1, UNIT_EPSILON)
    return ti.sqrt(-2.0 * ti.log(u)) * ti.cos(TWO_PI * u2)


@ti.kernel
def sample_uniform_kernel(states: ti.template(), out: ti.template()):
    """Fill ``out`` with one uniform sample per state (state advanced once)."""
    for i in states:
        out[i] = randf(pcg(states[i]))


@ti.kernel
def sample_normal_kernel(states: ti.template(), out: ti.template()):
    """Fill ``out`` with one normal sample per state (state advanced twice)."""
    for i in states:
        s1 = pcg(states[i])
        s2 = pcg(s1)
        out[i] = box_muller(randf(s1), randf(s2))


@ti.kernel
def rand_init_kernel(seeds: ti.template(), out: ti.template(), offset: ti.u32, use_offset: ti.i32):
    for i in seeds:
        if use_offset:
            out[i] = rand_init_offset(seeds[i], offset)
        else:
            out[i] = rand_init(seeds[i])
