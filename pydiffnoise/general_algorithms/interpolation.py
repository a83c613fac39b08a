"""
Smootherstep interpolation and its total derivative.

smootherstep(t) = 6t^5 - 15t^4 + 10t^3 has zero first and second derivatives
at t = 0 and t = 1, which keeps gradient noise C2-continuous across lattice
cell boundaries.

Author: B.G.
"""

import taichi as ti

from .. import constants as cte


@ti.func
def smootherstep(t: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


@ti.func
def smootherstep_gradient(t: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    """d/dt smootherstep(t) = 30 t^2 (t - 1)^2"""
    return 30.0 * t * t * (t * (t - 2.0) + 1.0)


@ti.func
def interpolate(a0: cte.FLOAT_TYPE_TI, a1: cte.FLOAT_TYPE_TI, t: cte.FLOAT_TYPE_TI) -> cte.FLOAT_TYPE_TI:
    """Blend a0 and a1 with the smootherstep weight of t."""
    return (a1 - a0) * smootherstep(t) + a0


@ti.func
def interpolate_gradient(
    a0: cte.FLOAT_TYPE_TI,
    a1: cte.FLOAT_TYPE_TI,
    t: cte.FLOAT_TYPE_TI,
    d_a0: cte.FLOAT_TYPE_TI,
    d_a1: cte.FLOAT_TYPE_TI,
    d_t: cte.FLOAT_TYPE_TI,
) -> cte.FLOAT_TYPE_TI:
    """
    Total derivative of interpolate(a0, a1, t) given the derivatives of its inputs.

    Args:
        a0, a1: Values being blended
        t: Blend parameter
        d_a0, d_a1: Derivatives of a0 and a1 along the direction of interest
        d_t: Derivative of t along the same direction

    Returns:
        (d_a1 - d_a0) * s(t) + (a1 - a0) * s'(t) * d_t + d_a0
    """
    return (d_a1 - d_a0) * smootherstep(t) + (a1 - a0) * smootherstep_gradient(t) * d_t + d_a0


@ti.kernel
def smootherstep_kernel(t: ti.template(), value: ti.template(), derivative: ti.template()):
    for i in t:
        value[i] = smootherstep(t[i])
        derivative[i] = smootherstep_gradient(t[i])
