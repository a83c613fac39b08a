"""
Generic N-dimensional gradient-noise blend (N = 1..4).

The 2^N corners of the unit hypercube around a query point are addressed by a
bit pattern: bit k set means the far node (lo + 1, or its wrapped value) on
axis k. Corner values are blended along axis 0 first, then 1, 2 and 3, by
compile-time recursion on (axis, corner), so the blend tree is fully unrolled
for each dimensionality.

The backward variant carries a (1 + N)-vector per tree node: the value and its
partial derivative along each axis. When blending along axis k, channel k also
picks up the derivative of the smootherstep weight, scaled by the heaviside
mask of that axis.

Author: B.G.
"""

import taichi as ti

from .. import constants as cte
from ..general_algorithms.interpolation import interpolate, interpolate_gradient
from .gradients import random_gradient


@ti.func
def dot_grid_gradient(seed: ti.u32, node, offset) -> cte.FLOAT_TYPE_TI:
    """Contribution of one lattice node: gradient(seed, node) . offset"""
    return random_gradient(seed, node).dot(offset)


@ti.func
def dot_grid_gradient_grad(seed: ti.u32, node, d_offset) -> cte.FLOAT_TYPE_TI:
    """Derivative of the node contribution for an offset perturbation d_offset."""
    return random_gradient(seed, node).dot(d_offset)


@ti.func
def heaviside_mask(frac):
    """1 per axis, 0 where the fractional offset sits on a lattice node."""
    n = ti.static(frac.get_shape()[0])
    h = ti.Vector.zero(cte.FLOAT_TYPE_TI, n)
    for k in ti.static(range(n)):
        if frac[k] >= cte.HEAVISIDE_EPSILON:
            h[k] = 1.0
    return h


@ti.func
def _corner_node(lo, hi, corner: ti.template()):
    node = lo
    for k in ti.static(range(lo.get_shape()[0])):
        if ti.static((corner >> k) & 1):
            node[k] = hi[k]
    return node


@ti.func
def _corner_offset(frac, corner: ti.template()):
    offset = frac
    for k in ti.static(range(frac.get_shape()[0])):
        if ti.static((corner >> k) & 1):
            offset[k] = frac[k] - 1.0
    return offset


@ti.func
def _corner_value(seed: ti.u32, lo, hi, frac, corner: ti.template()) -> cte.FLOAT_TYPE_TI:
    return dot_grid_gradient(seed, _corner_node(lo, hi, corner), _corner_offset(frac, corner))


@ti.func
def _corner_value_grad(seed: ti.u32, lo, hi, frac, heaviside, corner: ti.template()):
    n = ti.static(frac.get_shape()[0])
    # one gradient hash per corner, shared by the value and every partial
    g = random_gradient(seed, _corner_node(lo, hi, corner))
    ret = ti.Vector.zero(cte.FLOAT_TYPE_TI, n + 1)
    ret[0] = g.dot(_corner_offset(frac, corner))
    for k in ti.static(range(n)):
        ret[k + 1] = g[k] * heaviside[k]
    return ret


@ti.func
def _blend_value(seed: ti.u32, lo, hi, frac, axis: ti.template(), corner: ti.template()) -> cte.FLOAT_TYPE_TI:
    ret = ti.cast(0.0, cte.FLOAT_TYPE_TI)
    if ti.static(axis < 0):
        ret = _corner_value(seed, lo, hi, frac, corner)
    else:
        v0 = _blend_value(seed, lo, hi, frac, ti.static(axis - 1), corner)
        v1 = _blend_value(seed, lo, hi, frac, ti.static(axis - 1), ti.static(corner | (1 << axis)))
        ret = interpolate(v0, v1, frac[axis])
    return ret


@ti.func
def _blend_axis(a, b, t, h, axis: ti.template()):
    """Blend two (value, partials) vectors along ``axis``."""
    n = ti.static(a.get_shape()[0] - 1)
    ret = ti.Vector.zero(cte.FLOAT_TYPE_TI, n + 1)
    ret[0] = interpolate(a[0], b[0], t)
    for j in ti.static(range(n)):
        if ti.static(j == axis):
            ret[j + 1] = interpolate_gradient(a[0], b[0], t, a[j + 1], b[j + 1], h)
        else:
            ret[j + 1] = interpolate_gradient(a[0], b[0], t, a[j + 1], b[j + 1], 0.0)
    return ret


@ti.func
def _blend_value_grad(seed: ti.u32, lo, hi, frac, heaviside, axis: ti.template(), corner: ti.template()):
    n = ti.static(frac.get_shape()[0])
    ret = ti.Vector.zero(cte.FLOAT_TYPE_TI, n + 1)
    if ti.static(axis < 0):
        ret = _corner_value_grad(seed, lo, hi, frac, heaviside, corner)
    else:
        a = _blend_value_grad(seed, lo, hi, frac, heaviside, ti.static(axis - 1), corner)
        b = _blend_value_grad(seed, lo, hi, frac, heaviside, ti.static(axis - 1), ti.static(corner | (1 << axis)))
        ret = _blend_axis(a, b, frac[axis], heaviside[axis], axis)
    return ret


@ti.func
def lattice_noise(seed: ti.u32, lo, hi, frac) -> cte.FLOAT_TYPE_TI:
    """
    Blend the 2^N corner contributions of one lattice cell.

    Args:
        seed: Field seed
        lo: Lattice node below the query point on each axis (ti.i32 vector)
        hi: Lattice node above the query point on each axis (ti.i32 vector)
        frac: Fractional offset from ``lo`` on each axis

    Returns:
        Noise value
    """
    n = ti.static(frac.get_shape()[0])
    return _blend_value(seed, lo, hi, frac, n - 1, 0)


@ti.func
def lattice_noise_grad(seed: ti.u32, lo, hi, frac, heaviside):
    """Analytic gradient of lattice_noise with respect to the query point."""
    n = ti.static(frac.get_shape()[0])
    res = _blend_value_grad(seed, lo, hi, frac, heaviside, n - 1, 0)
    return ti.Vector([res[k + 1] for k in ti.static(range(n))])
