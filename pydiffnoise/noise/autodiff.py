"""
Reverse-mode bindings for ti.ad.Tape.

Taichi would otherwise differentiate the noise kernels statement by statement.
These ``ti.ad.grad_replaced`` entry points make the tape call the analytic
backward kernels instead: they read the adjoint of the output field and add
into the adjoint of the coordinate field.

Usage:
    coords = ti.Vector.field(3, ti.f32, shape=n, needs_grad=True)
    out = ti.field(ti.f32, shape=n, needs_grad=True)
    loss = ti.field(ti.f32, shape=(), needs_grad=True)

    with ti.ad.Tape(loss=loss):
        noise_field(seed, coords, out)
        reduce(out, loss)

    coords.grad  # d loss / d coords

Seeds and periods are plain values and receive no adjoint.

Author: B.G.
"""

import taichi as ti

from .curl import curlnoise_kernel
from .perlin import noise_backward_kernel, noise_kernel, pnoise_backward_kernel, pnoise_kernel


@ti.ad.grad_replaced
def noise_field(seed, coords, out):
    """out[I] = noise(seed, coords[I]), differentiable with respect to coords."""
    noise_kernel(seed, coords, out)


@ti.ad.grad_for(noise_field)
def noise_field_grad(seed, coords, out):
    noise_backward_kernel(seed, coords, out.grad, coords.grad)


@ti.ad.grad_replaced
def pnoise_field(seed, coords, periods, out):
    """
    out[I] = pnoise(seed, coords[I], periods), differentiable with respect to coords.

    ``periods`` is a 4-component ti.i32 vector, see perlin.prepare_periods.
    """
    pnoise_kernel(seed, coords, periods, out)


@ti.ad.grad_for(pnoise_field)
def pnoise_field_grad(seed, coords, periods, out):
    pnoise_backward_kernel(seed, coords, periods, out.grad, coords.grad)


@ti.ad.grad_replaced
def curlnoise_field(seed, coords, out):
    """out[I] = curlnoise(seed, coords[I]). No gradient flows back to coords."""
    curlnoise_kernel(seed, coords, out)


@ti.ad.grad_for(curlnoise_field)
def curlnoise_field_grad(seed, coords, out):
    pass
