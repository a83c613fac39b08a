"""
Differentiable gradient noise (plain and periodic) for PyDiffNoise.

Three layers, from the inside out:

1. ``ti.func`` primitives to call from your own kernels:
   ``noise_at``, ``noise_grad_at``, ``adj_noise_at`` and the periodic
   ``pnoise_at``, ``pnoise_grad_at``, ``adj_pnoise_at``. Coordinates are ti.Vector of 1 to 4
   components. The seed is a ti.u32 and is not differentiable, neither are
   the periods.
2. Kernels that evaluate those primitives over Taichi vector fields, the
   backward kernels adding ``grad * adj_ret`` into an adjoint field.
3. Host wrappers taking and returning numpy arrays of shape (..., n).

Usage:
    import taichi as ti
    import pydiffnoise as pdn

    ti.init(arch=ti.cpu)
    coords = np.random.rand(1000, 3) * 8.0
    values = pdn.noise.noise(42, coords)
    grads = pdn.noise.noise_backward(42, coords, adj_ret=1.0)

Author: B.G.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from .. import pool
from .lattice import heaviside_mask, lattice_noise, lattice_noise_grad

# Kernel-side period vector, padded to 4 components
periods_t = ti.types.vector(cte.MAX_DIM, ti.i32)


########################################################################
#                       Taichi primitives                              #
########################################################################


@ti.func
def noise_at(seed: ti.u32, x) -> cte.FLOAT_TYPE_TI:
    """Gradient noise at x (ti.Vector of 1 to 4 floats)."""
    fl = ti.floor(x)
    lo = ti.cast(fl, ti.i32)
    return lattice_noise(seed, lo, lo + 1, x - fl)


@ti.func
def noise_grad_at(seed: ti.u32, x):
    """Analytic gradient of noise_at(seed, x) with respect to x."""
    fl = ti.floor(x)
    frac = x - fl
    lo = ti.cast(fl, ti.i32)
    return lattice_noise_grad(seed, lo, lo + 1, frac, heaviside_mask(frac))


@ti.func
def adj_noise_at(seed: ti.u32, x, adj_ret: cte.FLOAT_TYPE_TI):
    """Adjoint contribution of one noise call, to be added to the adjoint of x."""
    return noise_grad_at(seed, x) * adj_ret


@ti.func
def pnoise_at(seed: ti.u32, x, periods) -> cte.FLOAT_TYPE_TI:
    """
    Periodic gradient noise.

    Args:
        seed: Field seed
        x: Coordinate (ti.Vector of 1 to 4 floats)
        periods: Positive integer period per axis (ti.Vector of ti.i32, same size as x)

    Returns:
        Noise value, with pnoise_at(x) == pnoise_at(x + k * periods) for integer k
    """
    fl = ti.floor(x)
    lo = ti.cast(fl, ti.i32) % periods
    return lattice_noise(seed, lo, (lo + 1) % periods, x - fl)


@ti.func
def pnoise_grad_at(seed: ti.u32, x, periods):
    fl = ti.floor(x)
    frac = x - fl
    lo = ti.cast(fl, ti.i32) % periods
    return lattice_noise_grad(seed, lo, (lo + 1) % periods, frac, heaviside_mask(frac))


@ti.func
def adj_pnoise_at(seed: ti.u32, x, periods, adj_ret: cte.FLOAT_TYPE_TI):
    return pnoise_grad_at(seed, x, periods) * adj_ret


@ti.func
def _active_periods(periods: ti.template(), n: ti.template()):
    return ti.Vector([periods[k] for k in ti.static(range(n))])


########################################################################
#                           Kernels                                    #
########################################################################


@ti.kernel
def noise_kernel(seed: ti.u32, coords: ti.template(), out: ti.template()):
    """
    Evaluate noise over a vector field of coordinates.

    Args:
        seed: Field seed
        coords: Taichi vector field (1 to 4 components) of query points
        out: Scalar field of the same shape receiving the noise values
    """
    for I in ti.grouped(coords):
        out[I] = noise_at(seed, coords[I])


@ti.kernel
def noise_backward_kernel(seed: ti.u32, coords: ti.template(), adj_ret: ti.template(), adj_coords: ti.template()):
    """
    Accumulate the adjoint of noise into adj_coords.

    adj_coords[I] += grad(noise)(coords[I]) * adj_ret[I]; existing content of
    adj_coords is kept.
    """
    for I in ti.grouped(coords):
        adj_coords[I] += adj_noise_at(seed, coords[I], adj_ret[I])


@ti.kernel
def pnoise_kernel(seed: ti.u32, coords: ti.template(), periods: periods_t, out: ti.template()):
    n = ti.static(coords.n)
    for I in ti.grouped(coords):
        out[I] = pnoise_at(seed, coords[I], _active_periods(periods, n))


@ti.kernel
def pnoise_backward_kernel(
    seed: ti.u32,
    coords: ti.template(),
    periods: periods_t,
    adj_ret: ti.template(),
    adj_coords: ti.template(),
):
    n = ti.static(coords.n)
    for I in ti.grouped(coords):
        adj_coords[I] += adj_pnoise_at(seed, coords[I], _active_periods(periods, n), adj_ret[I])


########################################################################
#                         Host wrappers                                #
########################################################################


def as_seed(seed) -> int:
    """Reduce any integer seed to the 32-bit unsigned range."""
    return int(seed) & cte.SEED_MASK


def prepare_coords(coords):
    """
    Flatten host coordinates to a contiguous (N, n) array.

    A scalar is a single 1D point; otherwise the last axis holds the
    components.

    Returns:
        tuple: (flat array, batch shape, dimensionality)
    """
    if hasattr(coords, "to_numpy"):
        coords = coords.to_numpy()
    try:
        arr = np.asarray(coords, dtype=cte.FLOAT_TYPE_NP)
    except (TypeError, ValueError) as e:
        raise TypeError(f"coords must be convertible to a float array: {e}")
    if arr.ndim == 0:
        arr = arr.reshape(1)
    dim = arr.shape[-1]
    if not cte.MIN_DIM <= dim <= cte.MAX_DIM:
        raise ValueError(f"Coordinates must have 1 to 4 components on the last axis, got {dim}")
    batch_shape = arr.shape[:-1]
    return np.ascontiguousarray(arr.reshape(-1, dim)), batch_shape, dim


def prepare_periods(periods, dim):
    """Validate periods (an int for every axis, or one int per axis) and pad to 4."""
    p = np.atleast_1d(np.asarray(periods))
    if not np.issubdtype(p.dtype, np.integer):
        raise ValueError("Periods must be integers")
    if p.size == 1:
        p = np.repeat(p, dim)
    if p.ndim != 1 or p.size != dim:
        raise ValueError(f"Expected {dim} periods, got {p.size}")
    if np.any(p <= 0):
        raise ValueError("Periods must be > 0")
    padded = [int(v) for v in p] + [1] * (cte.MAX_DIM - dim)
    return ti.Vector(padded, dt=ti.i32)


def _prepare_adjoint(adj_ret, batch_shape):
    try:
        adj = np.broadcast_to(np.asarray(adj_ret, dtype=cte.FLOAT_TYPE_NP), batch_shape)
    except ValueError:
        raise ValueError(f"adj_ret of shape {np.shape(adj_ret)} does not broadcast to {batch_shape}")
    return np.ascontiguousarray(adj.reshape(-1))


def _check_accumulator(adj_coords, batch_shape, dim):
    shape = batch_shape + (dim,)
    if not isinstance(adj_coords, np.ndarray):
        raise TypeError("adj_coords must be a numpy array")
    if not np.issubdtype(adj_coords.dtype, np.floating):
        raise TypeError(f"adj_coords must hold floats, got {adj_coords.dtype}")
    if adj_coords.shape != shape:
        raise ValueError(f"adj_coords must have shape {shape}, got {adj_coords.shape}")


def _forward(kernel, seed, coords, return_field, periods=None):
    flat, batch_shape, dim = prepare_coords(coords)
    n_points = flat.shape[0]
    if n_points == 0:
        if return_field:
            raise ValueError("Cannot return a Taichi field for an empty set of coordinates")
        return np.zeros(batch_shape, dtype=cte.FLOAT_TYPE_NP)

    coords_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,), n=dim)
    coords_field.field.from_numpy(flat)
    out_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,))

    if periods is None:
        kernel(as_seed(seed), coords_field.field, out_field.field)
    else:
        kernel(as_seed(seed), coords_field.field, prepare_periods(periods, dim), out_field.field)
    coords_field.release()

    if return_field:
        return out_field.field
    result = out_field.field.to_numpy().reshape(batch_shape)
    out_field.release()
    return result


def _backward(kernel, seed, coords, adj_ret, adj_coords, periods=None):
    flat, batch_shape, dim = prepare_coords(coords)
    adj = _prepare_adjoint(adj_ret, batch_shape)
    if adj_coords is not None:
        _check_accumulator(adj_coords, batch_shape, dim)
    n_points = flat.shape[0]
    contribution = np.zeros((n_points, dim), dtype=cte.FLOAT_TYPE_NP)

    if n_points > 0:
        coords_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,), n=dim)
        coords_field.field.from_numpy(flat)
        adj_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,))
        adj_field.field.from_numpy(adj)
        # pooled fields come back dirty
        contrib_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,), n=dim)
        contrib_field.field.fill(0.0)

        if periods is None:
            kernel(as_seed(seed), coords_field.field, adj_field.field, contrib_field.field)
        else:
            kernel(as_seed(seed), coords_field.field, prepare_periods(periods, dim), adj_field.field, contrib_field.field)

        contribution = contrib_field.field.to_numpy()
        coords_field.release()
        adj_field.release()
        contrib_field.release()

    contribution = contribution.reshape(batch_shape + (dim,))
    if adj_coords is None:
        return contribution
    # added in the caller's dtype so earlier content is never rounded
    adj_coords += contribution
    return adj_coords


def noise(seed: int, coords, return_field: bool = False):
    """
    Evaluate gradient noise at a batch of points.

    Args:
        seed: Field seed (any int, reduced modulo 2^32)
        coords: Array of shape (..., n) with n in 1..4; a scalar is one 1D point
        return_field: If True, return a flat Taichi field instead of a numpy array

    Returns:
        numpy.ndarray of shape (...) with the noise values

    Example:
        v = noise(0, [[0.5], [1.25]])          # two 1D points
        v = noise(3, np.random.rand(64, 64, 2) * 4.0)
    """
    return _forward(noise_kernel, seed, coords, return_field)


def noise_backward(seed: int, coords, adj_ret=1.0, adj_coords=None):
    """
    Reverse-mode derivative of noise with respect to the coordinates.

    Args:
        seed: Field seed (not differentiable)
        coords: Array of shape (..., n)
        adj_ret: Upstream adjoint, a scalar or an array broadcastable to (...)
        adj_coords: Optional accumulator of shape (..., n); the contribution
                    grad * adj_ret is added to it in place

    Returns:
        numpy.ndarray of shape (..., n): the accumulator (``adj_coords`` itself
        when given)
    """
    return _backward(noise_backward_kernel, seed, coords, adj_ret, adj_coords)


def pnoise(seed: int, coords, periods, return_field: bool = False):
    """
    Evaluate periodic gradient noise at a batch of points.

    Args:
        seed: Field seed
        coords: Array of shape (..., n) with n in 1..4
        periods: One positive int for all axes, or n positive ints
        return_field: If True, return a flat Taichi field instead of a numpy array

    Returns:
        numpy.ndarray of shape (...), tiling with the given periods
    """
    return _forward(pnoise_kernel, seed, coords, return_field, periods=periods)


def pnoise_backward(seed: int, coords, periods, adj_ret=1.0, adj_coords=None):
    """Reverse-mode derivative of pnoise; see noise_backward. Periods are not differentiable."""
    return _backward(pnoise_backward_kernel, seed, coords, adj_ret, adj_coords, periods=periods)
