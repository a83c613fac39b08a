"""
Curl noise: divergence-free vector fields built from gradient noise.

2D: the rotated gradient (-dpsi/dy, dpsi/dx) of one noise potential.
3D and 4D: three potentials decorrelated by reseeding, combined as a curl
over the first three axes. The reseeding constants are part of the hash
contract, changing them changes every curl field.

Curl noise is forward-only. Its adjoint is a no-op (see autodiff.py).

Author: B.G.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from .. import pool
from ..general_algorithms.rand import rand_init_offset
from .perlin import as_seed, noise_grad_at, prepare_coords

CURL_RESEED_1 = 10019689
CURL_RESEED_2 = 13112221


@ti.func
def curlnoise_at(seed: ti.u32, x):
    """
    Curl noise at x.

    Args:
        seed: Field seed
        x: ti.Vector of 2, 3 or 4 floats

    Returns:
        ti.Vector of 2 components for a 2D x, 3 components otherwise
    """
    n = ti.static(x.get_shape()[0])
    ti.static_assert(n >= 2, "curl noise needs at least 2 dimensions")
    if ti.static(n == 2):
        g = noise_grad_at(seed, x)
        return ti.Vector([-g[1], g[0]])
    else:
        seed_2 = rand_init_offset(seed, ti.u32(CURL_RESEED_1))
        seed_3 = rand_init_offset(seed_2, ti.u32(CURL_RESEED_2))
        g1 = noise_grad_at(seed, x)
        g2 = noise_grad_at(seed_2, x)
        g3 = noise_grad_at(seed_3, x)
        return ti.Vector([g3[1] - g2[2], g1[2] - g3[0], g2[0] - g1[1]])


@ti.kernel
def curlnoise_kernel(seed: ti.u32, coords: ti.template(), out: ti.template()):
    """
    Evaluate curl noise over a vector field of coordinates.

    Args:
        seed: Field seed
        coords: Vector field of 2 to 4 components
        out: Vector field of the same shape, 2 components for 2D coords, 3 otherwise
    """
    for I in ti.grouped(coords):
        out[I] = curlnoise_at(seed, coords[I])


def _curl_components(dim: int) -> int:
    return 2 if dim == 2 else 3


def curlnoise(seed: int, coords, return_field: bool = False):
    """
    Evaluate curl noise at a batch of points.

    Args:
        seed: Field seed
        coords: Array of shape (..., n) with n in 2..4
        return_field: If True, return a flat Taichi vector field

    Returns:
        numpy.ndarray of shape (..., 2) for 2D input, (..., 3) for 3D and 4D input

    Example:
        velocity = curlnoise(11, particles * 0.5)
    """
    flat, batch_shape, dim = prepare_coords(coords)
    if dim < 2:
        raise ValueError("Curl noise needs 2, 3 or 4 dimensional coordinates")
    n_out = _curl_components(dim)
    n_points = flat.shape[0]
    if n_points == 0:
        if return_field:
            raise ValueError("Cannot return a Taichi field for an empty set of coordinates")
        return np.zeros(batch_shape + (n_out,), dtype=cte.FLOAT_TYPE_NP)

    coords_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,), n=dim)
    coords_field.field.from_numpy(flat)
    out_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,), n=n_out)

    curlnoise_kernel(as_seed(seed), coords_field.field, out_field.field)
    coords_field.release()

    if return_field:
        return out_field.field
    result = out_field.field.to_numpy().reshape(batch_shape + (n_out,))
    out_field.release()
    return result
