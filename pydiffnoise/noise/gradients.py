"""
Lattice gradient hashing for PyDiffNoise.

Every integer lattice node carries a pseudo-random gradient that depends only
on (seed, node). Nothing is stored: the gradient is rehashed on every access.

- 1D: scalar uniform in [-1, 1)
- 2D: unit vector from a uniform angle in [0, 2*pi)
- 3D/4D: normalised vector of independent normal samples

Author: B.G.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from .. import pool
from ..general_algorithms.rand import TWO_PI, box_muller, pcg, randf, randf_range

# One multiplier per axis, combined with XOR after wrapping multiplication
LATTICE_PRIMES = (73856093, 19349663, 53471161, 10000019)


@ti.func
def lattice_hash(node) -> ti.u32:
    """Hash an integer lattice node (ti.Vector of 1 to 4 ti.i32) to 32 bits."""
    n = ti.static(node.get_shape()[0])
    h = ti.u32(0)
    for k in ti.static(range(n)):
        h ^= ti.cast(node[k], ti.u32) * ti.u32(ti.static(LATTICE_PRIMES[k]))
    return h


@ti.func
def random_gradient(seed: ti.u32, node):
    """
    Pseudo-random gradient attached to a lattice node.

    Args:
        seed: Field seed
        node: Integer lattice coordinate (ti.Vector, 1 to 4 components)

    Returns:
        ti.Vector with as many components as ``node``
    """
    n = ti.static(node.get_shape()[0])
    state = seed + lattice_hash(node)
    g = ti.Vector.zero(cte.FLOAT_TYPE_TI, n)

    if ti.static(n == 1):
        state = pcg(state)
        g[0] = randf_range(state, -1.0, 1.0)
    elif ti.static(n == 2):
        state = pcg(state)
        phi = randf_range(state, 0.0, TWO_PI)
        g[0] = ti.cos(phi)
        g[1] = ti.sin(phi)
    else:
        for k in ti.static(range(n)):
            state = pcg(state)
            u1 = randf(state)
            state = pcg(state)
            u2 = randf(state)
            g[k] = box_muller(u1, u2)
        # An all-zero draw stays zero instead of dividing by zero
        length = g.norm()
        if length > 0.0:
            g = g / length

    return g


@ti.kernel
def lattice_gradient_kernel(seed: ti.u32, nodes: ti.template(), gradients: ti.template()):
    for I in ti.grouped(nodes):
        gradients[I] = random_gradient(seed, nodes[I])


def lattice_gradients(seed: int, nodes, return_field: bool = False):
    """
    Evaluate lattice gradients on the host.

    Args:
        seed: Field seed (any int, reduced modulo 2^32)
        nodes: Integer array of shape (..., n) with n in 1..4
        return_field: If True, return the Taichi field instead of a numpy array

    Returns:
        numpy.ndarray of shape (..., n), or a Taichi vector field of shape (N,)

    Example:
        g = lattice_gradients(7, [[0, 0], [1, 0], [0, 1]])
        np.linalg.norm(g, axis=-1)  # -> all ones in 2D
    """
    nodes_np = np.asarray(nodes)
    if nodes_np.ndim == 0:
        nodes_np = nodes_np.reshape(1)
    if not np.issubdtype(nodes_np.dtype, np.integer):
        raise TypeError("Lattice nodes must be integers")
    dim = nodes_np.shape[-1]
    if not cte.MIN_DIM <= dim <= cte.MAX_DIM:
        raise ValueError(f"Lattice nodes must have 1 to 4 components, got {dim}")

    batch_shape = nodes_np.shape[:-1]
    flat = np.ascontiguousarray(nodes_np.reshape(-1, dim).astype(np.int32))
    n_points = flat.shape[0]
    if n_points == 0:
        return np.zeros(batch_shape + (dim,), dtype=cte.FLOAT_TYPE_NP)

    nodes_field = pool.get_temp_field(ti.i32, (n_points,), n=dim)
    nodes_field.field.from_numpy(flat)
    grad_field = pool.get_temp_field(cte.FLOAT_TYPE_TI, (n_points,), n=dim)

    lattice_gradient_kernel(int(seed) & cte.SEED_MASK, nodes_field.field, grad_field.field)
    nodes_field.release()

    if return_field:
        return grad_field.field
    result = grad_field.field.to_numpy().reshape(batch_shape + (dim,))
    grad_field.release()
    return result
