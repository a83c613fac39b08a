"""
Differentiable noise module for PyDiffNoise.

Seeded gradient noise in 1 to 4 dimensions with exact analytic derivatives,
written as Taichi functions that can be embedded in any kernel, plus kernels,
numpy host wrappers and ti.ad.Tape bindings built on top of them.

Noise Types:
- Gradient noise: smootherstep-blended lattice gradients (noise, pnoise)
- Periodic noise: same field tiled with an integer period per axis
- Curl noise: divergence-free 2D/3D vector fields from noise gradients

Layers:
- Taichi scope: noise_at, noise_grad_at, adj_noise_at, pnoise_at,
  pnoise_grad_at, adj_pnoise_at, curlnoise_at, random_gradient
- Kernels: noise_kernel, noise_backward_kernel, pnoise_kernel,
  pnoise_backward_kernel, curlnoise_kernel, lattice_gradient_kernel,
  noise_grid_kernel, curlnoise_grid_kernel
- Host: noise, noise_backward, pnoise, pnoise_backward, curlnoise,
  lattice_gradients, noise_grid, curlnoise_grid
- Autodiff: noise_field, pnoise_field, curlnoise_field

Usage:
    import pydiffnoise as pdn

    values = pdn.noise.noise(42, coords)                # coords: (..., n)
    grads = pdn.noise.noise_backward(42, coords)        # (..., n)
    tiles = pdn.noise.pnoise(42, coords, periods=8)
    flow = pdn.noise.curlnoise(42, coords3d)            # (..., 3)

Author: B.G.
"""

from .gradients import LATTICE_PRIMES, lattice_hash, random_gradient, lattice_gradient_kernel, lattice_gradients
from .lattice import dot_grid_gradient, dot_grid_gradient_grad, heaviside_mask, lattice_noise, lattice_noise_grad
from .perlin import (
    noise_at,
    noise_grad_at,
    adj_noise_at,
    pnoise_at,
    pnoise_grad_at,
    adj_pnoise_at,
    noise_kernel,
    noise_backward_kernel,
    pnoise_kernel,
    pnoise_backward_kernel,
    noise,
    noise_backward,
    pnoise,
    pnoise_backward,
    prepare_periods,
)
from .curl import CURL_RESEED_1, CURL_RESEED_2, curlnoise_at, curlnoise_kernel, curlnoise
from .grid import noise_grid, noise_grid_kernel, curlnoise_grid, curlnoise_grid_kernel
from .autodiff import noise_field, pnoise_field, curlnoise_field

__all__ = [
    "LATTICE_PRIMES",
    "lattice_hash",
    "random_gradient",
    "lattice_gradient_kernel",
    "lattice_gradients",
    "dot_grid_gradient",
    "dot_grid_gradient_grad",
    "heaviside_mask",
    "lattice_noise",
    "lattice_noise_grad",
    "noise_at",
    "noise_grad_at",
    "adj_noise_at",
    "pnoise_at",
    "pnoise_grad_at",
    "adj_pnoise_at",
    "noise_kernel",
    "noise_backward_kernel",
    "pnoise_kernel",
    "pnoise_backward_kernel",
    "noise",
    "noise_backward",
    "pnoise",
    "pnoise_backward",
    "prepare_periods",
    "CURL_RESEED_1",
    "CURL_RESEED_2",
    "curlnoise_at",
    "curlnoise_kernel",
    "curlnoise",
    "noise_grid",
    "noise_grid_kernel",
    "curlnoise_grid",
    "curlnoise_grid_kernel",
    "noise_field",
    "pnoise_field",
    "curlnoise_field",
]
