"""
Integration tests for basic PyDiffNoise workflows.

These tests verify that core components work together properly
and basic workflows can be executed end to end.
"""
import pytest
import numpy as np


class TestOptimisationWorkflow:
    """Use the analytic derivative to drive points downhill in a noise field."""

    @pytest.mark.integration
    @pytest.mark.gpu
    def test_gradient_descent_lowers_noise(self, ti_cpu, test_data_manager):
        import pydiffnoise as pdn

        points = test_data_manager.interior_coords(64, 3, 0.0, 6.0, seed=3)
        start = pdn.noise.noise(13, points)

        for _ in range(30):
            points = points - 0.05 * pdn.noise.noise_backward(13, points)

        end = pdn.noise.noise(13, points)
        assert np.mean(end) < np.mean(start)

    @pytest.mark.integration
    @pytest.mark.gpu
    def test_custom_kernel_with_taichi_primitives(self, ti_cpu):
        """noise_at and noise_grad_at compose inside user kernels."""
        ti = ti_cpu
        import pydiffnoise as pdn
        import pydiffnoise.constants as cte
        from pydiffnoise.noise import noise_at, noise_grad_at

        n = 100
        pos = ti.Vector.field(2, cte.FLOAT_TYPE_TI, shape=n)
        value = ti.field(cte.FLOAT_TYPE_TI, shape=n)
        slope = ti.field(cte.FLOAT_TYPE_TI, shape=n)
        coords = np.random.default_rng(0).uniform(0.0, 10.0, size=(n, 2))
        pos.from_numpy(coords)

        @ti.kernel
        def evaluate():
            for i in pos:
                value[i] = noise_at(ti.u32(77), pos[i])
                slope[i] = noise_grad_at(ti.u32(77), pos[i]).norm()

        evaluate()

        np.testing.assert_allclose(value.to_numpy(), pdn.noise.noise(77, coords), atol=1e-12)
        np.testing.assert_allclose(
            slope.to_numpy(), np.linalg.norm(pdn.noise.noise_backward(77, coords), axis=-1), atol=1e-12
        )


class TestAdvectionWorkflow:
    """Advect particles through a curl-noise flow field."""

    @pytest.mark.integration
    @pytest.mark.slow
    @pytest.mark.gpu
    def test_particles_stay_finite_and_move(self, ti_cpu, test_data_manager):
        import pydiffnoise as pdn

        particles = test_data_manager.random_coords(256, 3, 0.0, 4.0, seed=5)
        start = particles.copy()
        for _ in range(20):
            particles = particles + 0.05 * pdn.noise.curlnoise(3, particles)

        assert np.all(np.isfinite(particles))
        assert np.mean(np.linalg.norm(particles - start, axis=-1)) > 0.0


class TestRasterWorkflow:
    """Sample, save and reload rasters."""

    @pytest.mark.integration
    @pytest.mark.gpu
    def test_texture_to_png(self, ti_cpu, tmp_path):
        from PIL import Image
        import pydiffnoise as pdn

        texture = pdn.noise.noise_grid(64, 32, frequency=4, seed=1, tileable=True)
        path = tmp_path / "texture.png"
        pdn.misc.save_png(texture, str(path), uint=True)

        with Image.open(path) as img:
            pixels = np.asarray(img)
        assert pixels.shape == (32, 64)
        assert pixels.min() == 0 and pixels.max() == 255

    @pytest.mark.integration
    @pytest.mark.gpu
    def test_flow_field_to_npy(self, ti_cpu, tmp_path):
        import pydiffnoise as pdn

        flow = pdn.noise.curlnoise_grid(16, 16, frequency=2.0, seed=8)
        path = tmp_path / "flow.npy"
        pdn.misc.save_numpy(flow, str(path))
        np.testing.assert_array_equal(np.load(path), flow)
