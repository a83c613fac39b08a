"""Unit tests for lattice gradient hashing."""
import math

import pytest
import numpy as np

MASK = 0xFFFFFFFF
PRIMES = (73856093, 19349663, 53471161, 10000019)


def hash_ref(node):
    h = 0
    for k, v in enumerate(node):
        h ^= ((v & MASK) * PRIMES[k]) & MASK
    return h


class TestLatticeGradients:

    @pytest.mark.unit
    @pytest.mark.gpu
    def test_1d_matches_reference(self, ti_cpu, pcg_reference):
        pcg_ref = pcg_reference
        import pydiffnoise as pdn

        seed = 42
        nodes = np.arange(-5, 6).reshape(-1, 1)
        g = pdn.noise.lattice_gradients(seed, nodes)

        expected = []
        for (v,) in nodes:
            state = pcg_ref((seed + hash_ref([int(v)])) & MASK)
            expected.append(-1.0 + 2.0 * (state >> 8) / 16777216.0)
        np.testing.assert_allclose(g[:, 0], expected, atol=1e-12)
        assert np.all(g >= -1.0) and np.all(g < 1.0)

    @pytest.mark.unit
    @pytest.mark.gpu
    def test_2d_matches_reference(self, ti_cpu, pcg_reference):
        pcg_ref = pcg_reference
        import pydiffnoise as pdn

        seed = 7
        nodes = np.array([[0, 0], [1, 0], [0, 1], [-3, 4], [100, -100]])
        g = pdn.noise.lattice_gradients(seed, nodes)

        for node, grad in zip(nodes, g):
            state = pcg_ref((seed + hash_ref([int(v) for v in node])) & MASK)
            phi = 2.0 * math.pi * (state >> 8) / 16777216.0
            np.testing.assert_allclose(grad, [math.cos(phi), math.sin(phi)], atol=1e-10)

    @pytest.mark.unit
    @pytest.mark.gpu
    @pytest.mark.parametrize("dim", [2, 3, 4])
    def test_unit_norm(self, ti_cpu, dim):
        import pydiffnoise as pdn

        rng = np.random.default_rng(dim)
        nodes = rng.integers(-50, 50, size=(500, dim))
        g = pdn.noise.lattice_gradients(3, nodes)
        np.testing.assert_allclose(np.linalg.norm(g, axis=-1), 1.0, atol=1e-9)

    @pytest.mark.unit
    @pytest.mark.gpu
    def test_deterministic_and_seed_dependent(self, ti_cpu):
        import pydiffnoise as pdn

        nodes = np.array([[i, j, k] for i in range(3) for j in range(3) for k in range(3)])
        a = pdn.noise.lattice_gradients(11, nodes)
        b = pdn.noise.lattice_gradients(11, nodes)
        c = pdn.noise.lattice_gradients(12, nodes)
        np.testing.assert_array_equal(a, b)
        assert not np.allclose(a, c)

    @pytest.mark.unit
    @pytest.mark.gpu
    def test_seed_wraps_to_32_bits(self, ti_cpu):
        import pydiffnoise as pdn

        nodes = [[1, 2], [3, 4]]
        np.testing.assert_array_equal(
            pdn.noise.lattice_gradients(5, nodes),
            pdn.noise.lattice_gradients(5 + 2**32, nodes),
        )

    @pytest.mark.unit
    @pytest.mark.gpu
    def test_batch_shape_kept(self, ti_cpu):
        import pydiffnoise as pdn

        nodes = np.zeros((4, 5, 3), dtype=np.int64)
        assert pdn.noise.lattice_gradients(0, nodes).shape == (4, 5, 3)

    @pytest.mark.unit
    def test_validation(self):
        import pydiffnoise as pdn

        with pytest.raises(TypeError):
            pdn.noise.lattice_gradients(0, [[0.5, 1.0]])
        with pytest.raises(ValueError):
            pdn.noise.lattice_gradients(0, np.zeros((3, 5), dtype=np.int32))


class TestNodeContributions:

    @pytest.mark.unit
    @pytest.mark.gpu
    def test_dot_grid_gradient_helpers(self, ti_cpu):
        ti = ti_cpu
        import pydiffnoise as pdn
        import pydiffnoise.constants as cte
        from pydiffnoise.noise import dot_grid_gradient, dot_grid_gradient_grad, heaviside_mask

        value = ti.field(cte.FLOAT_TYPE_TI, shape=())
        slope = ti.field(cte.FLOAT_TYPE_TI, shape=())
        mask = ti.Vector.field(3, cte.FLOAT_TYPE_TI, shape=())

        @ti.kernel
        def run():
            node = ti.Vector([2, -1, 5])
            value[None] = dot_grid_gradient(ti.u32(6), node, ti.Vector([0.25, -0.5, 0.75]))
            slope[None] = dot_grid_gradient_grad(ti.u32(6), node, ti.Vector([0.0, 1.0, 0.0]))
            mask[None] = heaviside_mask(ti.Vector([0.0, 0.5, 1e-7]))

        run()

        g = pdn.noise.lattice_gradients(6, [[2, -1, 5]])[0]
        assert value[None] == pytest.approx(g @ [0.25, -0.5, 0.75], abs=1e-12)
        assert slope[None] == pytest.approx(g[1], abs=1e-12)
        np.testing.assert_array_equal(mask[None].to_numpy(), [0.0, 1.0, 0.0])
