"""
Pytest configuration and fixtures for PyDiffNoise test suite.

This file contains shared fixtures, test configuration, and utilities
used across the test suite.
"""
import os
import sys
import pytest
import numpy as np

# Kernels run in double precision under test so finite differences stay tight.
# Must be set before pydiffnoise is imported. The 32-bit default is checked in
# a separate interpreter by tests/integration/test_single_precision.py.
os.environ.setdefault("PYDIFFNOISE_PRECISION", "64")


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add the package root to Python path for testing
    package_root = os.path.dirname(os.path.dirname(__file__))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)

    for marker in (
        "unit: fast unit tests",
        "integration: multi-component workflows",
        "slow: long running tests",
        "gpu: tests running Taichi kernels",
        "importtest: import checks",
    ):
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers and ordering."""
    for item in items:
        # Mark import tests for easy selection
        if "import" in item.name.lower() or "test_imports.py" in str(item.fspath):
            item.add_marker("importtest")


@pytest.fixture(scope="session")
def skip_if_no_taichi():
    """Initialise Taichi once on CPU, skip if it is not available."""
    try:
        import taichi as ti
        ti.init(arch=ti.cpu, offline_cache=False)
        return True
    except Exception:
        pytest.skip("Taichi not available or initialization failed")


@pytest.fixture
def ti_cpu(skip_if_no_taichi):
    """
    Make sure a CPU runtime is live.

    CLI commands call ti.init themselves; kernels recompile transparently
    afterwards, so this only guards against a missing runtime.
    """
    import taichi as ti
    return ti


U32_MASK = 0xFFFFFFFF


def pcg_ref(state):
    """Pure-Python PCG step on 32-bit unsigned integers."""
    b = (state * 747796405 + 2891336453) & U32_MASK
    c = (((b >> ((b >> 28) + 4)) ^ b) * 277803737) & U32_MASK
    return (c >> 22) ^ c


@pytest.fixture
def pcg_reference():
    """Provide the reference PCG step."""
    return pcg_ref


class TestDataManager:
    """Helper class for generating query points."""

    @staticmethod
    def random_coords(n, dim, low=0.0, high=4.0, seed=0):
        """Uniform random points in [low, high)^dim."""
        rng = np.random.default_rng(seed)
        return rng.uniform(low, high, size=(n, dim))

    @staticmethod
    def interior_coords(n, dim, low=0.0, high=4.0, seed=0, margin=0.01):
        """
        Random points kept at least ``margin`` away from lattice planes, so
        central differences never straddle the heaviside cut.
        """
        rng = np.random.default_rng(seed)
        cells = rng.integers(int(np.floor(low)), int(np.ceil(high)), size=(n, dim))
        frac = rng.uniform(margin, 1.0 - margin, size=(n, dim))
        return cells + frac


@pytest.fixture
def test_data_manager():
    """Provide access to test data creation utilities."""
    return TestDataManager()


def central_difference(func, coords, eps=1e-4):
    """
    Central-difference gradient of a batched scalar function.

    Args:
        func: Callable mapping (N, dim) points to (N,) values
        coords: (N, dim) points
        eps: Step size

    Returns:
        (N, dim) array of partial derivatives
    """
    coords = np.asarray(coords, dtype=np.float64)
    grad = np.zeros_like(coords)
    for k in range(coords.shape[1]):
        step = np.zeros(coords.shape[1])
        step[k] = eps
        grad[:, k] = (func(coords + step) - func(coords - step)) / (2.0 * eps)
    return grad


@pytest.fixture
def fd_gradient():
    """Provide the central-difference helper."""
    return central_difference
