"""
Command Line Interface for PyDiffNoise

Terminal access to raster sampling of the noise fields, without writing
Python scripts.

Available Commands:
- noise2npy: Sample a noise (or curl-noise) raster and save it as .npy
- noise2png: Sample a noise raster and save it as PNG

Author: B.G.
"""

_CLI_SUBMODULES = {
    "noise2npy": (".noise_commands", "noise2npy"),
    "noise2png": (".noise_commands", "noise2png"),
}

__all__ = list(_CLI_SUBMODULES.keys())


def __getattr__(name):
    info = _CLI_SUBMODULES.get(name)
    if info is None:
        raise AttributeError(name)
    pkg, attr = info
    import importlib
    mod = importlib.import_module(pkg, __package__)
    obj = getattr(mod, attr)
    globals()[name] = obj
    return obj
