"""
Temporary field pool for PyDiffNoise.

Host wrappers borrow Taichi fields from here instead of allocating new ones on
every call. Fields are keyed by dtype, shape and vector width and handed back
with ``release()``. The cache is dropped whenever Taichi is re-initialised,
since fields do not survive ``ti.init``.

Author: B.G.
"""

import logging

import taichi as ti
from taichi.lang import impl

logger = logging.getLogger(__name__)


class TPField:
    """A pooled Taichi field with an in-use flag."""

    def __init__(self, dtype, shape, n=None):
        self.dtype = dtype
        self.shape = tuple(shape)
        self.n = n
        if n is None:
            self.field = ti.field(dtype, shape=self.shape)
        else:
            self.field = ti.Vector.field(n, dtype, shape=self.shape)
        self.in_use = False

    def release(self):
        """Return the field to the pool."""
        self.in_use = False


class FieldPool:
    def __init__(self):
        self._fields = {}
        self._runtime = None

    def _check_runtime(self):
        runtime = impl.get_runtime()
        if runtime is not self._runtime:
            if self._fields:
                logger.debug("Taichi runtime changed, dropping %d pooled field groups", len(self._fields))
            self._fields = {}
            self._runtime = runtime

    def get_temp_field(self, dtype, shape, n=None):
        """
        Borrow a field of the requested type.

        Args:
            dtype: Taichi data type
            shape: Field shape
            n: Vector width, or None for a scalar field

        Returns:
            TPField: pooled field, call ``release()`` when done
        """
        self._check_runtime()
        key = (str(dtype), tuple(shape), n)
        bucket = self._fields.setdefault(key, [])
        for tpf in bucket:
            if not tpf.in_use:
                tpf.in_use = True
                return tpf

        logger.debug("Allocating pooled field dtype=%s shape=%s n=%s", dtype, tuple(shape), n)
        tpf = TPField(dtype, shape, n)
        tpf.in_use = True
        bucket.append(tpf)
        return tpf

    def clear(self):
        self._fields = {}

    def stats(self):
        """Number of pooled fields and how many are currently borrowed."""
        self._check_runtime()
        total = sum(len(b) for b in self._fields.values())
        used = sum(1 for b in self._fields.values() for f in b if f.in_use)
        return {"total": total, "in_use": used}


_POOL = FieldPool()


def get_temp_field(dtype, shape, n=None):
    return _POOL.get_temp_field(dtype, shape, n)


def clear():
    _POOL.clear()


def stats():
    return _POOL.stats()
