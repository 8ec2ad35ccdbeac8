"""Element types supported by CUDA storages."""

from __future__ import annotations

from enum import Enum

import numpy as np

from cuda_storage.errors import UnsupportedDTypeError


class DType(Enum):
    F32 = "f32"
    F64 = "f64"

    def as_str(self) -> str:
        """Tag used in kernel entry-point names (``fill_f32``)."""
        return self.value

    @property
    def numpy_dtype(self) -> np.dtype:
        return _NUMPY_DTYPES[self]

    @property
    def c_type(self) -> str:
        return _C_TYPES[self]

    @property
    def size_in_bytes(self) -> int:
        return self.numpy_dtype.itemsize

    def cast(self, value: float) -> np.generic:
        """Convert a Python scalar to this dtype's native precision."""
        return self.numpy_dtype.type(value)

    @classmethod
    def from_numpy(cls, dtype) -> DType:
        dtype = np.dtype(dtype)
        for member, np_dtype in _NUMPY_DTYPES.items():
            if np_dtype == dtype:
                return member
        raise UnsupportedDTypeError(f"unsupported dtype: {dtype}")


_NUMPY_DTYPES = {
    DType.F32: np.dtype(np.float32),
    DType.F64: np.dtype(np.float64),
}

_C_TYPES = {
    DType.F32: "float",
    DType.F64: "double",
}
