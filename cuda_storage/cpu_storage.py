"""Host-side storage: a flat numpy buffer of a supported dtype."""

from __future__ import annotations

import numpy as np

from cuda_storage.dtype import DType


class CpuStorage:
    """Flat, C-contiguous host buffer used as transfer source and sink."""

    def __init__(self, data: np.ndarray):
        self._dtype = DType.from_numpy(data.dtype)
        self._data = np.ascontiguousarray(data).reshape(-1)

    @classmethod
    def from_numpy(cls, data: np.ndarray, dtype: DType | None = None) -> CpuStorage:
        """Wrap a numpy array, flattening it and optionally casting to ``dtype``."""
        if dtype is not None and data.dtype != dtype.numpy_dtype:
            data = data.astype(dtype.numpy_dtype)
        return cls(data)

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def data(self) -> np.ndarray:
        return self._data

    def to_numpy(self, shape=None) -> np.ndarray:
        if shape is None:
            return self._data
        return self._data.reshape(tuple(shape))

    def __len__(self) -> int:
        return self._data.shape[0]

    def __repr__(self) -> str:
        return f"CpuStorage({self._dtype.as_str()}, len={len(self)})"
