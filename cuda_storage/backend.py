"""CUDA storage backend: the host-facing API bound to one device.

Wraps CudaDevice/CudaStorage so callers can work in terms of numpy arrays and
shapes without touching device handles directly.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from cuda_storage.config import DEFAULT_CONFIG, CudaConfig
from cuda_storage.cpu_storage import CpuStorage
from cuda_storage.device import CudaDevice
from cuda_storage.dtype import DType
from cuda_storage.storage import CudaStorage


class CUDAStorageBackend:
    """Allocates, fills, transforms and transfers CudaStorage on one GPU."""

    def __init__(self, device_id: int = 0, config: CudaConfig = DEFAULT_CONFIG):
        self._device = CudaDevice.new(device_id, config)

    @property
    def name(self) -> str:
        return self._device.config.name

    @property
    def device(self) -> CudaDevice:
        return self._device

    def zeros(self, shape, dtype: DType = DType.F32) -> CudaStorage:
        return self._device.zeros(shape, dtype)

    def ones(self, shape, dtype: DType = DType.F32) -> CudaStorage:
        return self._device.ones(shape, dtype)

    def full(self, value: float, shape, dtype: DType = DType.F32) -> CudaStorage:
        return self._device.constant(value, shape, dtype)

    def from_host(self, data: CpuStorage | np.ndarray, dtype: DType | None = None) -> CudaStorage:
        """Upload a CpuStorage or numpy array (flattened, optionally cast)."""
        if not isinstance(data, CpuStorage):
            data = CpuStorage.from_numpy(np.asarray(data), dtype=dtype)
        elif dtype is not None and data.dtype is not dtype:
            data = CpuStorage.from_numpy(data.data, dtype=dtype)
        return self._device.from_host(data)

    def affine(
        self,
        storage: CudaStorage,
        shape,
        stride: Sequence[int],
        mul: float,
        add: float,
    ) -> CudaStorage:
        return storage.affine(shape, stride, mul, add)

    def to_host(self, storage: CudaStorage) -> CpuStorage:
        return storage.to_host()

    def to_numpy(self, storage: CudaStorage, shape=None) -> np.ndarray:
        """Download to a numpy array, reshaped to ``shape`` if given."""
        return storage.to_numpy(shape)

    def synchronize(self) -> None:
        self._device.synchronize()
