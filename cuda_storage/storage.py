"""Typed device storage: a CudaSlice tagged with its element type."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from cuda_storage.buffer import CudaSlice
from cuda_storage.config import LaunchConfig
from cuda_storage.cpu_storage import CpuStorage
from cuda_storage.dtype import DType
from cuda_storage.errors import RequiresContiguousError
from cuda_storage.kernels import AFFINE_CU, kernel_name
from cuda_storage.shape import Shape

if TYPE_CHECKING:
    from cuda_storage.device import CudaDevice


class CudaStorage:
    """Fully initialized device memory of one supported dtype.

    The constructor is package-internal: callers get instances from the
    factories on CudaDevice (zeros, constant, ones, from_host) and from the ops
    below, each of which queues the write that populates the buffer first.
    """

    __slots__ = ("_dtype", "_slice")

    def __init__(self, dtype: DType, data: CudaSlice):
        if data.dtype != dtype.numpy_dtype:
            raise TypeError(
                f"{dtype.as_str()} storage cannot wrap a {data.dtype} buffer"
            )
        self._dtype = dtype
        self._slice = data

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def device(self) -> CudaDevice:
        return self._slice.device

    @property
    def buffer(self) -> CudaSlice:
        return self._slice

    @property
    def elem_count(self) -> int:
        return len(self._slice)

    def __len__(self) -> int:
        return len(self._slice)

    def __repr__(self) -> str:
        return f"CudaStorage({self._dtype.as_str()}, len={len(self)}, device={self.device.ordinal})"

    def affine(self, shape, stride: Sequence[int], mul: float, add: float) -> CudaStorage:
        """New storage holding ``x * mul + add`` at this storage's precision."""
        shape = Shape.of(shape)
        if not shape.is_contiguous(stride):
            raise RequiresContiguousError("affine")
        elem_count = shape.elem_count()
        if elem_count != len(self):
            raise ValueError(f"{shape} does not describe a storage of {len(self)} elements")

        dev = self.device
        dtype = self._dtype
        if elem_count == 0:
            return CudaStorage(dtype, dev._alloc(0, dtype))

        func = dev._get_or_compile(kernel_name("affine", dtype), AFFINE_CU)
        cfg = LaunchConfig.for_num_elems(elem_count, dev.config)
        # Uninitialized until the affine kernel below is queued.
        out = dev._alloc(elem_count, dtype)
        params = (
            np.uint64(elem_count), self._slice.data, out.data,
            dtype.cast(mul), dtype.cast(add),
        )
        dev._launch(func, cfg, params)
        return CudaStorage(dtype, out)

    def to_host(self) -> CpuStorage:
        return CpuStorage(self.device.dtoh_sync_copy(self._slice))

    def to_numpy(self, shape=None) -> np.ndarray:
        return self.to_host().to_numpy(shape)
