"""CUDA device handle: context, stream and kernel cache for one GPU."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any

import numpy as np

from cuda_storage.buffer import HAS_CUPY, CudaSlice, cp, driver_errors
from cuda_storage.config import DEFAULT_CONFIG, CudaConfig, LaunchConfig
from cuda_storage.cpu_storage import CpuStorage
from cuda_storage.dtype import DType
from cuda_storage.errors import DriverError
from cuda_storage.kernel_cache import KernelCache
from cuda_storage.kernels import FILL_CU, kernel_name
from cuda_storage.shape import Shape
from cuda_storage.storage import CudaStorage

logger = logging.getLogger(__name__)


class _DeviceContext:
    """State shared by every handle to the same device."""

    def __init__(self, ordinal: int, config: CudaConfig):
        self.ordinal = ordinal
        self.config = config
        self.cp_device = cp.cuda.Device(ordinal)
        with self.cp_device:
            self.stream = cp.cuda.Stream(non_blocking=False)
        self.kernels = KernelCache(config)


class CudaDevice:
    """Handle to one CUDA device.

    All work for the device is enqueued on a single stream, so operations on
    storages from this device complete in submission order. Handles are cheap:
    ``clone()`` returns another handle on the same context, stream and cache.
    """

    def __init__(self, context: _DeviceContext):
        self._ctx = context

    @classmethod
    def new(cls, ordinal: int = 0, config: CudaConfig = DEFAULT_CONFIG) -> CudaDevice:
        if not HAS_CUPY:
            raise DriverError("CuPy is not installed. Install with: pip install 'cuda-storage[cuda]'")
        with driver_errors():
            count = cp.cuda.runtime.getDeviceCount()
            if not 0 <= ordinal < count:
                raise DriverError(f"invalid device ordinal {ordinal} ({count} device(s) available)")
            context = _DeviceContext(ordinal, config)
        logger.debug("opened CUDA device %d", ordinal)
        return cls(context)

    def clone(self) -> CudaDevice:
        return CudaDevice(self._ctx)

    @property
    def ordinal(self) -> int:
        return self._ctx.ordinal

    @property
    def config(self) -> CudaConfig:
        return self._ctx.config

    @property
    def stream(self) -> Any:
        """The cupy.cuda.Stream every operation on this device is queued on."""
        return self._ctx.stream

    @property
    def kernel_cache(self) -> KernelCache:
        return self._ctx.kernels

    def __eq__(self, other) -> bool:
        if isinstance(other, CudaDevice):
            return self._ctx is other._ctx
        return NotImplemented

    def __hash__(self) -> int:
        return id(self._ctx)

    def __repr__(self) -> str:
        return f"CudaDevice(ordinal={self.ordinal})"

    @contextmanager
    def _activate(self):
        with self._ctx.cp_device, self._ctx.stream, driver_errors():
            yield

    # -- raw memory -------------------------------------------------------

    def _alloc(self, n: int, dtype: DType) -> CudaSlice:
        """Allocate ``n`` elements WITHOUT initializing them.

        Callers must enqueue a kernel that writes every element before the
        slice escapes to anyone else.
        """
        with self._activate():
            data = cp.empty(n, dtype=dtype.numpy_dtype)
        return CudaSlice(data, self)

    def alloc_zeros(self, n: int, dtype: DType) -> CudaSlice:
        """Allocate ``n`` zeroed elements (memset on the device stream)."""
        with self._activate():
            data = cp.zeros(n, dtype=dtype.numpy_dtype)
        return CudaSlice(data, self)

    def htod_sync_copy(self, host: np.ndarray) -> CudaSlice:
        """Copy a flat host array to a new device slice and wait for it."""
        with self._activate():
            data = cp.empty(host.shape[0], dtype=host.dtype)
            data.set(host, stream=self._ctx.stream)
            self._ctx.stream.synchronize()
        return CudaSlice(data, self)

    def dtoh_sync_copy(self, buf: CudaSlice) -> np.ndarray:
        """Copy a device slice back to host, after all queued work finishes."""
        with self._activate():
            host = buf.data.get(stream=self._ctx.stream)
            self._ctx.stream.synchronize()
        return host

    def synchronize(self) -> None:
        with self._activate():
            self._ctx.stream.synchronize()

    # -- kernels ----------------------------------------------------------

    def _get_or_compile(self, name: str, source: str) -> Any:
        with self._activate():
            return self._ctx.kernels.get_or_compile(name, source)

    def _launch(self, func: Any, cfg: LaunchConfig, params: tuple) -> None:
        """Enqueue ``func`` on the device stream. Returns before it runs."""
        with self._activate():
            func(
                cfg.grid_dim, cfg.block_dim, params,
                shared_mem=cfg.shared_mem_bytes, stream=self._ctx.stream,
            )

    # -- storage factories ------------------------------------------------

    def zeros(self, shape, dtype: DType) -> CudaStorage:
        elem_count = Shape.of(shape).elem_count()
        return CudaStorage(dtype, self.alloc_zeros(elem_count, dtype))

    def constant(self, value: float, shape, dtype: DType) -> CudaStorage:
        """Storage with every element set to ``value`` (cast to ``dtype``)."""
        elem_count = Shape.of(shape).elem_count()
        if elem_count == 0:
            return CudaStorage(dtype, self._alloc(0, dtype))

        func = self._get_or_compile(kernel_name("fill", dtype), FILL_CU)
        cfg = LaunchConfig.for_num_elems(elem_count, self.config)
        # Uninitialized until the fill below is queued ahead of any reader.
        data = self._alloc(elem_count, dtype)
        self._launch(func, cfg, (data.data, dtype.cast(value), np.uint64(elem_count)))
        return CudaStorage(dtype, data)

    def ones(self, shape, dtype: DType) -> CudaStorage:
        return self.constant(1.0, shape, dtype)

    def from_host(self, storage: CpuStorage) -> CudaStorage:
        return CudaStorage(storage.dtype, self.htod_sync_copy(storage.data))
