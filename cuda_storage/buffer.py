"""Device buffers: flat CuPy allocations bound to the device that made them."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import numpy as np

from cuda_storage.errors import DriverError

try:
    import cupy as cp

    HAS_CUPY = True
except ImportError:
    cp = None
    HAS_CUPY = False

if TYPE_CHECKING:
    from cuda_storage.device import CudaDevice

if HAS_CUPY:
    _DRIVER_ERRORS: tuple[type[BaseException], ...] = (
        cp.cuda.runtime.CUDARuntimeError,
        cp.cuda.driver.CUDADriverError,
        cp.cuda.memory.OutOfMemoryError,
    )
else:
    _DRIVER_ERRORS = ()


@contextmanager
def driver_errors():
    """Re-raise CUDA runtime/driver failures as DriverError."""
    try:
        yield
    except _DRIVER_ERRORS as exc:
        raise DriverError(str(exc)) from exc


class CudaSlice:
    """One-dimensional device allocation of a fixed element type.

    The slice keeps a reference to its CudaDevice, so the device (and its
    stream and kernel cache) lives at least as long as any memory on it.
    Memory goes back to CuPy's pool when the slice is collected.
    """

    __slots__ = ("_data", "_device")

    def __init__(self, data: cp.ndarray, device: CudaDevice):
        self._data = data
        self._device = device

    @property
    def data(self) -> Any:
        """The underlying cupy.ndarray."""
        return self._data

    @property
    def device(self) -> CudaDevice:
        return self._device

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def __len__(self) -> int:
        return self._data.shape[0]
