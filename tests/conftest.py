"""Shared fixtures and helpers for CUDA storage tests."""

import pytest

from cuda_storage.buffer import HAS_CUPY


def _has_cuda_device() -> bool:
    if not HAS_CUPY:
        return False
    import cupy as cp

    try:
        return cp.cuda.runtime.getDeviceCount() > 0
    except cp.cuda.runtime.CUDARuntimeError:
        return False


HAS_CUDA = _has_cuda_device()


@pytest.fixture(scope="session")
def device():
    """Session-scoped CUDA device 0."""
    from cuda_storage.device import CudaDevice

    return CudaDevice.new(0)


@pytest.fixture(scope="session")
def backend(device):
    from cuda_storage.backend import CUDAStorageBackend

    return CUDAStorageBackend(device.ordinal)


@pytest.fixture
def fresh_device(device):
    """A new handle on device 0 with its own stream and empty kernel cache."""
    from cuda_storage.device import CudaDevice

    return CudaDevice.new(device.ordinal)
