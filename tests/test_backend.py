"""Tests for CUDAStorageBackend: the host API surface over one device."""

import numpy as np
import numpy.testing as npt
import pytest

from cuda_storage.cpu_storage import CpuStorage
from cuda_storage.dtype import DType
from cuda_storage.errors import RequiresContiguousError, UnsupportedDTypeError
from cuda_storage.storage import CudaStorage
from tests.conftest import HAS_CUDA

pytestmark = pytest.mark.skipif(not HAS_CUDA, reason="CuPy/CUDA not available")


class TestCUDAStorageBackend:
    def test_backend_name(self, backend):
        assert backend.name == "cuda"

    def test_zeros_default_dtype(self, backend):
        buf = backend.zeros((2, 2))
        assert isinstance(buf, CudaStorage)
        assert buf.dtype is DType.F32
        npt.assert_array_equal(backend.to_numpy(buf, (2, 2)), np.zeros((2, 2), dtype=np.float32))

    def test_full(self, backend):
        buf = backend.full(-2.0, (3,), DType.F64)
        npt.assert_array_equal(backend.to_host(buf).data, [-2.0, -2.0, -2.0])

    def test_from_numpy_array(self, backend):
        data = np.arange(6, dtype=np.float64).reshape(2, 3)
        buf = backend.from_host(data)
        assert buf.dtype is DType.F64
        npt.assert_array_equal(backend.to_numpy(buf, (2, 3)), data)

    def test_from_host_casts(self, backend):
        buf = backend.from_host(CpuStorage(np.array([1.5, 2.5])), dtype=DType.F32)
        assert buf.dtype is DType.F32
        npt.assert_array_equal(backend.to_host(buf).data, np.array([1.5, 2.5], dtype=np.float32))

    def test_from_host_rejects_integers(self, backend):
        with pytest.raises(UnsupportedDTypeError):
            backend.from_host(np.array([1, 2, 3]))

    def test_affine(self, backend):
        buf = backend.from_host(np.array([1, 2, 3, 4], dtype=np.float32))
        out = backend.affine(buf, (4,), (1,), 2.0, 1.0)
        npt.assert_array_equal(backend.to_numpy(out), np.array([3, 5, 7, 9], dtype=np.float32))

    def test_affine_non_contiguous(self, backend):
        buf = backend.ones((2, 2))
        with pytest.raises(RequiresContiguousError):
            backend.affine(buf, (2, 2), (1, 2), 1.0, 0.0)

    def test_synchronize(self, backend):
        backend.ones((1 << 16,), DType.F64)
        backend.synchronize()
