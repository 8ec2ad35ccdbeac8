"""Tests for embedded kernel sources and their naming contract."""

import re

import pytest

from cuda_storage.dtype import DType
from cuda_storage.kernels import AFFINE_CU, FILL_CU, KERNEL_SOURCES, kernel_name, kernel_source


def _entry_points(source: str) -> set[str]:
    return set(re.findall(r'extern "C" __global__ void (\w+)\(', source))


class TestKernelNames:
    def test_format(self):
        assert kernel_name("fill", DType.F32) == "fill_f32"
        assert kernel_name("affine", DType.F64) == "affine_f64"

    def test_no_collisions(self):
        names = [kernel_name(op, dt) for op in KERNEL_SOURCES for dt in DType]
        assert len(names) == len(set(names))

    @pytest.mark.parametrize("op", sorted(KERNEL_SOURCES))
    @pytest.mark.parametrize("dtype", list(DType))
    def test_every_name_has_an_entry_point(self, op, dtype):
        assert kernel_name(op, dtype) in _entry_points(kernel_source(op))


class TestKernelSources:
    def test_fill_uses_grid_stride_loop(self):
        assert "blockDim.x * gridDim.x" in FILL_CU

    def test_affine_is_bounds_checked(self):
        assert "if (i >= numel)" in AFFINE_CU

    def test_entry_point_signatures_match_dtype(self):
        for dtype in DType:
            sig = re.search(rf"void affine_{dtype.as_str()}\(([^)]*)\)", AFFINE_CU).group(1)
            assert f"const {dtype.c_type} *x" in sig
            assert f"const {dtype.c_type} mul" in sig
            sig = re.search(rf"void fill_{dtype.as_str()}\(([^)]*)\)", FILL_CU).group(1)
            assert f"{dtype.c_type} value" in sig
