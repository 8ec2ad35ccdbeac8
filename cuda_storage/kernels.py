"""Embedded CUDA kernel sources for the elementwise storage ops.

Each source is compiled via NVRTC on first use. Every supported dtype gets an
``extern "C"`` entry point named ``{op}_{dtype}``; the kernel cache looks the
function up under exactly that name.
"""

from __future__ import annotations

from cuda_storage.dtype import DType

# Grid-stride loop: correct for any grid size, including one smaller than numel.
_FILL_TEMPLATE = r"""
template<typename T>
__device__ void fill_with(T *buf, T value, const size_t numel) {
    for (size_t i = blockIdx.x * blockDim.x + threadIdx.x; i < numel; i += blockDim.x * gridDim.x) {
        buf[i] = value;
    }
}
"""

_FILL_ENTRY = (
    'extern "C" __global__ void fill_{tag}({t} *buf, {t} value, const size_t numel) '
    "{{ fill_with(buf, value, numel); }}\n"
)

# One element per thread; the launch must cover numel threads.
_AFFINE_TEMPLATE = r"""
template<typename T>
__device__ void affine_with(const size_t numel, const T *x, T *y, const T mul, const T add) {
    size_t i = (size_t)blockIdx.x * blockDim.x + threadIdx.x;
    if (i >= numel) {
        return;
    }
    y[i] = x[i] * mul + add;
}
"""

_AFFINE_ENTRY = (
    'extern "C" __global__ void affine_{tag}(const size_t numel, const {t} *x, {t} *y, const {t} mul, const {t} add) {{\n'
    "    affine_with(numel, x, y, mul, add);\n"
    "}}\n"
)


def _instantiate(template: str, entry: str) -> str:
    """Append one ``extern "C"`` entry point per supported dtype."""
    return template + "".join(entry.format(tag=dt.as_str(), t=dt.c_type) for dt in DType)


FILL_CU = _instantiate(_FILL_TEMPLATE, _FILL_ENTRY)
AFFINE_CU = _instantiate(_AFFINE_TEMPLATE, _AFFINE_ENTRY)

KERNEL_SOURCES: dict[str, str] = {
    "fill": FILL_CU,
    "affine": AFFINE_CU,
}


def kernel_name(op: str, dtype: DType) -> str:
    """Cache key and entry-point name for ``op`` instantiated at ``dtype``."""
    return f"{op}_{dtype.as_str()}"


def kernel_source(op: str) -> str:
    return KERNEL_SOURCES[op]
