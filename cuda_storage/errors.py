"""Exception types raised by the CUDA storage backend.

Every failure surfaces synchronously to the immediate caller; nothing here is
retried. Driver and compiler failures are raised ``from`` the original CuPy
exception so the underlying message and traceback are preserved.
"""

from __future__ import annotations


class CudaError(RuntimeError):
    """Base class for all CUDA storage errors."""


class DriverError(CudaError):
    """Allocation, copy, launch or device-open failure reported by CUDA."""


class CompileError(CudaError):
    """NVRTC rejected an embedded kernel source."""

    def __init__(self, kernel_name: str, message: str):
        super().__init__(f"failed to compile '{kernel_name}': {message}")
        self.kernel_name = kernel_name


class RequiresContiguousError(CudaError):
    """An operation that assumes linear addressing got a strided layout."""

    def __init__(self, op: str):
        super().__init__(f"{op} only supports contiguous tensors")
        self.op = op


class MissingKernelError(CudaError):
    """Compilation succeeded but the named entry point is not in the module.

    This means the kernel name and the source it was looked up in disagree.
    It is a defect in the kernel table, not a condition to recover from.
    """

    def __init__(self, module_name: str):
        super().__init__(f"missing kernel '{module_name}'")
        self.module_name = module_name


class UnsupportedDTypeError(CudaError, ValueError):
    """Element type outside the supported set."""
