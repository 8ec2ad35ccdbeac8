"""CUDA storage: device-resident typed buffers with JIT-compiled elementwise kernels."""

from cuda_storage.backend import CUDAStorageBackend as CUDAStorageBackend
from cuda_storage.buffer import HAS_CUPY as HAS_CUPY
from cuda_storage.config import DEFAULT_CONFIG as DEFAULT_CONFIG
from cuda_storage.config import CudaConfig as CudaConfig
from cuda_storage.config import LaunchConfig as LaunchConfig
from cuda_storage.cpu_storage import CpuStorage as CpuStorage
from cuda_storage.device import CudaDevice as CudaDevice
from cuda_storage.dtype import DType as DType
from cuda_storage.errors import CompileError as CompileError
from cuda_storage.errors import CudaError as CudaError
from cuda_storage.errors import DriverError as DriverError
from cuda_storage.errors import MissingKernelError as MissingKernelError
from cuda_storage.errors import RequiresContiguousError as RequiresContiguousError
from cuda_storage.errors import UnsupportedDTypeError as UnsupportedDTypeError
from cuda_storage.kernel_cache import KernelCache as KernelCache
from cuda_storage.shape import Shape as Shape
from cuda_storage.storage import CudaStorage as CudaStorage
