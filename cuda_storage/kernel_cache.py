"""Per-device NVRTC kernel cache.

Kernel sources are compiled on first use and the loaded entry point is kept
for the lifetime of the cache. Lookups are lock-free once an entry exists;
misses take the lock and re-check, so concurrent first uses of the same kernel
compile it exactly once and nobody sees a partially inserted entry.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from cuda_storage.buffer import HAS_CUPY, cp, driver_errors
from cuda_storage.config import DEFAULT_CONFIG, CudaConfig
from cuda_storage.errors import CompileError, DriverError, MissingKernelError

logger = logging.getLogger(__name__)

# CUDA_ERROR_NOT_FOUND, returned by cuModuleGetFunction for an unknown name.
_CUDA_ERROR_NOT_FOUND = 500


class KernelCache:
    """Kernel name -> compiled function, for one device.

    Must be used while that device is current: CuPy loads compiled modules
    into the current context.
    """

    def __init__(self, config: CudaConfig = DEFAULT_CONFIG):
        self._config = config
        self._functions: dict[str, Any] = {}
        # Modules stay referenced so their functions remain loaded.
        self._modules: dict[str, Any] = {}
        self._compile_counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def get_or_compile(self, kernel_name: str, source: str) -> Any:
        """Return the entry point ``kernel_name`` from ``source``, compiling on miss."""
        func = self._functions.get(kernel_name)
        if func is not None:
            return func

        with self._lock:
            func = self._functions.get(kernel_name)
            if func is not None:
                return func

            start = time.perf_counter()
            module = self._compile(kernel_name, source)
            self._compile_counts[kernel_name] = self._compile_counts.get(kernel_name, 0) + 1
            func = self._entry_point(module, kernel_name)
            if func is None:
                raise MissingKernelError(kernel_name)

            self._modules[kernel_name] = module
            self._functions[kernel_name] = func
            logger.debug(
                "compiled kernel %s in %.1f ms",
                kernel_name, (time.perf_counter() - start) * 1000,
            )
        return func

    def compile_count(self, kernel_name: str) -> int:
        """How many times ``kernel_name`` has been compiled by this cache."""
        return self._compile_counts.get(kernel_name, 0)

    def names(self) -> list[str]:
        return sorted(self._functions)

    def __contains__(self, kernel_name: str) -> bool:
        return kernel_name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def _compile(self, kernel_name: str, source: str) -> Any:
        if not HAS_CUPY:
            raise DriverError("CuPy is not installed")
        try:
            module = cp.RawModule(
                code=source,
                options=self._config.nvrtc_options,
                backend=self._config.backend,
            )
            with driver_errors():
                module.compile()
        except cp.cuda.compiler.CompileException as exc:
            raise CompileError(kernel_name, str(exc)) from exc
        return module

    def _entry_point(self, module: Any, kernel_name: str) -> Any | None:
        """Look up ``kernel_name`` in a compiled module; None if it is absent."""
        try:
            return module.get_function(kernel_name)
        except cp.cuda.driver.CUDADriverError as exc:
            if exc.status == _CUDA_ERROR_NOT_FOUND:
                return None
            raise DriverError(str(exc)) from exc
