"""Target configuration and kernel launch sizing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CudaConfig:
    """Device-wide constants for compiling and launching kernels."""
    name: str = "cuda"
    max_threads_per_block: int = 1024
    # No fused multiply-add: affine results must round after mul and after add.
    nvrtc_options: tuple[str, ...] = ("--fmad=false",)
    backend: str = "nvrtc"


DEFAULT_CONFIG = CudaConfig()


@dataclass(frozen=True)
class LaunchConfig:
    """Grid/block sizing for a 1D kernel launch."""
    grid_dim: tuple[int, int, int]
    block_dim: tuple[int, int, int]
    shared_mem_bytes: int = 0

    @classmethod
    def for_num_elems(cls, n: int, config: CudaConfig = DEFAULT_CONFIG) -> LaunchConfig:
        """One thread per element, rounded up to whole blocks."""
        block = config.max_threads_per_block
        grid = (n + block - 1) // block
        return cls(grid_dim=(grid, 1, 1), block_dim=(block, 1, 1))

    @property
    def total_threads(self) -> int:
        gx, gy, gz = self.grid_dim
        bx, by, bz = self.block_dim
        return gx * gy * gz * bx * by * bz
