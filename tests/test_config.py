"""Tests for target configuration and launch sizing."""

import dataclasses

import pytest

from cuda_storage.config import DEFAULT_CONFIG, CudaConfig, LaunchConfig


class TestLaunchConfig:
    @pytest.mark.parametrize("n", [1, 4, 1023, 1024, 1025, 1_000_000])
    def test_covers_all_elements(self, n):
        cfg = LaunchConfig.for_num_elems(n)
        assert cfg.total_threads >= n
        # No block beyond the one that holds the last element.
        assert cfg.total_threads - n < cfg.block_dim[0]

    def test_default_block_size(self):
        cfg = LaunchConfig.for_num_elems(10)
        assert cfg.block_dim == (1024, 1, 1)
        assert cfg.grid_dim == (1, 1, 1)
        assert cfg.shared_mem_bytes == 0

    def test_custom_block_size(self):
        config = CudaConfig(max_threads_per_block=256)
        cfg = LaunchConfig.for_num_elems(1000, config)
        assert cfg.block_dim == (256, 1, 1)
        assert cfg.grid_dim == (4, 1, 1)

    def test_deterministic(self):
        assert LaunchConfig.for_num_elems(4097) == LaunchConfig.for_num_elems(4097)


class TestCudaConfig:
    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.max_threads_per_block = 32

    def test_disables_fused_multiply_add(self):
        assert "--fmad=false" in DEFAULT_CONFIG.nvrtc_options
