import io

import numpy as np
import pytest
import torch

from permute_harness.backend.device import DeviceCapabilities
from permute_harness.backend.kernels.torch_permute import TorchPermuteEngine
from permute_harness.backend.memory import PermutationResource
from permute_harness.harness.options import HarnessOptions
from permute_harness.ir.dtypes import Backend, DType


class CountingEngine(TorchPermuteEngine):
    """CPU torch engine that records how often it was dispatched."""

    def __init__(self, device=None):
        super().__init__(device)
        self.calls = 0

    def permute(self, *args, **kwargs):
        self.calls += 1
        return super().permute(*args, **kwargs)


class ZeroingEngine(CountingEngine):
    """Reports success but writes zeros to B."""

    def _launch(self, scale, src, desc_a, modes_a, dst, desc_b, modes_b, compute_dtype, queue):
        dst.zero_()


@pytest.fixture
def engine():
    return CountingEngine()


@pytest.fixture
def zeroing_engine():
    return ZeroingEngine()


@pytest.fixture
def resource():
    return PermutationResource(Backend.CPU_TORCH, seed=1234)


@pytest.fixture
def capabilities():
    return DeviceCapabilities("cpu", f16=True, f32=True, f64=True, memory_bytes=1 << 30)


@pytest.fixture
def stdout():
    return io.StringIO()


@pytest.fixture
def options():
    return HarnessOptions()


@pytest.fixture
def make_buffers():
    return _make_buffers


def _make_buffers(count, dtype: DType, seed=0):
    rng = np.random.default_rng(seed)
    host = rng.uniform(-1.0, 1.0, count).astype(dtype.numpy)
    src = torch.from_numpy(host.copy())
    dst = torch.zeros(count, dtype=dtype.torch)
    return host, src, dst
