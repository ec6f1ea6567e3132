import math
from enum import Enum
from typing import Sequence

import numpy as np
import torch


class KernelUnavailableError(RuntimeError):
    """Raised when a permute engine is not available for the requested backend."""


class DType(Enum):
    FP16 = "float16"
    FP32 = "float32"
    FP64 = "float64"

    @property
    def itemsize(self) -> int:
        """Returns the number of bytes per element."""
        return {
            DType.FP16: 2,
            DType.FP32: 4,
            DType.FP64: 8,
        }[self]

    @property
    def numpy(self):
        return {
            DType.FP16: np.float16,
            DType.FP32: np.float32,
            DType.FP64: np.float64,
        }[self]

    @property
    def torch(self) -> torch.dtype:
        return {
            DType.FP16: torch.float16,
            DType.FP32: torch.float32,
            DType.FP64: torch.float64,
        }[self]

    @property
    def eps(self) -> float:
        """Machine epsilon of the element type."""
        return float(np.finfo(self.numpy).eps)


# Element types a permutation case may store its tensors in
SUPPORTED_ELEMENT_TYPES = (DType.FP16, DType.FP32)

# Precisions the scale factor can be encoded in
SUPPORTED_COMPUTE_TYPES = (DType.FP16, DType.FP32)


def get_size_bytes(lengths: Sequence[int], dtype: DType) -> int:
    """Total byte size of a packed tensor with the given extents."""
    if any(d is None or d < 0 for d in lengths):
        raise ValueError(f"Cannot calculate byte size for shape: {tuple(lengths)}")
    return math.prod(lengths) * dtype.itemsize


class Backend(Enum):
    CPU_NUMPY = "cpu_numpy"
    CPU_TORCH = "cpu_torch"
    GPU_TORCH = "gpu_torch"

    @property
    def device(self) -> str:
        return "cuda" if self == Backend.GPU_TORCH else "cpu"
