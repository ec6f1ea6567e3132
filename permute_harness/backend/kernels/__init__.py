# Import engines so they register themselves
from .torch_permute import TorchPermuteEngine, CudaPermuteEngine
from .numpy_permute import NumpyPermuteEngine

__all__ = [
    "TorchPermuteEngine",
    "CudaPermuteEngine",
    "NumpyPermuteEngine",
]
