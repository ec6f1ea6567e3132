from .dtypes import DType, Backend, KernelUnavailableError
from .descriptor import TensorDescriptor, ElementwiseOp, packed_strides

__all__ = [
    "DType",
    "Backend",
    "KernelUnavailableError",
    "TensorDescriptor",
    "ElementwiseOp",
    "packed_strides",
]
