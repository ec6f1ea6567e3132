from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple, Sequence

from .dtypes import DType


class ElementwiseOp(Enum):
    IDENTITY = "identity"


def packed_strides(extents: Sequence[int]) -> Tuple[int, ...]:
    """Strides of a packed tensor whose first mode is the fastest varying."""
    strides = []
    stride = 1
    for extent in extents:
        strides.append(stride)
        stride *= extent
    return tuple(strides)


@dataclass(frozen=True)
class TensorDescriptor:
    """
    Shape and type of one operand of a permutation.

    extents[k] is the length along the k-th mode of the operand. When no
    strides are given the tensor is packed with extents[0] varying fastest.
    """

    extents: Tuple[int, ...]
    dtype: DType
    strides: Optional[Tuple[int, ...]] = None
    op: ElementwiseOp = ElementwiseOp.IDENTITY

    def __post_init__(self):
        if self.strides is None:
            object.__setattr__(self, "strides", packed_strides(self.extents))

    @property
    def rank(self) -> int:
        return len(self.extents)

    @property
    def element_count(self) -> int:
        count = 1
        for extent in self.extents:
            count *= extent
        return count

    def __repr__(self):
        shape_str = ",".join(str(d) for d in self.extents)
        return f"<{self.dtype.value} [{shape_str}] {self.op.value}>"
