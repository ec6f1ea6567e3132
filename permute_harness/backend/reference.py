"""
File: permute_harness/backend/reference.py
"""

from typing import Sequence

import numpy as np

from ..ir.dtypes import DType
from ..ir.descriptor import TensorDescriptor
from ..harness.scale import decode_alpha


def permute_reference(
    scale: bytes,
    src: np.ndarray,
    desc_a: TensorDescriptor,
    modes_a: Sequence[str],
    dst: np.ndarray,
    desc_b: TensorDescriptor,
    modes_b: Sequence[str],
    compute_dtype: DType,
) -> None:
    """
    Host reference for B[modes_b] = alpha * A[modes_a].

    Walks every destination element, recovers its coordinate per mode label
    and gathers the source element with the same labelled coordinate. The
    product is formed in the compute precision and stored in the element
    precision of B.
    """
    alpha = np.dtype(compute_dtype.numpy).type(decode_alpha(scale, compute_dtype))
    count = desc_b.element_count

    # Destination coordinates, first mode fastest
    dst_coords = np.unravel_index(np.arange(count), desc_b.extents, order="F")
    coord_of = dict(zip(modes_b, dst_coords))

    src_offsets = sum(coord_of[mode] * s for mode, s in zip(modes_a, desc_a.strides))
    dst_offsets = sum(c * s for c, s in zip(dst_coords, desc_b.strides))

    values = src[src_offsets].astype(compute_dtype.numpy) * alpha
    dst[dst_offsets] = values.astype(desc_b.dtype.numpy)
