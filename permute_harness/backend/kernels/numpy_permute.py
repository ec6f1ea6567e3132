# permute_harness/backend/kernels/numpy_permute.py
import numpy as np

from ..engine import PermuteEngine
from ..registry import EngineRegistry
from ...ir.dtypes import Backend
from ...harness.scale import decode_alpha


def strided_view(buf: np.ndarray, extents, strides) -> np.ndarray:
    """View of buf laid out with element strides (first mode fastest for packed)."""
    byte_strides = tuple(s * buf.itemsize for s in strides)
    return np.lib.stride_tricks.as_strided(buf, shape=extents, strides=byte_strides)


@EngineRegistry.register(Backend.CPU_NUMPY)
class NumpyPermuteEngine(PermuteEngine):
    backend = Backend.CPU_NUMPY

    def _launch(
        self, scale, src, desc_a, modes_a, dst, desc_b, modes_b, compute_dtype, queue
    ):
        alpha = np.dtype(compute_dtype.numpy).type(decode_alpha(scale, compute_dtype))
        perm = [list(modes_a).index(mode) for mode in modes_b]

        src_view = strided_view(src, desc_a.extents, desc_a.strides)
        result = np.transpose(src_view, perm).astype(compute_dtype.numpy) * alpha

        dst_view = strided_view(dst, desc_b.extents, desc_b.strides)
        np.copyto(dst_view, result, casting="unsafe")
