# permute_harness/backend/kernels/torch_permute.py
import contextlib

import torch

from ..engine import PermuteEngine
from ..registry import EngineRegistry
from ...ir.dtypes import Backend
from ...harness.scale import decode_alpha


@EngineRegistry.register(Backend.CPU_TORCH)
class TorchPermuteEngine(PermuteEngine):
    backend = Backend.CPU_TORCH

    def _launch(
        self, scale, src, desc_a, modes_a, dst, desc_b, modes_b, compute_dtype, queue
    ):
        alpha = decode_alpha(scale, compute_dtype)

        # Mode k of B is axis perm[k] of A
        perm = [list(modes_a).index(mode) for mode in modes_b]

        stream_ctx = contextlib.nullcontext()
        if queue is not None and src.is_cuda:
            stream_ctx = torch.cuda.stream(queue)

        with stream_ctx:
            src_view = torch.as_strided(src, desc_a.extents, desc_a.strides)
            result = src_view.permute(perm).to(compute_dtype.torch) * alpha
            dst_view = torch.as_strided(dst, desc_b.extents, desc_b.strides)
            dst_view.copy_(result)


@EngineRegistry.register(Backend.GPU_TORCH)
class CudaPermuteEngine(TorchPermuteEngine):
    backend = Backend.GPU_TORCH

    @classmethod
    def is_available(cls) -> bool:
        return torch.cuda.is_available()
