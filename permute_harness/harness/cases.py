"""
Default parameter grid for the permutation sweep.

Each case is the tuple (dtype_pair, log_level, lengths, permuted_dims, alpha).
"""

import itertools
from typing import Any, Iterator, Sequence, Tuple

from ..ir.dtypes import DType
from ..backend.engine import LogLevel

DEFAULT_DTYPE_PAIRS = [
    (DType.FP16, DType.FP16),
    (DType.FP32, DType.FP32),
]

DEFAULT_LOG_LEVELS = [LogLevel.ERROR | LogLevel.PERF_TRACE]

# n, c, w, h
DEFAULT_LENGTHS = [
    (5, 6, 7, 8),
    (2, 3, 4, 5),
    (16, 1, 8, 4),
]

DEFAULT_PERMUTED_DIMS = list(itertools.permutations(range(4)))

DEFAULT_ALPHAS = [0.0, 1.0, 2.3]

CaseTuple = Tuple[Any, Any, Sequence[int], Sequence[int], float]


def generate_cases(
    dtype_pairs=None,
    log_levels=None,
    lengths=None,
    permuted_dims=None,
    alphas=None,
) -> Iterator[CaseTuple]:
    """Cross product of the given (or default) parameter lists."""
    yield from itertools.product(
        dtype_pairs or DEFAULT_DTYPE_PAIRS,
        log_levels or DEFAULT_LOG_LEVELS,
        lengths or DEFAULT_LENGTHS,
        permuted_dims or DEFAULT_PERMUTED_DIMS,
        alphas if alphas is not None else DEFAULT_ALPHAS,
    )


def case_id(param: CaseTuple) -> str:
    dtype_pair, _, lengths, permuted_dims, alpha = param
    dtypes = "-".join(getattr(d, "value", str(d)) for d in dtype_pair)
    shape = "x".join(str(d) for d in lengths)
    dims = "".join(str(d) for d in permuted_dims)
    scale = f"{alpha:g}" if isinstance(alpha, (int, float)) else str(alpha)
    return f"{dtypes}_{shape}_p{dims}_a{scale}"
