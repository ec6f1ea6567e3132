"""
File: permute_harness/harness/params.py

Turns the positional case tuple
(dtype_pair, log_level, lengths, permuted_dims, alpha) into named fields.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from ..ir.dtypes import DType, SUPPORTED_ELEMENT_TYPES
from ..backend.engine import LogLevel

# n, c, w, h
TENSOR_RANK = 4


class ParameterDecodeError(ValueError):
    """One or more fields of a case tuple are malformed."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


@dataclass(frozen=True)
class PermutationParams:
    element_dtype: DType
    compute_dtype: DType
    log_level: LogLevel
    lengths: Tuple[int, ...]
    permuted_dims: Tuple[int, ...]
    alpha: float

    @property
    def element_count(self) -> int:
        return math.prod(self.lengths)

    @property
    def case_id(self) -> str:
        lengths = "x".join(str(d) for d in self.lengths)
        dims = "".join(str(d) for d in self.permuted_dims)
        return (
            f"{self.element_dtype.value}-{self.compute_dtype.value}"
            f"_{lengths}_p{dims}_a{self.alpha:g}"
        )


def _as_dtype(value: Any) -> DType:
    if isinstance(value, DType):
        return value
    return DType(value)


def _check_length(
    errors: List[str], name: str, value: Sequence, expected: int
) -> bool:
    try:
        size = len(value)
    except TypeError:
        errors.append(f"{name} must be a sequence, got {type(value).__name__}")
        return False
    if size != expected:
        errors.append(f"{name} must have {expected} entries, got {size}")
        return False
    return True


def _as_ints(errors: List[str], name: str, values: Sequence) -> Tuple[int, ...]:
    result = []
    for i, value in enumerate(values):
        try:
            as_int = int(value)
        except (TypeError, ValueError, OverflowError):
            errors.append(f"{name}[{i}] must be an integer, got {value!r}")
            continue
        if as_int != value:
            errors.append(f"{name}[{i}] must be an integer, got {value!r}")
            continue
        result.append(as_int)
    return tuple(result)


def decode_params(param: Sequence[Any]) -> PermutationParams:
    if len(param) != 5:
        raise ParameterDecodeError(
            [f"case tuple must have 5 fields, got {len(param)}"]
        )

    dtype_pair, log_level, lengths, permuted_dims, alpha = param

    errors: List[str] = []
    if _check_length(errors, "lengths", lengths, TENSOR_RANK):
        lengths = _as_ints(errors, "lengths", lengths)
    # Not checked for being a permutation of 0..3
    if _check_length(errors, "permuted_dims", permuted_dims, TENSOR_RANK):
        permuted_dims = _as_ints(errors, "permuted_dims", permuted_dims)
    pair_ok = _check_length(errors, "dtype_pair", dtype_pair, 2)

    element_dtype = compute_dtype = None
    if pair_ok:
        try:
            element_dtype = _as_dtype(dtype_pair[0])
        except ValueError:
            errors.append(f"unknown element type {dtype_pair[0]!r}")
        else:
            if element_dtype not in SUPPORTED_ELEMENT_TYPES:
                errors.append(f"element type {element_dtype.value} is not supported")
        try:
            compute_dtype = _as_dtype(dtype_pair[1])
        except ValueError:
            errors.append(f"unknown compute type {dtype_pair[1]!r}")

    try:
        level = LogLevel(int(log_level))
    except (TypeError, ValueError):
        errors.append(f"invalid log level {log_level!r}")

    try:
        alpha = float(alpha)
    except (TypeError, ValueError, OverflowError):
        errors.append(f"alpha must be a number, got {alpha!r}")

    if errors:
        raise ParameterDecodeError(errors)

    return PermutationParams(
        element_dtype=element_dtype,
        compute_dtype=compute_dtype,
        log_level=level,
        lengths=lengths,
        permuted_dims=permuted_dims,
        alpha=alpha,
    )
