import math
from typing import Any, Tuple

import numpy as np
import torch

from ..config import TOLERANCE


def _as_flat_tensor(buf: Any) -> torch.Tensor:
    if isinstance(buf, np.ndarray):
        buf = torch.from_numpy(np.ascontiguousarray(buf))
    return buf.reshape(-1)


def compare_with_tolerance(
    buf_a: Any, buf_b: Any, element_count: int, tolerance: float = TOLERANCE
) -> Tuple[bool, float]:
    """
    Compares the first element_count elements of two buffers.

    The relative error of each pair is |a - b| / (|a| + |b| + 1). The check
    passes when the worst error is not NaN and does not exceed
    tolerance * eps of the element type. Buffers may be numpy arrays or
    torch tensors (on any device); the reduction runs where buf_a lives.
    """
    a = _as_flat_tensor(buf_a)
    b = _as_flat_tensor(buf_b).to(a.device)

    if a.numel() < element_count or b.numel() < element_count:
        return False, math.inf
    if element_count == 0:
        return True, 0.0

    eps = torch.finfo(a.dtype).eps

    a = a[:element_count].to(torch.float64)
    b = b[:element_count].to(torch.float64)

    numerator = (a - b).abs()
    divisor = a.abs() + b.abs() + 1.0
    relative = numerator / divisor
    relative = torch.where(
        torch.isinf(numerator) | torch.isinf(divisor),
        torch.full_like(relative, math.inf),
        relative,
    )

    max_relative_error = float(relative.max().item())
    passed = not (
        math.isnan(max_relative_error) or max_relative_error > eps * tolerance
    )
    return passed, max_relative_error
