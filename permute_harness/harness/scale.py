import numpy as np

from ..ir.dtypes import DType

# Width of the scalar argument passed to the engine
SCALAR_CELL_BYTES = 4


def encode_alpha(alpha: float, compute_dtype: DType) -> bytes:
    """
    Packs alpha into the scalar cell the engine reads.

    FP16 compute stores a half in the low two bytes (the rest stays zero);
    any other compute type stores a single-precision float over the full cell.
    """
    cell = bytearray(SCALAR_CELL_BYTES)
    if compute_dtype == DType.FP16:
        raw = np.asarray(alpha, dtype="<f2").tobytes()
    else:
        raw = np.asarray(alpha, dtype="<f4").tobytes()
    cell[: len(raw)] = raw
    return bytes(cell)


def decode_alpha(cell: bytes, compute_dtype: DType) -> float:
    if compute_dtype == DType.FP16:
        return float(np.frombuffer(cell, dtype="<f2", count=1)[0])
    return float(np.frombuffer(cell, dtype="<f4", count=1)[0])
