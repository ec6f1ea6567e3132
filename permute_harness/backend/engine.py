"""
File: permute_harness/backend/engine.py

Contract shared by every permute engine: status codes, log levels, the
per-case handle and the argument validation done before a launch.
"""

from enum import Enum, IntFlag
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from ..ir.dtypes import DType, Backend, SUPPORTED_COMPUTE_TYPES
from ..ir.descriptor import TensorDescriptor, ElementwiseOp
from ..harness.scale import SCALAR_CELL_BYTES
from ..config import DEBUG_EXECUTION


class Status(Enum):
    SUCCESS = 0
    NOT_INITIALIZED = 1
    ALLOC_FAILED = 3
    INVALID_VALUE = 7
    ARCH_MISMATCH = 8
    EXECUTION_FAILED = 13
    INTERNAL_ERROR = 14
    NOT_SUPPORTED = 15
    INSUFFICIENT_WORKSPACE = 19
    INSUFFICIENT_DRIVER = 20


class LogLevel(IntFlag):
    OFF = 0
    ERROR = 1
    PERF_TRACE = 2
    PERF_HINT = 4
    HEURISTICS_TRACE = 8
    API_TRACE = 16


LogCallback = Callable[[LogLevel, str, str], None]


class EngineError(RuntimeError):
    """Raised when an engine call returns anything other than SUCCESS."""

    def __init__(self, status: Status, call: str = "engine call"):
        self.status = status
        self.call = call
        super().__init__(f"{call} failed with status {status.name}")


def check_status(status: Status, call: str = "engine call") -> None:
    if status != Status.SUCCESS:
        raise EngineError(status, call)


@dataclass
class EngineHandle:
    backend: Backend
    device: str
    log_sink: Optional[LogCallback] = None
    log_level: LogLevel = LogLevel.OFF

    def log(self, level: LogLevel, func_name: str, message: str) -> None:
        if self.log_sink is None or not (self.log_level & level):
            return
        self.log_sink(level, func_name, message)


class PermuteEngine:
    """
    Base class of the accelerator side of a permutation.

    Subclasses implement _launch(); everything else (handle creation,
    descriptor construction, validation and logging) is shared.
    """

    backend: Backend = Backend.CPU_TORCH

    def __init__(self, device: Optional[str] = None):
        self.device = device or self.backend.device

    @classmethod
    def is_available(cls) -> bool:
        return True

    def create_handle(
        self, log_sink: Optional[LogCallback] = None, log_level: LogLevel = LogLevel.OFF
    ) -> EngineHandle:
        return EngineHandle(self.backend, self.device, log_sink, LogLevel(log_level))

    def init_descriptor(
        self,
        handle: Optional[EngineHandle],
        rank: int,
        extents: Sequence[int],
        strides: Optional[Sequence[int]] = None,
        dtype: DType = DType.FP32,
        op: ElementwiseOp = ElementwiseOp.IDENTITY,
    ) -> TensorDescriptor:
        if handle is None:
            raise EngineError(Status.NOT_INITIALIZED, "init_descriptor")
        if rank != len(extents) or (strides is not None and len(strides) != rank):
            handle.log(
                LogLevel.ERROR,
                "init_descriptor",
                f"rank {rank} does not match extents {tuple(extents)}\n",
            )
            raise EngineError(Status.INVALID_VALUE, "init_descriptor")

        desc = TensorDescriptor(
            tuple(int(e) for e in extents),
            dtype,
            tuple(int(s) for s in strides) if strides is not None else None,
            op,
        )
        handle.log(LogLevel.API_TRACE, "init_descriptor", f"{desc!r}\n")
        return desc

    def permute(
        self,
        handle: Optional[EngineHandle],
        scale: bytes,
        src: Any,
        desc_a: TensorDescriptor,
        modes_a: Sequence[str],
        dst: Any,
        desc_b: TensorDescriptor,
        modes_b: Sequence[str],
        compute_dtype: DType,
        queue: Any = None,
    ) -> Status:
        if handle is None:
            return Status.NOT_INITIALIZED

        handle.log(
            LogLevel.API_TRACE,
            "permute",
            f"A{list(modes_a)} {desc_a!r} -> B{list(modes_b)} {desc_b!r} "
            f"compute={compute_dtype.value}\n",
        )

        status = self._validate(
            handle, scale, desc_a, modes_a, desc_b, modes_b, compute_dtype
        )
        if status != Status.SUCCESS:
            return status

        try:
            self._launch(
                scale, src, desc_a, modes_a, dst, desc_b, modes_b, compute_dtype, queue
            )
        except (RuntimeError, ValueError) as e:
            handle.log(LogLevel.ERROR, "permute", f"launch failed: {e}\n")
            return Status.EXECUTION_FAILED

        if DEBUG_EXECUTION:
            print(f"[{type(self).__name__}.permute] launched on {self.device}")
        handle.log(
            LogLevel.PERF_TRACE,
            "permute",
            f"{self.backend.value}: {desc_a.element_count} elements\n",
        )
        return Status.SUCCESS

    def _validate(
        self, handle, scale, desc_a, modes_a, desc_b, modes_b, compute_dtype
    ) -> Status:
        def reject(status: Status, msg: str) -> Status:
            handle.log(LogLevel.ERROR, "permute", msg + "\n")
            return status

        if len(scale) != SCALAR_CELL_BYTES:
            return reject(Status.INVALID_VALUE, f"scale cell has {len(scale)} bytes")
        if len(modes_a) != desc_a.rank or len(modes_b) != desc_b.rank:
            return reject(Status.INVALID_VALUE, "mode count does not match descriptor rank")
        if desc_a.dtype != desc_b.dtype:
            return reject(
                Status.NOT_SUPPORTED,
                f"mixed element types {desc_a.dtype.value}/{desc_b.dtype.value}",
            )
        if compute_dtype not in SUPPORTED_COMPUTE_TYPES:
            return reject(
                Status.NOT_SUPPORTED, f"compute type {compute_dtype.value} not supported"
            )
        if len(set(modes_a)) != len(modes_a) or len(set(modes_b)) != len(modes_b):
            return reject(Status.INVALID_VALUE, "repeated mode label")
        if sorted(modes_a) != sorted(modes_b):
            return reject(Status.INVALID_VALUE, "modes of A and B differ")

        extent_a = dict(zip(modes_a, desc_a.extents))
        for mode, extent in zip(modes_b, desc_b.extents):
            if extent_a[mode] != extent:
                return reject(
                    Status.INVALID_VALUE,
                    f"extent of mode '{mode}' differs: {extent_a[mode]} vs {extent}",
                )
        return Status.SUCCESS

    def _launch(
        self, scale, src, desc_a, modes_a, dst, desc_b, modes_b, compute_dtype, queue
    ) -> None:
        raise NotImplementedError
