"""
File: permute_harness/harness/lifecycle.py

One parameterized permutation case:

    FRESH -> CONFIGURED (set_up) -> EXECUTED (run_kernel) -> TORN_DOWN

Failures inside a case are recorded on the outcome rather than raised, so a
sweep carries on with the next case. The one exception is an engine dispatch
failure, which aborts the case with EngineError.
"""

import sys
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, IO, List, Optional, Sequence

from .. import config
from ..backend.device import DeviceCapabilities
from ..backend.engine import PermuteEngine
from ..backend.memory import PermutationResource
from ..backend.registry import EngineRegistry
from ..ir.dtypes import DType, get_size_bytes
from .driver import ExecutionDriver, ValidationState
from .log_sink import ApiLogBuffer
from .modes import map_axes
from .options import HarnessOptions
from .params import ParameterDecodeError, PermutationParams, decode_params
from .report import report_results


class LifecycleState(Enum):
    FRESH = "fresh"
    CONFIGURED = "configured"
    EXECUTED = "executed"
    TORN_DOWN = "torn_down"


class CaseStatus(Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class CaseOutcome:
    status: CaseStatus
    max_relative_error: float = 0.0
    failures: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == CaseStatus.PASSED

    @property
    def skipped(self) -> bool:
        return self.status == CaseStatus.SKIPPED


class PermutationTest:
    # Buffers per case: A, B and the reference
    BUFFERS_PER_CASE = 3

    def __init__(
        self,
        param: Sequence[Any],
        engine: Optional[PermuteEngine] = None,
        resource: Optional[PermutationResource] = None,
        options: Optional[HarnessOptions] = None,
        capabilities: Optional[DeviceCapabilities] = None,
        device_check: Optional[Callable[[DType], bool]] = None,
        size_check: Optional[Callable[[PermutationParams], bool]] = None,
        log_buffer: Optional[ApiLogBuffer] = None,
        stdout: Optional[IO[str]] = None,
    ):
        self.param = param
        self.engine = engine or EngineRegistry.get_engine(config.DEFAULT_BACKEND)
        self.resource = resource or PermutationResource.instance(self.engine.backend)
        self.options = options or HarnessOptions.instance()
        self.capabilities = capabilities or DeviceCapabilities.probe(self.engine.backend)
        self.device_check = device_check
        self.size_check = size_check
        self.log_buffer = log_buffer or ApiLogBuffer()
        self.stdout = stdout

        self.driver = ExecutionDriver(self.engine, self.resource)
        self.validation = ValidationState()
        self.state = LifecycleState.FRESH
        self.reset()

    def reset(self):
        self.params: Optional[PermutationParams] = None
        self.failures: List[str] = []
        self.validation.reset()

    # Run checks. True = run the case, False = skip it
    def check_device(self, dtype: DType) -> bool:
        if self.device_check is not None:
            return self.device_check(dtype)
        return self.capabilities.supports(dtype)

    def check_sizes(self) -> bool:
        if self.size_check is not None:
            return self.size_check(self.params)
        try:
            needed = self.BUFFERS_PER_CASE * get_size_bytes(
                self.params.lengths, self.params.element_dtype
            )
        except ValueError:
            # Negative extents cannot be allocated
            return False
        return needed <= self.capabilities.memory_bytes * config.MEMORY_FRACTION

    def _expect(self, condition: bool, message: str) -> bool:
        if not condition:
            self.failures.append(message)
        return condition

    def set_up(self):
        self.reset()
        self.log_buffer.clear()

        try:
            self.params = decode_params(self.param)
        except ParameterDecodeError as e:
            self.failures.extend(e.errors)
            self.validation.run_flag = False
            self.state = LifecycleState.CONFIGURED
            return

        self.validation.run_flag = self.check_device(
            self.params.element_dtype
        ) and self.check_sizes()
        if self.validation.run_flag:
            self.resource.setup_storage(self.params.lengths, self.params.element_dtype)

        # set print_elements to dump A and B with the report
        self.validation.print_elements = config.PRINT_ELEMENTS
        self.state = LifecycleState.CONFIGURED

    def run_kernel(self) -> CaseOutcome:
        if self.state == LifecycleState.FRESH:
            self.set_up()

        executed = self.params is not None and self.validation.run_flag
        mapping = None
        if executed:
            try:
                mapping = map_axes(self.params.lengths, self.params.permuted_dims)
            except IndexError:
                self.failures.append(
                    f"permuted_dims {self.params.permuted_dims} index past the last mode"
                )
        if mapping is not None:
            self.driver.run(self.params, mapping, self.log_buffer, self.validation)
            self._expect(
                self.validation.validation_result,
                f"Max relative error: {self.validation.max_relative_error}",
            )
        self.state = LifecycleState.EXECUTED

        if self.failures:
            status = CaseStatus.FAILED
        elif executed:
            status = CaseStatus.PASSED
        else:
            status = CaseStatus.SKIPPED

        options = self.options
        for stream in self._output_streams():
            self.report_results(
                stream,
                options.omit_skipped,
                options.omit_failed,
                options.omit_passed,
            )

        return CaseOutcome(
            status, self.validation.max_relative_error, list(self.failures)
        )

    def _output_streams(self) -> List[IO[str]]:
        streams = []
        if not self.options.omit_cout:
            streams.append(self.stdout or sys.stdout)
        if self.options.ostream.is_open():
            streams.append(self.options.ostream.fstream())
        return streams

    def report_results(
        self,
        stream: Optional[IO[str]],
        omit_skipped: bool,
        omit_failed: bool,
        omit_passed: bool,
    ) -> bool:
        return report_results(
            stream,
            self.validation.run_flag,
            self.validation.validation_result,
            self.log_buffer.getvalue(),
            omit_skipped,
            omit_failed,
            omit_passed,
            print_elements=self.validation.print_elements,
            # A skipped case never set up storage; whatever is there is stale
            resource=self.resource if self.validation.run_flag else None,
        )

    def tear_down(self):
        # Buffers stay in the resource for the next case
        self.state = LifecycleState.TORN_DOWN

    def __enter__(self):
        self.set_up()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.tear_down()
