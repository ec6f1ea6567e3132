"""
File: permute_harness/harness/driver.py

Runs one permutation through the engine and checks it against the host
reference:

    IDLE -> DESCRIPTORS_BUILT -> DISPATCHED -> REFERENCE_COMPUTED
         -> COMPARED -> DONE
"""

from enum import Enum
from dataclasses import dataclass

from ..backend.engine import PermuteEngine, check_status
from ..backend.memory import PermutationResource
from ..backend.reference import permute_reference
from ..backend.verifier import compare_with_tolerance
from ..ir.descriptor import ElementwiseOp
from ..tools.timer import Timer
from ..config import DEBUG_EXECUTION, TOLERANCE
from .log_sink import ApiLogBuffer
from .modes import AxisMapping
from .params import PermutationParams
from .scale import encode_alpha


class DriverState(Enum):
    IDLE = "idle"
    DESCRIPTORS_BUILT = "descriptors_built"
    DISPATCHED = "dispatched"
    REFERENCE_COMPUTED = "reference_computed"
    COMPARED = "compared"
    DONE = "done"


@dataclass
class ValidationState:
    run_flag: bool = True
    validation_result: bool = False
    max_relative_error: float = 0.0
    print_elements: bool = False

    def reset(self):
        self.run_flag = True
        self.validation_result = False
        self.max_relative_error = 0.0
        self.print_elements = False


class ExecutionDriver:
    def __init__(
        self,
        engine: PermuteEngine,
        resource: PermutationResource,
        tolerance: float = TOLERANCE,
    ):
        self.engine = engine
        self.resource = resource
        self.tolerance = tolerance
        self.state = DriverState.IDLE

    def _advance(self, state: DriverState):
        if DEBUG_EXECUTION:
            print(f"[ExecutionDriver] {self.state.value} -> {state.value}")
        self.state = state

    def run(
        self,
        params: PermutationParams,
        mapping: AxisMapping,
        log_sink: ApiLogBuffer,
        validation: ValidationState,
    ) -> None:
        """
        Executes the case if validation.run_flag is set, storing the verdict
        and the worst relative error in validation. Raises EngineError if
        the engine rejects the dispatch.
        """
        self.state = DriverState.IDLE
        if not validation.run_flag:
            return

        engine = self.engine
        resource = self.resource

        # 1. Descriptors
        handle = engine.create_handle(log_sink, params.log_level)
        desc_a = engine.init_descriptor(
            handle,
            len(mapping.modes_a),
            mapping.extents_a,
            None,
            params.element_dtype,
            ElementwiseOp.IDENTITY,
        )
        desc_b = engine.init_descriptor(
            handle,
            len(mapping.modes_b),
            mapping.extents_b,
            None,
            params.element_dtype,
            ElementwiseOp.IDENTITY,
        )
        self._advance(DriverState.DESCRIPTORS_BUILT)

        # 2. Dispatch (default queue)
        scale = encode_alpha(params.alpha, params.compute_dtype)
        with Timer(f"permute {params.case_id}"):
            status = engine.permute(
                handle,
                scale,
                resource.device_a(),
                desc_a,
                mapping.modes_a,
                resource.device_b(),
                desc_b,
                mapping.modes_b,
                params.compute_dtype,
                None,
            )
        check_status(status, "permute")
        self._advance(DriverState.DISPATCHED)

        # 3. Reference; the blocking copy of B also waits for the dispatch
        resource.copy_b_to_host()
        with Timer(f"reference {params.case_id}"):
            permute_reference(
                scale,
                resource.host_a(),
                desc_a,
                mapping.modes_a,
                resource.host_reference(),
                desc_b,
                mapping.modes_b,
                params.compute_dtype,
            )
        resource.copy_reference_to_device()
        self._advance(DriverState.REFERENCE_COMPUTED)

        # 4. Compare
        passed, max_relative_error = compare_with_tolerance(
            resource.device_b(),
            resource.device_reference(),
            resource.current_element_count(),
            self.tolerance,
        )
        self._advance(DriverState.COMPARED)

        validation.validation_result = passed
        validation.max_relative_error = max_relative_error
        self._advance(DriverState.DONE)
