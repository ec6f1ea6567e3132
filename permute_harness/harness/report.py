from typing import IO, Optional

import numpy as np

from ..backend.memory import PermutationResource


def should_report(
    run_flag: bool,
    passed: bool,
    omit_skipped: bool,
    omit_failed: bool,
    omit_passed: bool,
) -> bool:
    """A case is printed only if none of the three omit filters applies to it."""
    return (
        (run_flag or not omit_skipped)
        and (passed or not omit_failed)
        and (not passed or not omit_passed)
    )


def format_elements(values: np.ndarray, count: int) -> str:
    values = np.asarray(values).reshape(-1)[:count]
    if np.issubdtype(values.dtype, np.floating):
        return ", ".join(f"{float(v):g}" for v in values)
    return ", ".join(str(v) for v in values)


def report_results(
    stream: Optional[IO[str]],
    run_flag: bool,
    passed: bool,
    log_text: str,
    omit_skipped: bool,
    omit_failed: bool,
    omit_passed: bool,
    print_elements: bool = False,
    resource: Optional[PermutationResource] = None,
) -> bool:
    """
    Writes the captured engine log (and optionally tensors A and B) to
    stream when the case passes the omit filters. Returns whether anything
    was written. A missing or closed stream is ignored.
    """
    if stream is None or getattr(stream, "closed", False):
        return False
    if not should_report(run_flag, passed, omit_skipped, omit_failed, omit_passed):
        return False

    stream.write(log_text or "")

    if print_elements and resource is not None and resource.has_storage():
        elements_a = resource.current_element_count()
        elements_b = elements_a

        stream.write(f"Tensor A elements ({elements_a}):\n")
        stream.write(format_elements(resource.host_a(), elements_a))
        stream.write("\n")

        stream.write(f"Tensor B elements ({elements_b}):\n")
        stream.write(format_elements(resource.host_b(), elements_b))
        stream.write("\n")

    return True
