"""
Runs the default permutation grid outside of pytest and prints a summary.

    python -m permute_harness.tools.run_sweep

Reporting filters, output file and backend come from the PERMUTE_* variables
read in permute_harness/config.py.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from permute_harness import config
from permute_harness.backend.engine import EngineError
from permute_harness.backend.registry import EngineRegistry
from permute_harness.backend.device import EnvironmentSniffer
from permute_harness.harness.cases import generate_cases, case_id
from permute_harness.harness.lifecycle import PermutationTest, CaseStatus
from permute_harness.harness.options import HarnessOptions


def run_sweep(
    cases: Iterable, backend: Optional[str] = None, options=None
) -> Tuple[Dict[str, int], List[Tuple[str, str]]]:
    engine = EngineRegistry.get_engine(backend)
    options = options or HarnessOptions.instance()

    counts: Counter = Counter()
    failures: List[Tuple[str, str]] = []

    for param in tqdm(list(cases), desc="permutation cases", disable=config.DEBUG_EXECUTION):
        name = case_id(param)
        try:
            with PermutationTest(param, engine=engine, options=options) as case:
                outcome = case.run_kernel()
        except EngineError as e:
            counts[CaseStatus.FAILED.value] += 1
            failures.append((name, str(e)))
            continue

        counts[outcome.status.value] += 1
        if outcome.status == CaseStatus.FAILED:
            failures.append((name, "; ".join(outcome.failures)))

    return dict(counts), failures


def main():
    engine = EngineRegistry.get_engine(config.DEFAULT_BACKEND)
    env = EnvironmentSniffer.sniff(engine.backend)
    print(f"Backend: {engine.backend.value} ({env['hardware_name']})")

    counts, failures = run_sweep(generate_cases(), engine.backend)

    print("\n" + "=" * 80)
    for status in CaseStatus:
        print(f"  {status.value:>8}: {counts.get(status.value, 0)}")
    for name, reason in failures:
        print(f"  FAILED {name}: {reason}")
    print("=" * 80)

    if failures:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
