import io
from dataclasses import replace

import pytest

from permute_harness import config
from permute_harness.backend.engine import EngineError, LogLevel
from permute_harness.harness.lifecycle import CaseStatus, LifecycleState, PermutationTest
from permute_harness.harness.options import HarnessOptions, OutputStream
from permute_harness.ir.dtypes import DType

TRACE = LogLevel.API_TRACE | LogLevel.PERF_TRACE


def _case(dims=(3, 2, 0, 1), alpha=1.0, dtype=DType.FP32, lengths=(2, 3, 4, 5), level=TRACE):
    return ((dtype, dtype), level, lengths, dims, alpha)


@pytest.fixture
def make_test(engine, resource, capabilities, options, stdout):
    def _make(param, **kwargs):
        kwargs.setdefault("engine", engine)
        kwargs.setdefault("resource", resource)
        kwargs.setdefault("capabilities", capabilities)
        kwargs.setdefault("options", options)
        kwargs.setdefault("stdout", stdout)
        return PermutationTest(param, **kwargs)

    return _make


def test_end_to_end_pass(make_test, engine, stdout):
    with make_test(_case()) as case:
        assert case.state == LifecycleState.CONFIGURED
        outcome = case.run_kernel()
        assert case.state == LifecycleState.EXECUTED
    assert case.state == LifecycleState.TORN_DOWN

    assert outcome.status == CaseStatus.PASSED
    assert outcome.max_relative_error == 0.0
    assert outcome.failures == []
    assert engine.calls == 1
    assert "A['n', 'c', 'w', 'h']" in stdout.getvalue()
    assert "B['h', 'w', 'n', 'c']" in stdout.getvalue()


@pytest.mark.parametrize("dtype", [DType.FP16, DType.FP32])
@pytest.mark.parametrize("alpha", [0.0, 2.3])
def test_scaled_cases_pass(make_test, dtype, alpha):
    with make_test(_case(dims=(1, 3, 0, 2), alpha=alpha, dtype=dtype)) as case:
        assert case.run_kernel().passed


def test_device_check_skips_case(make_test, engine, stdout):
    case = make_test(_case(dtype=DType.FP16), device_check=lambda dtype: dtype != DType.FP16)
    with case:
        assert not case.validation.run_flag
        outcome = case.run_kernel()

    assert outcome.status == CaseStatus.SKIPPED
    assert outcome.skipped and not outcome.passed
    assert outcome.failures == []
    assert engine.calls == 0


def test_size_check_skips_case(make_test, engine, resource):
    with make_test(_case(), size_check=lambda params: False) as case:
        outcome = case.run_kernel()
    assert outcome.skipped
    assert engine.calls == 0
    assert not resource.has_storage()


def test_default_size_check_uses_memory_budget(make_test, capabilities):
    tiny = replace(capabilities, memory_bytes=1024)
    with make_test(_case(), capabilities=tiny) as case:
        assert not case.validation.run_flag
        assert case.run_kernel().skipped


def test_decode_error_fails_without_dispatch(make_test, engine):
    with make_test(_case(lengths=(2, 3, 4))) as case:
        outcome = case.run_kernel()
    assert outcome.status == CaseStatus.FAILED
    assert any("lengths" in f for f in outcome.failures)
    assert engine.calls == 0


def test_non_numeric_alpha_fails_without_dispatch(make_test, engine):
    with make_test(_case(alpha="x")) as case:
        outcome = case.run_kernel()
    assert outcome.status == CaseStatus.FAILED
    assert any("alpha" in f for f in outcome.failures)
    assert engine.calls == 0


def test_out_of_range_dim_fails_without_dispatch(make_test, engine):
    with make_test(_case(dims=(0, 1, 2, 4))) as case:
        outcome = case.run_kernel()
    assert outcome.status == CaseStatus.FAILED
    assert any("permuted_dims" in f for f in outcome.failures)
    assert engine.calls == 0


def test_default_options_are_shared(make_test, tmp_path, monkeypatch):
    monkeypatch.setattr(config, "OUTPUT_FILE", str(tmp_path / "report.txt"))
    HarnessOptions.release()
    try:
        cases = [make_test(_case(), options=None) for _ in range(3)]
        assert len({id(case.options) for case in cases}) == 1
        assert len({id(case.options.ostream.fstream()) for case in cases}) == 1
        ostream = cases[0].options.ostream
    finally:
        HarnessOptions.release()
    assert not ostream.is_open()


def test_mismatch_fails_with_error_attached(make_test, zeroing_engine):
    with make_test(_case(), engine=zeroing_engine) as case:
        outcome = case.run_kernel()
    assert outcome.status == CaseStatus.FAILED
    assert outcome.max_relative_error > 0.0
    assert outcome.failures == [f"Max relative error: {outcome.max_relative_error}"]


def test_dispatch_failure_is_fatal(make_test):
    with make_test(_case(dims=(0, 1, 1, 2))) as case:
        with pytest.raises(EngineError):
            case.run_kernel()


def test_rerun_is_reproducible(make_test, resource):
    results = []
    for _ in range(2):
        resource.reset()
        with make_test(_case(alpha=2.3, dtype=DType.FP16)) as case:
            outcome = case.run_kernel()
        results.append((outcome.status, outcome.max_relative_error))
    assert results[0] == results[1]


def test_log_buffer_is_cleared_between_cases(make_test):
    case = make_test(_case())
    with case:
        case.run_kernel()
    first = case.log_buffer.getvalue()
    with case:
        case.run_kernel()
    assert first
    assert case.log_buffer.getvalue() == first


def test_reports_go_to_every_destination(make_test, stdout, tmp_path):
    path = tmp_path / "report.txt"
    ostream = OutputStream(str(path))
    options = HarnessOptions(ostream=ostream)
    with make_test(_case(), options=options) as case:
        case.run_kernel()
    ostream.close()

    assert stdout.getvalue()
    assert path.read_text() == stdout.getvalue()


def test_omit_cout_and_filters(make_test, stdout, tmp_path):
    path = tmp_path / "report.txt"
    ostream = OutputStream(str(path))
    options = HarnessOptions(omit_cout=True, omit_passed=True, ostream=ostream)

    with make_test(_case(), options=options) as case:
        assert case.run_kernel().passed
        assert not case.report_results(stdout, False, False, True)
    skipped = make_test(_case(), options=options, device_check=lambda dtype: False)
    with skipped:
        assert skipped.run_kernel().skipped
        skipped.log_buffer(LogLevel.ERROR, "check_device", "fp32 unsupported")
        stream = io.StringIO()
        assert skipped.report_results(stream, False, False, True)
        assert "fp32 unsupported" in stream.getvalue()
        assert not skipped.report_results(stream, True, False, True)
    ostream.close()

    assert stdout.getvalue() == ""
    # Passed case filtered; the skipped case had nothing in its log when reported
    assert path.read_text() == ""


def test_skipped_case_does_not_dump_stale_elements(make_test, resource, monkeypatch):
    monkeypatch.setattr(config, "PRINT_ELEMENTS", True)
    resource.setup_storage([1, 1, 1, 2], DType.FP32)
    stream = io.StringIO()

    case = make_test(_case(), device_check=lambda dtype: False, stdout=stream)
    with case:
        case.run_kernel()
    assert "Tensor A" not in stream.getvalue()

    stream = io.StringIO()
    with make_test(_case(), stdout=stream) as case:
        case.run_kernel()
    assert "Tensor A elements (120):" in stream.getvalue()


def test_negative_extent_is_skipped(make_test, engine):
    with make_test(_case(lengths=(2, -3, 4, 5))) as case:
        outcome = case.run_kernel()
    assert outcome.skipped
    assert engine.calls == 0
