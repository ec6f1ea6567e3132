import math

import numpy as np
import pytest
import torch

from permute_harness.backend.verifier import compare_with_tolerance


def test_identical_buffers_pass_with_zero_error():
    a = np.linspace(-1, 1, 50, dtype=np.float32)
    passed, err = compare_with_tolerance(a, a.copy(), a.size)
    assert passed
    assert err == 0.0


def test_small_difference_within_tolerance():
    a = np.array([1.0, 2.0], dtype=np.float32)
    b = a.copy()
    b[0] = np.float32(1.000001)
    passed, err = compare_with_tolerance(a, b, 2)
    assert passed
    assert 0.0 < err < 10 * np.finfo(np.float32).eps


def test_large_difference_fails_and_reports_worst_error():
    a = np.array([1.0, 0.5], dtype=np.float32)
    b = np.array([0.0, 0.5], dtype=np.float32)
    passed, err = compare_with_tolerance(a, b, 2)
    assert not passed
    # |1 - 0| / (1 + 0 + 1)
    assert err == pytest.approx(0.5)


def test_nan_fails():
    a = np.array([1.0, np.nan], dtype=np.float32)
    passed, err = compare_with_tolerance(a, np.ones(2, dtype=np.float32), 2)
    assert not passed
    assert math.isnan(err)


def test_infinite_value_is_infinite_error():
    a = np.array([np.inf], dtype=np.float32)
    passed, err = compare_with_tolerance(a, np.ones(1, dtype=np.float32), 1)
    assert not passed
    assert err == math.inf


def test_only_element_count_is_compared():
    a = np.zeros(8, dtype=np.float32)
    b = np.zeros(8, dtype=np.float32)
    b[5:] = 3.0
    assert compare_with_tolerance(a, b, 5) == (True, 0.0)
    assert not compare_with_tolerance(a, b, 6)[0]


def test_short_buffer_fails():
    a = np.zeros(3, dtype=np.float32)
    assert compare_with_tolerance(a, a, 4) == (False, math.inf)


def test_empty_comparison_passes():
    a = np.zeros(0, dtype=np.float32)
    assert compare_with_tolerance(a, a, 0) == (True, 0.0)


def test_tolerance_scales_with_element_type():
    a16 = np.array([1.0], dtype=np.float16)
    b16 = np.array([1.0078125], dtype=np.float16)
    assert compare_with_tolerance(a16, b16, 1)[0]
    assert not compare_with_tolerance(a16.astype(np.float32), b16.astype(np.float32), 1)[0]


def test_accepts_torch_and_numpy():
    a = torch.arange(6, dtype=torch.float32)
    b = a.numpy().copy()
    assert compare_with_tolerance(a, b, 6) == (True, 0.0)
