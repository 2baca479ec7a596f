"""Tests for the OLS regression engine."""

import math

import numpy as np
import pytest

from core.regression import (
    DEFAULT_FEATURES,
    InsufficientDataError,
    RegressionError,
    SingularMatrixError,
    fit,
    format_r_squared,
    invert_matrix,
    r_squared,
)

X1 = [1, 2, 3, 4, 5, 6, 7, 8]
X2 = [0.5, 1.7, 0.2, 2.9, 1.1, 3.3, 0.8, 2.0]
X3 = [10.0, 4.0, 7.0, 1.0, 9.0, 3.0, 12.0, 5.0]


def _linear_rows(make_row):
    return [
        make_row(
            task_complexity=a,
            cost_per_task_cents=b,
            execution_time_seconds=c,
            accuracy_score=2 + 0.5 * a - 0.3 * b + 0.1 * c,
        )
        for a, b, c in zip(X1, X2, X3)
    ]


def test_fit_recovers_noise_free_coefficients(make_row):
    result = fit(_linear_rows(make_row))
    assert result.features == DEFAULT_FEATURES
    for got, want in zip(result.coefficients, [2.0, 0.5, -0.3, 0.1]):
        assert got == pytest.approx(want, abs=1e-6)
    assert result.r_squared == pytest.approx(1.0, abs=1e-9)
    assert result.intercept == pytest.approx(2.0, abs=1e-6)
    assert len(result.slopes) == 3


def test_fitted_values_align_with_rows(make_row):
    rows = _linear_rows(make_row)
    result = fit(rows)
    assert len(result.fitted_values) == len(rows)
    for fitted, row in zip(result.fitted_values, rows):
        assert fitted == pytest.approx(row.accuracy_score, abs=1e-6)
    assert result.actual_values == [r.accuracy_score for r in rows]


def test_fit_is_order_independent(make_row):
    rows = _linear_rows(make_row)
    forward = fit(rows)
    backward = fit(list(reversed(rows)))
    for a, b in zip(forward.coefficients, backward.coefficients):
        assert a == pytest.approx(b, abs=1e-9)


def test_fit_with_noise_has_partial_r_squared(make_row):
    noise = [0.02, -0.03, 0.01, 0.04, -0.02, -0.01, 0.03, -0.04]
    rows = [
        make_row(task_complexity=a, cost_per_task_cents=b, execution_time_seconds=c, accuracy_score=0.9 - 0.05 * a + e)
        for a, b, c, e in zip(X1, X2, X3, noise)
    ]
    result = fit(rows)
    assert 0.0 < result.r_squared < 1.0


def test_fit_custom_features(make_row):
    rows = [make_row(autonomy_level=k, success_rate=0.1 + 0.05 * k) for k in range(1, 6)]
    result = fit(rows, feature_fields=["autonomy_level"], target_field="success_rate")
    assert result.features == ("autonomy_level",)
    assert result.coefficients == pytest.approx([0.1, 0.05], abs=1e-9)


def test_too_few_rows_is_insufficient_data(make_row):
    rows = _linear_rows(make_row)[:2]
    with pytest.raises(InsufficientDataError) as exc_info:
        fit(rows)
    assert exc_info.value.rows == 2
    assert exc_info.value.columns == 4


def test_empty_input_is_insufficient_data():
    with pytest.raises(InsufficientDataError):
        fit([])


def test_rows_missing_target_are_dropped(make_row):
    rows = [
        make_row(autonomy_level=k, performance_index=(None if k == 3 else 2.0 * k))
        for k in range(1, 6)
    ]
    result = fit(rows, feature_fields=["autonomy_level"], target_field="performance_index")
    assert len(result.fitted_values) == 4
    assert result.coefficients == pytest.approx([0.0, 2.0], abs=1e-9)


def test_constant_feature_is_singular(make_row):
    rows = [
        make_row(task_complexity=a, cost_per_task_cents=0.0, execution_time_seconds=c, accuracy_score=0.1 * a)
        for a, c in zip(X1, X3)
    ]
    with pytest.raises(SingularMatrixError):
        fit(rows)


def test_failures_share_a_base_class():
    assert issubclass(InsufficientDataError, RegressionError)
    assert issubclass(SingularMatrixError, RegressionError)
    assert not issubclass(SingularMatrixError, InsufficientDataError)


def test_constant_target_leaves_r_squared_undefined(make_row):
    rows = [
        make_row(task_complexity=a, cost_per_task_cents=b, execution_time_seconds=c, accuracy_score=0.5)
        for a, b, c in zip(X1, X2, X3)
    ]
    result = fit(rows)
    assert math.isnan(result.r_squared)
    assert not result.r_squared_defined
    assert result.intercept == pytest.approx(0.5, abs=1e-9)


def test_constant_inexact_target_leaves_r_squared_undefined(make_row):
    rows = [
        make_row(task_complexity=a, cost_per_task_cents=b, execution_time_seconds=c, accuracy_score=0.1)
        for a, b, c in zip(X1[:6], X2[:6], X3[:6])
    ]
    result = fit(rows)
    assert math.isnan(result.r_squared)
    assert format_r_squared(result.r_squared) == "n/a"
    assert math.isnan(r_squared(np.full(6, 0.1), np.full(6, 0.1000001)))


def test_invert_matrix_identity_and_known_inverse():
    a = np.array([[4.0, 7.0], [2.0, 6.0]])
    inv = invert_matrix(a)
    assert np.allclose(inv, [[0.6, -0.7], [-0.2, 0.4]])
    assert np.allclose(a @ inv, np.eye(2))


def test_invert_matrix_swaps_zero_pivot():
    a = np.array([[0.0, 1.0], [1.0, 0.0]])
    assert np.allclose(invert_matrix(a), a)


def test_invert_matrix_singular():
    with pytest.raises(SingularMatrixError):
        invert_matrix(np.array([[1.0, 2.0], [2.0, 4.0]]))


def test_invert_matrix_does_not_mutate_input():
    a = np.array([[2.0, 0.0], [0.0, 4.0]])
    invert_matrix(a)
    assert np.array_equal(a, [[2.0, 0.0], [0.0, 4.0]])


def test_r_squared_helper():
    y = np.array([1.0, 2.0, 3.0])
    assert r_squared(y, y) == 1.0
    assert math.isnan(r_squared(np.array([2.0, 2.0]), np.array([1.0, 3.0])))


def test_format_r_squared():
    assert format_r_squared(0.12345) == "0.123"
    assert format_r_squared(float("nan")) == "n/a"
    assert format_r_squared(None) == "n/a"
