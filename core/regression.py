"""Ordinary least squares over the normal equations.

The design matrix always carries a leading intercept column of ones. The
inverse of XᵗX is taken with Gauss-Jordan elimination and partial pivoting so
that collinear or degenerate features surface as ``SingularMatrixError``
rather than as silently huge coefficients.

Sums inside XᵗX and Xᵗy are left to numpy; results are therefore independent
of row order up to floating-point summation order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.rows import FieldRef, Row, selector

DEFAULT_FEATURES: Tuple[str, ...] = ("task_complexity", "cost_per_task_cents", "execution_time_seconds")
DEFAULT_TARGET = "accuracy_score"
PIVOT_EPS = 1e-12


class RegressionError(Exception):
    """Base class for a fit that produced no coefficients."""


class InsufficientDataError(RegressionError):
    def __init__(self, rows: int, columns: int):
        super().__init__(f"Need at least {columns} complete rows to fit {columns} parameters, got {rows}.")
        self.rows = rows
        self.columns = columns


class SingularMatrixError(RegressionError):
    def __init__(self, message: str = "Matrix not invertible"):
        super().__init__(message)


@dataclass(frozen=True)
class RegressionResult:
    features: Tuple[str, ...]
    coefficients: List[float]
    fitted_values: List[float]
    actual_values: List[float] = field(default_factory=list)
    r_squared: float = math.nan

    @property
    def intercept(self) -> float:
        return self.coefficients[0]

    @property
    def slopes(self) -> List[float]:
        return self.coefficients[1:]

    @property
    def r_squared_defined(self) -> bool:
        return not math.isnan(self.r_squared)


def invert_matrix(a: np.ndarray) -> np.ndarray:
    """Gauss-Jordan inverse with row swaps when a pivot is numerically zero."""
    n = a.shape[0]
    m = np.hstack([np.asarray(a, dtype=float), np.eye(n)])

    for i in range(n):
        pivot = m[i, i]
        if abs(pivot) < PIVOT_EPS:
            swap = i + 1
            while swap < n and abs(m[swap, i]) < PIVOT_EPS:
                swap += 1
            if swap == n:
                raise SingularMatrixError()
            m[[i, swap]] = m[[swap, i]]
            pivot = m[i, i]

        m[i] = m[i] / pivot
        for r in range(n):
            if r == i:
                continue
            m[r] = m[r] - m[r, i] * m[i]

    return m[:, n:]


def design_matrix(
    rows: Sequence[Row],
    feature_fields: Sequence[FieldRef],
    target_field: FieldRef,
) -> Tuple[np.ndarray, np.ndarray]:
    """Return (X, y) over the rows that have every feature and the target."""
    features = [selector(f) for f in feature_fields]
    target = selector(target_field)
    x_rows: List[List[float]] = []
    y: List[float] = []
    for row in rows:
        xs = [f(row) for f in features]
        t = target(row)
        if t is None or any(v is None for v in xs):
            continue
        x_rows.append([1.0] + [float(v) for v in xs])
        y.append(float(t))
    x = np.array(x_rows, dtype=float).reshape(len(x_rows), len(features) + 1)
    return x, np.array(y, dtype=float)


def r_squared(y: np.ndarray, fitted: np.ndarray) -> float:
    """1 - SSres/SStot, or nan when every target value is the same."""
    if not len(y) or np.all(y == y[0]):
        return math.nan
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    ss_res = float(np.sum((y - fitted) ** 2))
    return 1.0 - ss_res / ss_tot


def fit(
    rows: Sequence[Row],
    feature_fields: Sequence[FieldRef] = DEFAULT_FEATURES,
    target_field: FieldRef = DEFAULT_TARGET,
) -> RegressionResult:
    x, y = design_matrix(rows, feature_fields, target_field)
    n_rows, n_cols = x.shape
    if n_rows < n_cols:
        raise InsufficientDataError(n_rows, n_cols)

    xt = x.T
    beta = invert_matrix(xt @ x) @ (xt @ y)
    fitted = x @ beta

    return RegressionResult(
        features=tuple(_feature_name(f) for f in feature_fields),
        coefficients=[float(b) for b in beta],
        fitted_values=[float(v) for v in fitted],
        actual_values=[float(v) for v in y],
        r_squared=r_squared(y, fitted),
    )


def _feature_name(ref: FieldRef) -> str:
    if isinstance(ref, str):
        return ref
    return getattr(ref, "__name__", repr(ref))


def format_r_squared(value: Optional[float], digits: int = 3) -> str:
    if value is None or math.isnan(value):
        return "n/a"
    return f"{value:.{digits}f}"
