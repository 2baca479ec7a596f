from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from core.boxplot import boxplot_stats
from core.charts import boxplot_chart, coefficient_chart, predicted_actual_chart, to_vega_spec
from core.filters import DashboardFilters
from core.regression import (
    InsufficientDataError,
    RegressionError,
    RegressionResult,
    SingularMatrixError,
    fit,
    format_r_squared,
)
from core.rows import Row

logger = logging.getLogger(__name__)


def _error_type(exc: RegressionError) -> str:
    if isinstance(exc, InsufficientDataError):
        return "insufficient_data"
    if isinstance(exc, SingularMatrixError):
        return "singular_matrix"
    return "regression_error"


def sample_points(result: RegressionResult, sample: int) -> Tuple[List[Dict[str, float]], Optional[float], Optional[float]]:
    """Every step-th (predicted, actual) pair plus the bounds of the ideal line."""
    n = len(result.actual_values)
    if not n:
        return [], None, None
    sample_n = min(sample, n)
    step = max(1, n // sample_n)
    pts = [
        {"predicted": result.fitted_values[i], "actual": result.actual_values[i]}
        for i in range(0, n, step)
    ]
    lo = min(min(p["predicted"], p["actual"]) for p in pts)
    hi = max(max(p["predicted"], p["actual"]) for p in pts)
    return pts, lo, hi


def compute_ml(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    rows: List[Row] = ctx.get("filtered_rows", [])
    payload: Dict[str, Any] = {
        "filters": asdict(filters),
        "regression": None,
        "error": None,
        "title": "Regression Results: Predicted vs Actual (R² = n/a)",
        "boxplot": [],
        "predicted_actual": [],
        "ideal_line": None,
        "charts": {},
    }

    stats = boxplot_stats(rows, "task_complexity", "accuracy_score")
    payload["boxplot"] = [asdict(s) for s in stats]
    if stats:
        payload["charts"]["boxplot"] = to_vega_spec(
            boxplot_chart(stats, x_title="Complexity level (1–10)", y_title="Accuracy")
        )

    try:
        result = fit(rows)
    except RegressionError as exc:
        logger.warning("Regression fit failed on %d rows: %s", len(rows), exc)
        payload["error"] = {"type": _error_type(exc), "message": str(exc)}
        return payload

    pts, lo, hi = sample_points(result, filters.scatter_sample)
    payload["regression"] = {
        "features": list(result.features),
        "intercept": result.intercept,
        "coefficients": result.slopes,
        "r_squared": result.r_squared,
        "observations": len(result.actual_values),
    }
    payload["title"] = f"Regression Results: Predicted vs Actual (R² = {format_r_squared(result.r_squared)})"
    payload["predicted_actual"] = pts
    payload["ideal_line"] = {"min": lo, "max": hi}
    payload["charts"]["coefficients"] = to_vega_spec(coefficient_chart(result.features, result.slopes))
    if pts:
        payload["charts"]["predicted_actual"] = to_vega_spec(predicted_actual_chart(pts, lo, hi))
    return payload
