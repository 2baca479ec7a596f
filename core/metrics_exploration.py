from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from core.aggregate import group_average
from core.charts import bubble_chart, group_bar_chart, group_line_chart, to_vega_spec
from core.filters import DashboardFilters
from core.rows import Row


def bubble_points(rows: List[Row]) -> List[Dict[str, float]]:
    """Complexity vs execution time, bubble radius grows with accuracy."""
    return [
        {
            "x": r.task_complexity,
            "y": r.execution_time_seconds,
            "r": 3 + max(0.0, min(1.0, r.accuracy_score)) * 10,
            "accuracy": r.accuracy_score,
        }
        for r in rows
    ]


def compute_exploration(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    rows: List[Row] = ctx.get("filtered_rows", [])
    if not rows:
        return {"filters": asdict(filters), "autonomy_success": {}, "complexity_cpu": {}, "bubbles": [], "charts": {}}

    success = group_average(rows, "autonomy_level", "success_rate")
    cpu = group_average(rows, "task_complexity", "cpu_usage_percent")
    bubbles = bubble_points(rows)

    charts = {
        "autonomy_success": to_vega_spec(
            group_bar_chart(success, x_title="Autonomy level", y_title="Success rate (0–1)", y_domain=(0, 1))
        ),
        "complexity_cpu": to_vega_spec(group_line_chart(cpu, x_title="Task complexity", y_title="CPU usage (%)")),
        "bubble": to_vega_spec(bubble_chart(bubbles)),
    }
    return {
        "filters": asdict(filters),
        "autonomy_success": success._asdict(),
        "complexity_cpu": cpu._asdict(),
        "bubbles": bubbles,
        "charts": charts,
    }
