from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from core.data import rows_to_frame
from core.filters import DashboardFilters


def compute_debug(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    rows = ctx.get("rows", [])
    filtered = ctx.get("filtered_rows", [])
    payload = {
        "filters": asdict(filters),
        "file": ctx.get("file"),
        "row_counts": {
            "loaded_rows": int(ctx.get("loaded_rows", 0) or 0),
            "valid_rows": len(rows),
            "excluded_rows": int(ctx.get("excluded_rows", 0) or 0),
            "filtered_rows": len(filtered),
        },
        "filter_options": {
            "task_categories": ctx.get("task_categories", []),
            "deployment_environments": ctx.get("deployment_environments", []),
        },
        "missing_optional": {},
        "sample": [],
    }

    if rows:
        df = rows_to_frame(rows)
        payload["missing_optional"] = {
            col: int(df[col].isna().sum())
            for col in ["performance_index", "model_architecture", "task_category", "deployment_environment"]
        }
        payload["sample"] = df.head(3).to_dict(orient="records")
    return payload
