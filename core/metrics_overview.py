from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from core.aggregate import field_means
from core.filters import DashboardFilters
from core.ranking import top_n
from core.rows import Row

MISSING = "—"


def _fmt(value: Optional[float], pattern: str) -> str:
    if value is None:
        return MISSING
    return pattern.format(value)


def format_kpis(kpis: Dict[str, Any]) -> Dict[str, str]:
    return {
        "rows": f"{kpis['rows']:,} rows",
        "columns": f"{kpis['columns']} columns",
        "mean_accuracy": _fmt(kpis.get("mean_accuracy"), "{:.3f}"),
        "mean_cost": _fmt(kpis.get("mean_cost"), "{:.3f}¢"),
        "mean_time": _fmt(kpis.get("mean_time"), "{:.2f} s"),
        "mean_cpu": _fmt(kpis.get("mean_cpu"), "{:.1f}%"),
    }


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    rows: List[Row] = ctx.get("filtered_rows", [])
    kpis: Dict[str, Any] = {"rows": len(rows), "columns": int(ctx.get("columns", 0) or 0)}
    kpis.update(field_means(rows))

    top = [
        {
            "rank": i,
            "name": e.name,
            "mean_performance": round(e.mean_performance, 4),
            "mean_accuracy": round(e.mean_accuracy, 4),
        }
        for i, e in enumerate(top_n(rows, n=filters.top_n), start=1)
    ]

    return {
        "filters": asdict(filters),
        "kpis": kpis,
        "kpis_display": format_kpis(kpis),
        "top_models": top,
    }
