from __future__ import annotations

from typing import Any, Dict, List, Sequence

import altair as alt
import pandas as pd

from core.aggregate import GroupAverage
from core.boxplot import BoxplotStat

alt.data_transformers.disable_max_rows()

GRID = {"gridDash": [4, 4], "domain": False, "ticks": False}


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _group_frame(series: GroupAverage, value_col: str) -> pd.DataFrame:
    return pd.DataFrame({"group": series.labels, value_col: series.values})


def group_bar_chart(series: GroupAverage, *, x_title: str, y_title: str, y_domain: Sequence[float] | None = None) -> alt.Chart:
    df = _group_frame(series, "value")
    hover = alt.selection_point(fields=["group"], on="mouseover", empty="all")
    scale = alt.Scale(domain=list(y_domain)) if y_domain else alt.Undefined
    return (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=6, cornerRadiusTopRight=6)
        .encode(
            x=alt.X("group:O", title=x_title, sort=series.labels, axis=alt.Axis(labelAngle=0, grid=False)),
            y=alt.Y("value:Q", title=y_title, scale=scale, axis=alt.Axis(**GRID)),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[alt.Tooltip("group:O", title=x_title), alt.Tooltip("value:Q", title=y_title, format=".3f")],
        )
        .add_params(hover)
    )


def group_line_chart(series: GroupAverage, *, x_title: str, y_title: str) -> alt.Chart:
    df = _group_frame(series, "value")
    base = alt.Chart(df).encode(
        x=alt.X("group:O", title=x_title, sort=series.labels, axis=alt.Axis(labelAngle=0, grid=False)),
        y=alt.Y("value:Q", title=y_title, scale=alt.Scale(zero=True), axis=alt.Axis(**GRID)),
    )
    area = base.mark_area(opacity=0.15)
    line = base.mark_line(point={"filled": True, "size": 40}).encode(
        tooltip=[alt.Tooltip("group:O", title=x_title), alt.Tooltip("value:Q", title=y_title, format=".3f")]
    )
    return area + line


def bubble_chart(points: List[Dict[str, float]]) -> alt.Chart:
    df = pd.DataFrame(points, columns=["x", "y", "r", "accuracy"])
    return (
        alt.Chart(df)
        .mark_circle(opacity=0.45)
        .encode(
            x=alt.X("x:Q", title="Task complexity", axis=alt.Axis(grid=False)),
            y=alt.Y("y:Q", title="Execution time (seconds)", axis=alt.Axis(**GRID)),
            size=alt.Size("r:Q", legend=None, scale=alt.Scale(range=[10, 170])),
            tooltip=[
                alt.Tooltip("x:Q", title="Complexity"),
                alt.Tooltip("y:Q", title="Time (s)", format=".2f"),
                alt.Tooltip("accuracy:Q", title="Accuracy", format=".3f"),
            ],
        )
    )


def coefficient_chart(features: Sequence[str], values: Sequence[float]) -> alt.Chart:
    df = pd.DataFrame({"feature": list(features), "coefficient": list(values)})
    return (
        alt.Chart(df)
        .mark_bar(cornerRadiusEnd=6)
        .encode(
            y=alt.Y("feature:N", title=None, sort=list(features), axis=alt.Axis(grid=False)),
            x=alt.X("coefficient:Q", title="Coefficient value", axis=alt.Axis(**GRID)),
            color=alt.condition(alt.datum.coefficient >= 0, alt.value("#3b82f6"), alt.value("#ef4444")),
            tooltip=[alt.Tooltip("feature:N"), alt.Tooltip("coefficient:Q", format=".6f")],
        )
    )


def boxplot_chart(stats: Sequence[BoxplotStat], *, x_title: str, y_title: str) -> alt.LayerChart:
    """Draw boxes from precomputed quartiles so the chart matches the reported numbers."""
    labels = [s.label for s in stats]
    boxes = pd.DataFrame(
        [
            {
                "group": s.label,
                "q1": s.q1,
                "median": s.median,
                "q3": s.q3,
                "whisker_min": s.whisker_min,
                "whisker_max": s.whisker_max,
                "count": s.count,
            }
            for s in stats
        ],
        columns=["group", "q1", "median", "q3", "whisker_min", "whisker_max", "count"],
    )
    outliers = pd.DataFrame(
        [{"group": s.label, "value": v} for s in stats for v in s.outliers],
        columns=["group", "value"],
    )
    x = alt.X("group:O", title=x_title, sort=labels, axis=alt.Axis(labelAngle=0, grid=False))
    y_scale = alt.Scale(domain=[0, 1])

    whiskers = alt.Chart(boxes).mark_rule(color="#111827", opacity=0.65).encode(
        x=x,
        y=alt.Y("whisker_min:Q", title=y_title, scale=y_scale, axis=alt.Axis(**GRID)),
        y2="whisker_max:Q",
    )
    box = alt.Chart(boxes).mark_bar(size=24, color="#3b82f6", opacity=0.25, stroke="#111827").encode(
        x=x,
        y=alt.Y("q1:Q", scale=y_scale),
        y2="q3:Q",
        tooltip=[
            alt.Tooltip("group:O", title=x_title),
            alt.Tooltip("q1:Q", format=".3f"),
            alt.Tooltip("median:Q", format=".3f"),
            alt.Tooltip("q3:Q", format=".3f"),
            alt.Tooltip("whisker_min:Q", title="min", format=".3f"),
            alt.Tooltip("whisker_max:Q", title="max", format=".3f"),
            alt.Tooltip("count:Q", title="n"),
        ],
    )
    median = alt.Chart(boxes).mark_tick(size=24, color="#111827", thickness=2).encode(
        x=x,
        y=alt.Y("median:Q", scale=y_scale),
    )
    points = alt.Chart(outliers).mark_circle(size=12, color="#111827", opacity=0.45).encode(
        x=x,
        y=alt.Y("value:Q", scale=y_scale),
        tooltip=[alt.Tooltip("value:Q", title="Outlier", format=".3f")],
    )
    return alt.layer(whiskers, box, median, points)


def predicted_actual_chart(points: List[Dict[str, float]], lo: float, hi: float) -> alt.LayerChart:
    df = pd.DataFrame(points, columns=["predicted", "actual"])
    ideal = pd.DataFrame({"predicted": [lo, hi], "actual": [lo, hi]})
    scale = alt.Scale(domain=[0, 1])
    scatter = alt.Chart(df).mark_circle(size=14, opacity=0.5).encode(
        x=alt.X("predicted:Q", title="Predicted accuracy", scale=scale),
        y=alt.Y("actual:Q", title="Actual accuracy", scale=scale),
        tooltip=[alt.Tooltip("predicted:Q", format=".3f"), alt.Tooltip("actual:Q", format=".3f")],
    )
    line = alt.Chart(ideal).mark_line(color="#ef4444", strokeWidth=2).encode(
        x=alt.X("predicted:Q", scale=scale),
        y=alt.Y("actual:Q", scale=scale),
    )
    return scatter + line
