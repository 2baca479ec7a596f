from __future__ import annotations

from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from core.rows import FieldRef, Row, group_label, selector

KPI_FIELDS = {
    "mean_accuracy": "accuracy_score",
    "mean_cost": "cost_per_task_cents",
    "mean_time": "execution_time_seconds",
    "mean_cpu": "cpu_usage_percent",
}


class GroupAverage(NamedTuple):
    labels: List[str]
    values: List[float]


def mean(values: Iterable[float]) -> Optional[float]:
    total = 0.0
    count = 0
    for v in values:
        total += v
        count += 1
    if not count:
        return None
    return total / count


def group_average(rows: Sequence[Row], group_field: FieldRef, value_field: FieldRef) -> GroupAverage:
    """Mean of ``value_field`` per distinct ``group_field`` value, keys ascending."""
    key_of = selector(group_field)
    value_of = selector(value_field)
    acc: Dict[object, List[float]] = {}
    for row in rows:
        k = key_of(row)
        v = value_of(row)
        if k is None or v is None:
            continue
        cur = acc.setdefault(k, [0.0, 0])
        cur[0] += v
        cur[1] += 1

    keys = sorted(acc)
    return GroupAverage(
        labels=[group_label(k) for k in keys],
        values=[round(acc[k][0] / acc[k][1], 3) for k in keys],
    )


def field_means(rows: Sequence[Row]) -> Dict[str, Optional[float]]:
    out: Dict[str, Optional[float]] = {}
    for name, field in KPI_FIELDS.items():
        get = selector(field)
        out[name] = mean(v for v in (get(r) for r in rows) if v is not None)
    return out
