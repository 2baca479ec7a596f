from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from core.rows import FieldRef, Row, selector

DEFAULT_TOP_N = 6


@dataclass(frozen=True)
class RankedEntity:
    name: str
    mean_performance: float
    mean_accuracy: float


def top_n(
    rows: Sequence[Row],
    entity_field: FieldRef = "model_architecture",
    perf_field: FieldRef = "performance_index",
    acc_field: FieldRef = "accuracy_score",
    n: int = DEFAULT_TOP_N,
) -> List[RankedEntity]:
    """Entities ranked by mean performance, best first; missing metrics count as 0."""
    entity_of = selector(entity_field)
    perf_of = selector(perf_field)
    acc_of = selector(acc_field)

    totals: Dict[str, List[float]] = {}
    for row in rows:
        name = entity_of(row)
        if not name:
            continue
        cur = totals.setdefault(name, [0.0, 0.0, 0])
        cur[0] += perf_of(row) or 0.0
        cur[1] += acc_of(row) or 0.0
        cur[2] += 1

    items = [
        RankedEntity(name=name, mean_performance=v[0] / v[2], mean_accuracy=v[1] / v[2])
        for name, v in totals.items()
    ]
    items.sort(key=lambda e: e.mean_performance, reverse=True)
    return items[: max(0, n)]
