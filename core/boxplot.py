from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from core.rows import FieldRef, Row, group_label, selector

WHISKER_K = 1.5


@dataclass(frozen=True)
class BoxplotStat:
    label: str
    q1: float
    median: float
    q3: float
    whisker_min: float
    whisker_max: float
    outliers: Tuple[float, ...] = ()
    count: int = 0

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    @property
    def low_fence(self) -> float:
        return self.q1 - WHISKER_K * self.iqr

    @property
    def high_fence(self) -> float:
        return self.q3 + WHISKER_K * self.iqr


def quantile(sorted_values: Sequence[float], q: float) -> Optional[float]:
    """Linearly interpolated quantile of an already sorted sequence."""
    if not sorted_values:
        return None
    pos = (len(sorted_values) - 1) * q
    base = math.floor(pos)
    rest = pos - base
    if base + 1 >= len(sorted_values):
        return sorted_values[base]
    return sorted_values[base] + rest * (sorted_values[base + 1] - sorted_values[base])


def summarize(label: str, values: Sequence[float]) -> BoxplotStat:
    arr = sorted(values)
    q1 = quantile(arr, 0.25)
    med = quantile(arr, 0.5)
    q3 = quantile(arr, 0.75)
    iqr = q3 - q1
    low_fence = q1 - WHISKER_K * iqr
    high_fence = q3 + WHISKER_K * iqr

    inliers = [v for v in arr if low_fence <= v <= high_fence]
    whisker_min = min(inliers) if inliers else arr[0]
    whisker_max = max(inliers) if inliers else arr[-1]
    outliers = tuple(v for v in arr if v < low_fence or v > high_fence)

    return BoxplotStat(
        label=label,
        q1=q1,
        median=med,
        q3=q3,
        whisker_min=whisker_min,
        whisker_max=whisker_max,
        outliers=outliers,
        count=len(arr),
    )


def boxplot_stats(rows: Sequence[Row], group_field: FieldRef, value_field: FieldRef) -> List[BoxplotStat]:
    key_of = selector(group_field)
    value_of = selector(value_field)
    groups: Dict[object, List[float]] = {}
    for row in rows:
        k = key_of(row)
        v = value_of(row)
        if k is None or v is None:
            continue
        groups.setdefault(k, []).append(v)

    return [summarize(group_label(k), groups[k]) for k in sorted(groups)]
