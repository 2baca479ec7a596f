from __future__ import annotations

from dataclasses import dataclass, fields
import math
from numbers import Number
from operator import attrgetter
from typing import Any, Callable, Iterable, List, Mapping, NamedTuple, Optional, Union

import pandas as pd

CATEGORICAL_FIELDS = ("model_architecture", "deployment_environment", "task_category")
INTEGER_FIELDS = ("task_complexity", "autonomy_level")
REQUIRED_NUMERIC_FIELDS = (
    "task_complexity",
    "autonomy_level",
    "success_rate",
    "accuracy_score",
    "execution_time_seconds",
    "cpu_usage_percent",
    "cost_per_task_cents",
)
OPTIONAL_NUMERIC_FIELDS = ("performance_index",)


@dataclass(frozen=True)
class Row:
    task_complexity: int
    autonomy_level: int
    success_rate: float
    accuracy_score: float
    execution_time_seconds: float
    cpu_usage_percent: float
    cost_per_task_cents: float
    performance_index: Optional[float] = None
    model_architecture: Optional[str] = None
    deployment_environment: Optional[str] = None
    task_category: Optional[str] = None


ROW_FIELDS = frozenset(f.name for f in fields(Row))

Selector = Callable[[Row], Any]
FieldRef = Union[str, Selector]


class NormalizedRows(NamedTuple):
    rows: List[Row]
    excluded: int


def selector(ref: FieldRef) -> Selector:
    """Resolve a Row field name (or pass through a callable) into a key function."""
    if callable(ref):
        return ref
    if ref not in ROW_FIELDS:
        raise ValueError(f"Unknown row field: {ref!r}")
    return attrgetter(ref)


def to_number(value: object) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, Number):
        return None
    out = pd.to_numeric(value, errors="coerce")
    if pd.isna(out) or not math.isfinite(float(out)):
        return None
    return float(out)


def _to_text(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    s = str(value).strip()
    return s or None


def normalize_record(record: Mapping[str, object]) -> Optional[Row]:
    """Build a Row from one raw CSV record, or None when a required field is missing."""
    parsed = {}
    for name in REQUIRED_NUMERIC_FIELDS:
        num = to_number(record.get(name))
        if num is None:
            return None
        if name in INTEGER_FIELDS:
            if not num.is_integer():
                return None
            num = int(num)
        parsed[name] = num
    for name in OPTIONAL_NUMERIC_FIELDS:
        parsed[name] = to_number(record.get(name))
    text = {name: _to_text(record.get(name)) for name in CATEGORICAL_FIELDS}
    return Row(**parsed, **text)


def normalize_records(records: Iterable[Mapping[str, object]]) -> NormalizedRows:
    rows: List[Row] = []
    excluded = 0
    for record in records:
        row = normalize_record(record)
        if row is None:
            excluded += 1
            continue
        rows.append(row)
    return NormalizedRows(rows, excluded)


def group_label(key: object) -> str:
    # Integral keys print without a trailing ".0" so labels read 1..10.
    if isinstance(key, float) and key.is_integer():
        return str(int(key))
    return str(key)
