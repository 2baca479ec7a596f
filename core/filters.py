from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

ALL = "__all__"


@dataclass(frozen=True)
class DashboardFilters:
    task_category: str = ALL
    deployment_environment: str = ALL
    top_n: int = 6
    scatter_sample: int = 900


def _as_choice(value: object, available: Optional[Iterable[str]]) -> str:
    if value is None:
        return ALL
    s = str(value).strip()
    if not s or s == ALL:
        return ALL
    if available is not None and s not in set(available):
        return ALL
    return s


def _as_int(value: object, default: int, lo: int, hi: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        out = default
    return max(lo, min(hi, out))


def normalize_filters(
    raw: dict,
    *,
    available_tasks: Optional[Iterable[str]] = None,
    available_envs: Optional[Iterable[str]] = None,
) -> DashboardFilters:
    return DashboardFilters(
        task_category=_as_choice(raw.get("task_category"), available_tasks),
        deployment_environment=_as_choice(raw.get("deployment_environment"), available_envs),
        top_n=_as_int(raw.get("top_n", 6), 6, 1, 50),
        scatter_sample=_as_int(raw.get("scatter_sample", 900), 900, 50, 5000),
    )
