from __future__ import annotations

import logging
import os
from dataclasses import asdict
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from core.filters import ALL, DashboardFilters, normalize_filters
from core.rows import OPTIONAL_NUMERIC_FIELDS, REQUIRED_NUMERIC_FIELDS, Row, normalize_records

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
CSV_GLOB = "agentic_ai_performance_dataset_*.csv"
CSV_ENV_VAR = "AGENTIC_DASHBOARD_CSV"


def get_source_file() -> Optional[Path]:
    override = os.environ.get(CSV_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None
    files = sorted(DATA_DIR.glob(CSV_GLOB))
    return files[-1] if files else None


def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path), path.stat().st_mtime)


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col].str.strip(), errors="coerce")
    return df


def load_records(path: Path) -> Tuple[List[Dict[str, object]], int]:
    """Read the CSV with numeric columns coerced (unparseable -> NaN); returns (records, column count)."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    df = df.loc[:, ~df.columns.duplicated()]
    df.columns = [str(c).strip() for c in df.columns]
    df = numericize(df, REQUIRED_NUMERIC_FIELDS + OPTIONAL_NUMERIC_FIELDS)
    return df.to_dict(orient="records"), int(len(df.columns))


def filter_options(rows: Sequence[Row]) -> Dict[str, List[str]]:
    tasks = sorted({r.task_category for r in rows if r.task_category})
    envs = sorted({r.deployment_environment for r in rows if r.deployment_environment})
    return {"task_categories": tasks, "deployment_environments": envs}


def filter_rows(rows: Sequence[Row], filters: DashboardFilters) -> List[Row]:
    task = filters.task_category
    env = filters.deployment_environment
    return [
        r
        for r in rows
        if (task == ALL or r.task_category == task) and (env == ALL or r.deployment_environment == env)
    ]


def rows_to_frame(rows: Sequence[Row]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=list(Row.__dataclass_fields__))
    return pd.DataFrame([asdict(r) for r in rows])


def _empty_context() -> Dict[str, object]:
    return {
        "file": None,
        "columns": 0,
        "rows": [],
        "loaded_rows": 0,
        "excluded_rows": 0,
        "task_categories": [],
        "deployment_environments": [],
    }


# ---------------- Public API (Streamlit parity + FastAPI use) ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(file_sig: Tuple[str, float]) -> Dict[str, object]:
    path = Path(file_sig[0])
    records, columns = load_records(path)
    rows, excluded = normalize_records(records)
    logger.info("Loaded %d rows from %s (%d excluded as incomplete)", len(rows), path.name, excluded)
    return {
        "file": path.name,
        "columns": columns,
        "rows": rows,
        "loaded_rows": len(records),
        "excluded_rows": excluded,
        **filter_options(rows),
    }


def load_dashboard_data(path: Optional[Path] = None) -> Dict[str, object]:
    path = path or get_source_file()
    if path is None or not path.is_file():
        logger.warning("No dataset found (looked for %s in %s)", CSV_GLOB, DATA_DIR)
        return _empty_context()
    return _load_dashboard_data_cached(file_signature(path))


def prepare_context(filters: dict | DashboardFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    rows: List[Row] = list(data_ctx.get("rows", []) or [])
    filt = (
        filters
        if isinstance(filters, DashboardFilters)
        else normalize_filters(
            filters,
            available_tasks=data_ctx.get("task_categories"),
            available_envs=data_ctx.get("deployment_environments"),
        )
    )
    return {
        "filters": filt,
        "file": data_ctx.get("file"),
        "columns": int(data_ctx.get("columns", 0) or 0),
        "rows": rows,
        "filtered_rows": filter_rows(rows, filt),
        "loaded_rows": int(data_ctx.get("loaded_rows", 0) or 0),
        "excluded_rows": int(data_ctx.get("excluded_rows", 0) or 0),
        "task_categories": list(data_ctx.get("task_categories", []) or []),
        "deployment_environments": list(data_ctx.get("deployment_environments", []) or []),
    }
