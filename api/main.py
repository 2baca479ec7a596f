from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardFiltersModel, MetaFiltersResponse
from core.data import load_dashboard_data, prepare_context, rows_to_frame
from core.filters import DashboardFilters
from core.metrics_debug import compute_debug
from core.metrics_exploration import compute_exploration
from core.metrics_ml import compute_ml
from core.metrics_overview import compute_overview


app = FastAPI(title="Agentic AI Performance Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

PageFn = Callable[[DashboardFilters, Dict[str, Any]], Dict[str, Any]]


def _safe_float(value: object) -> float | None:
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects and NaN."""
    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _page(name: str, fn: PageFn, filters: DashboardFiltersModel) -> JSONResponse:
    try:
        data_ctx = load_dashboard_data()
        ctx = prepare_context(filters.model_dump(), data_ctx)
        return _json(fn(ctx["filters"], ctx))
    except Exception as exc:
        logger.exception("%s failed", name)
        return _error(exc)


@app.get("/meta/filters")
def meta_filters():
    try:
        data_ctx = load_dashboard_data()
        resp = MetaFiltersResponse(
            task_categories=data_ctx.get("task_categories", []),
            deployment_environments=data_ctx.get("deployment_environments", []),
        )
        return _json(resp.model_dump())
    except Exception as exc:
        logger.exception("meta_filters failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: DashboardFiltersModel):
    return _page("overview", compute_overview, filters)


@app.post("/exploration")
def exploration(filters: DashboardFiltersModel):
    return _page("exploration", compute_exploration, filters)


@app.post("/ml")
def ml(filters: DashboardFiltersModel):
    return _page("ml", compute_ml, filters)


@app.post("/debug")
def debug(filters: DashboardFiltersModel):
    return _page("debug", compute_debug, filters)


@app.post("/export/rows")
def export_rows(filters: DashboardFiltersModel):
    data_ctx = load_dashboard_data()
    ctx = prepare_context(filters.model_dump(), data_ctx)
    csv_bytes = rows_to_frame(ctx["filtered_rows"]).to_csv(index=False).encode("utf-8")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=filtered_rows.csv"},
    )
