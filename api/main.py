from __future__ import annotations

import logging
import math

import numpy as np
import uvicorn
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardFiltersModel, FilterOptionsResponse, OverviewResponse
from core.config import DashboardConfig, configure_logging
from core.data import Dataset, load_dashboard_data
from core.export import build_export
from core.filters import FilteredView, apply_filter, filter_options, normalize_filters
from core.metrics_overview import compute_overview


config = DashboardConfig.from_env()
configure_logging(config.log_level)

app = FastAPI(title="Travel Analytics Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _dataset() -> Dataset:
    return load_dashboard_data(config.data_path)


def _view(model: DashboardFiltersModel, dataset: Dataset) -> FilteredView:
    filters = normalize_filters(model.model_dump(), dataset=dataset)
    rng = np.random.default_rng(model.seed) if model.seed is not None else None
    return apply_filter(dataset, filters, rng=rng, scale_range=config.scale_range)


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


@app.get("/meta/filters")
def meta_filters():
    try:
        options = filter_options(_dataset())
        return _json(FilterOptionsResponse(**options).model_dump())
    except Exception as exc:
        logger.exception("meta_filters failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: DashboardFiltersModel, charts: bool = True):
    try:
        view = _view(filters, _dataset())
        payload = compute_overview(view, config, include_charts=charts)
        return _json(OverviewResponse.model_validate(payload).model_dump())
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/export")
def export(filters: DashboardFiltersModel):
    try:
        artifact = build_export(_view(filters, _dataset()))
    except Exception as exc:
        logger.exception("export failed")
        return _error(exc)
    return Response(
        content=artifact.content,
        media_type=artifact.mime,
        headers={"Content-Disposition": f"attachment; filename={artifact.filename}"},
    )


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8000)
