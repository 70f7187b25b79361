from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from . import timeline_service
from .models import (
    CountsRequest,
    CountsResponse,
    DayRequest,
    DayResponse,
    HealthResponse,
    MetaResponse,
    WeekRequest,
    WeekResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="activity-timeline", version="1.0.0")


@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    try:
        return timeline_service.get_health()
    except Exception:
        logger.exception("Health check: datasets not available")
        return HealthResponse(status="error", detail="datasets not loaded")


@app.get("/api/meta", response_model=MetaResponse)
def meta() -> MetaResponse:
    return timeline_service.get_meta()


@app.post("/api/timeline/week", response_model=WeekResponse)
def timeline_week(payload: WeekRequest) -> WeekResponse:
    try:
        return timeline_service.build_week_payload(payload.week_index, payload.filters)
    except timeline_service.OutOfRangeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/api/timeline/day", response_model=DayResponse)
def timeline_day(payload: DayRequest) -> DayResponse:
    try:
        return timeline_service.build_day_payload(payload.date, payload.filters)
    except timeline_service.OutOfRangeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/api/category-counts", response_model=CountsResponse)
def category_counts(payload: CountsRequest) -> CountsResponse:
    return timeline_service.get_category_counts(payload.filters)
