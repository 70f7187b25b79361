"""Typed models for API requests/responses and cache entries."""

from __future__ import annotations

import datetime as dt
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from src.engine.models import DayOverlay, FilterState, FlightCategory, WeekOverlay

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Cache wrapper
# ---------------------------------------------------------------------------


class CacheEntry(BaseModel, Generic[T]):
    """Derived data tied to the version of the files it was built from."""

    model_config = {"arbitrary_types_allowed": True}

    loaded_at: dt.datetime
    source_version: tuple[int, ...]
    data: T

    def is_current(self, source_version: tuple[int, ...]) -> bool:
        return self.source_version == source_version


# ---------------------------------------------------------------------------
# Filter state as sent by clients
# ---------------------------------------------------------------------------


class FilterPayload(BaseModel):
    """Client-side toggles; omitted tails/categories are treated as enabled."""

    visible_tails: dict[str, bool] = Field(default_factory=dict)
    categories: dict[FlightCategory, bool] = Field(default_factory=dict)
    show_flight_category: bool = True
    show_temperature: bool = True
    hour_px: Optional[float] = Field(default=None, ge=2, le=8)

    def to_filter_state(self, default_hour_px: float) -> FilterState:
        return FilterState(
            visible_tails=self.visible_tails,
            categories=self.categories,
            show_flight_category=self.show_flight_category,
            show_temperature=self.show_temperature,
            hour_px=self.hour_px if self.hour_px is not None else default_hour_px,
        )


# ---------------------------------------------------------------------------
# API request models
# ---------------------------------------------------------------------------


class WeekRequest(BaseModel):
    week_index: int = Field(ge=0)
    filters: FilterPayload = Field(default_factory=FilterPayload)


class DayRequest(BaseModel):
    date: dt.date
    filters: FilterPayload = Field(default_factory=FilterPayload)


class CountsRequest(BaseModel):
    filters: FilterPayload = Field(default_factory=FilterPayload)


# ---------------------------------------------------------------------------
# API response models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    tails: Optional[int] = None
    intervals: Optional[int] = None
    weather_buckets: Optional[int] = None
    detail: Optional[str] = None


class TailInfo(BaseModel):
    tail: str
    color: str
    blocks: int = 0
    days: int = 0
    first_date: Optional[dt.date] = None
    last_date: Optional[dt.date] = None
    total_hours: float = 0.0


class CategoryInfo(BaseModel):
    category: FlightCategory
    color: str


class MetaResponse(BaseModel):
    start_date: dt.date
    end_date: dt.date
    week_count: int
    week_labels: list[str]
    default_hour_px: float
    tails: list[TailInfo]
    categories: list[CategoryInfo]


class WeekResponse(BaseModel):
    week_index: int
    hour_px: float
    week: WeekOverlay


class DayResponse(BaseModel):
    hour_px: float
    day: DayOverlay


class CountsResponse(BaseModel):
    counts: dict[FlightCategory, int]
