"""Typed domain records, configuration and renderable segments for the timeline engine."""

from __future__ import annotations

import datetime as dt
import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Flight category
# ---------------------------------------------------------------------------


class FlightCategory(str, enum.Enum):
    """METAR flight category, ordered from most to least restrictive."""

    LIFR = "LIFR"
    IFR = "IFR"
    MVFR = "MVFR"
    VFR = "VFR"

    @property
    def severity(self) -> int:
        """0 for LIFR (worst) up to 3 for VFR."""
        return _CATEGORY_ORDER.index(self)


_CATEGORY_ORDER: list[FlightCategory] = list(FlightCategory)

# Colour table used when no override is configured
DEFAULT_CATEGORY_COLORS: dict[FlightCategory, str] = {
    FlightCategory.LIFR: "#FF00FF",
    FlightCategory.IFR: "#FF0000",
    FlightCategory.MVFR: "#0000FF",
    FlightCategory.VFR: "#00FF00",
}

# Upper bounds (inclusive, deg C) of the first six temperature bands
DEFAULT_TEMPERATURE_BREAKPOINTS: tuple[float, ...] = (-30, -10, 0, 10, 20, 30)

DEFAULT_TEMPERATURE_COLORS: tuple[str, ...] = (
    "#2c003e",  # <= -30
    "#0033cc",  # <= -10
    "#33ccff",  # <= 0
    "#66ffcc",  # <= 10
    "#ffff99",  # <= 20
    "#ffcc00",  # <= 30
    "#ff3300",  # warmer
)


# ---------------------------------------------------------------------------
# Source records
# ---------------------------------------------------------------------------


class WeatherRecord(BaseModel):
    """One hourly METAR observation in local time."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    local_time: dt.datetime
    flight_category: FlightCategory
    temp_c: Optional[float] = Field(default=None, alias="temp_C")
    dewpoint_c: Optional[float] = Field(default=None, alias="dewpoint_C")
    raw_data: str = ""

    @field_validator("local_time", mode="before")
    @classmethod
    def _wall_clock(cls, value: object) -> object:
        # Keep the wall-clock reading of the source string; offsets are dropped
        # so the date and hour match what was recorded locally.
        if isinstance(value, str):
            value = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
        if isinstance(value, dt.datetime) and value.tzinfo is not None:
            value = value.replace(tzinfo=None)
        return value

    @field_validator("raw_data", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def date_key(self) -> str:
        return self.local_time.date().isoformat()

    @property
    def hour(self) -> int:
        return self.local_time.hour


class ActivityInterval(BaseModel):
    """A single usage block of one aircraft on one calendar date."""

    model_config = ConfigDict(frozen=True)

    tail: str
    day: dt.date
    start: str
    end: str


# Parsed activity dataset: tail -> ISO date -> [(start, end), ...]
ActivityData = dict[str, dict[str, list[tuple[str, str]]]]


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


class WeekSpan(BaseModel):
    """Seven contiguous dates, Monday through Sunday."""

    model_config = ConfigDict(frozen=True)

    days: tuple[dt.date, ...]

    @property
    def monday(self) -> dt.date:
        return self.days[0]

    @property
    def sunday(self) -> dt.date:
        return self.days[-1]

    def __contains__(self, day: object) -> bool:
        return day in self.days


# ---------------------------------------------------------------------------
# Configuration & filter state
# ---------------------------------------------------------------------------


class TimelineConfig(BaseModel):
    """Everything the engine needs that is not data: range, colours, layout."""

    model_config = ConfigDict(frozen=True)

    start_date: dt.date
    end_date: dt.date
    tails_order: list[str] = Field(default_factory=list)
    tail_colors: dict[str, str] = Field(default_factory=dict)
    category_colors: dict[FlightCategory, str] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_COLORS)
    )
    temperature_breakpoints: tuple[float, ...] = DEFAULT_TEMPERATURE_BREAKPOINTS
    temperature_colors: tuple[str, ...] = DEFAULT_TEMPERATURE_COLORS
    # Keyed by date.weekday() (Mon=0); missing weekdays render transparent
    weekday_backgrounds: dict[int, str] = Field(
        default_factory=lambda: {1: "#F5F5F5", 3: "#F5F5F5", 5: "#E6F9E6", 6: "#E6F0FF"}
    )
    default_hour_px: float = 4.0
    fallback_tail_color: str = "#888888"

    @field_validator("temperature_breakpoints")
    @classmethod
    def _ascending(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if list(value) != sorted(value):
            raise ValueError("temperature_breakpoints must be ascending")
        return value

    def tail_color(self, tail: str) -> str:
        return self.tail_colors.get(tail, self.fallback_tail_color)


class FilterState(BaseModel):
    """Snapshot of the presentation layer's toggles for one render pass.

    Tails or categories absent from the maps count as enabled, so an empty
    ``FilterState()`` shows everything.
    """

    model_config = ConfigDict(frozen=True)

    visible_tails: dict[str, bool] = Field(default_factory=dict)
    categories: dict[FlightCategory, bool] = Field(default_factory=dict)
    show_flight_category: bool = True
    show_temperature: bool = True
    # None means the engine's configured default
    hour_px: Optional[float] = None

    def tail_visible(self, tail: str) -> bool:
        return self.visible_tails.get(tail, True)

    def enabled_categories(self) -> list[FlightCategory]:
        return [c for c in FlightCategory if self.categories.get(c, True)]


# ---------------------------------------------------------------------------
# Renderable segments
# ---------------------------------------------------------------------------


class Segment(BaseModel):
    """Horizontal block inside a day column, in pixels from the column's left edge."""

    offset_px: float
    width_px: float
    color: str
    title: str = ""


class ActivitySegment(Segment):
    tail: str
    start: str
    end: str
    start_hour: float
    end_hour: float
    categories: list[FlightCategory] = Field(default_factory=list)


class CategorySegment(Segment):
    hour: int
    flight_category: FlightCategory


class TemperatureSegment(Segment):
    hour: int
    temp_c: Optional[float] = None
    dewpoint_c: Optional[float] = None
    band: Optional[int] = None


class DayOverlay(BaseModel):
    """Everything drawn in one day column."""

    date: dt.date
    badge: str
    background: str
    activity: dict[str, list[ActivitySegment]] = Field(default_factory=dict)
    flight_categories: list[CategorySegment] = Field(default_factory=list)
    temperatures: list[TemperatureSegment] = Field(default_factory=list)


class WeekOverlay(BaseModel):
    label: str
    days: list[DayOverlay]
