"""Engine caching, API payloads and figure building.

The engine (weather index, calendar grid, category memo) is built once per
version of the source files:
- ``get_engine()``          — cached engine, rebuilt when a dataset file changes
- ``build_week_payload()``  — one week of overlays for the API / UI
- ``build_timeline_figure()`` — plotly figure of several weeks
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

import plotly.graph_objects as go

import data_utils

from src.engine.calendar import DAYS_PER_WEEK, tick_offsets, week_label
from src.engine.models import FilterState, FlightCategory, WeekOverlay
from src.engine.overlay import TimelineEngine

from .config import settings
from .models import (
    CacheEntry,
    CategoryInfo,
    CountsResponse,
    DayResponse,
    FilterPayload,
    HealthResponse,
    MetaResponse,
    TailInfo,
    WeekResponse,
)

logger = logging.getLogger(__name__)


class OutOfRangeError(LookupError):
    """Requested week or date lies outside the configured calendar."""


# ---------------------------------------------------------------------------
# Engine cache
# ---------------------------------------------------------------------------
_ENGINE_CACHE: CacheEntry[TimelineEngine] | None = None
_datasets = data_utils.Datasets()


def set_datasets(datasets: data_utils.Datasets) -> None:
    """Point the service at other files (tests, CLI) and drop the cached engine."""
    global _datasets, _ENGINE_CACHE  # noqa: PLW0603
    _datasets = datasets
    _ENGINE_CACHE = None


def get_engine() -> TimelineEngine:
    """Return the engine for the current dataset files, rebuilding it if they changed."""
    global _ENGINE_CACHE  # noqa: PLW0603
    version = _datasets.version()
    if _ENGINE_CACHE is not None and _ENGINE_CACHE.is_current(version):
        return _ENGINE_CACHE.data

    if _ENGINE_CACHE is not None:
        logger.info("Dataset files changed, rebuilding timeline engine")
    engine = TimelineEngine(
        settings.timeline_config(),
        _datasets.read_activity(),
        _datasets.read_weather(),
    )
    _ENGINE_CACHE = CacheEntry(
        loaded_at=dt.datetime.now(dt.timezone.utc),
        source_version=version,
        data=engine,
    )
    return engine


def _filters(payload: Optional[FilterPayload], engine: TimelineEngine) -> FilterState:
    payload = payload or FilterPayload()
    return payload.to_filter_state(engine.config.default_hour_px)


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------


def get_health() -> HealthResponse:
    engine = get_engine()
    return HealthResponse(
        status="ok",
        tails=len(engine.tails),
        intervals=sum(1 for _ in engine.iter_intervals()),
        weather_buckets=len(engine.index),
    )


def get_meta() -> MetaResponse:
    engine = get_engine()
    summary = {
        row["tail"]: row
        for row in data_utils.activity_summary(
            data_utils.activity_frame(engine.activity)
        ).iter_rows(named=True)
    }
    tails = []
    for tail in engine.tails:
        row = summary.get(tail)
        info = TailInfo(tail=tail, color=engine.config.tail_color(tail))
        if row is not None:
            info = TailInfo(
                tail=tail,
                color=info.color,
                blocks=row["blocks"],
                days=row["days"],
                first_date=row["first_date"],
                last_date=row["last_date"],
                total_hours=row["total_hours"],
            )
        tails.append(info)

    return MetaResponse(
        start_date=engine.config.start_date,
        end_date=engine.config.end_date,
        week_count=len(engine.weeks),
        week_labels=[week_label(w) for w in engine.weeks],
        default_hour_px=engine.config.default_hour_px,
        tails=tails,
        categories=[
            CategoryInfo(category=c, color=engine.config.category_colors.get(c, "transparent"))
            for c in FlightCategory
        ],
    )


def build_week_payload(week_index: int, payload: Optional[FilterPayload] = None) -> WeekResponse:
    engine = get_engine()
    if not 0 <= week_index < len(engine.weeks):
        raise OutOfRangeError(
            f"Week index {week_index} outside 0..{len(engine.weeks) - 1}"
        )
    filters = _filters(payload, engine)
    return WeekResponse(
        week_index=week_index,
        hour_px=engine.scale(filters),
        week=engine.week_overlay(engine.weeks[week_index], filters),
    )


def build_day_payload(day: dt.date, payload: Optional[FilterPayload] = None) -> DayResponse:
    engine = get_engine()
    if engine.week_for(day) is None:
        raise OutOfRangeError(f"{day.isoformat()} is outside the configured calendar")
    filters = _filters(payload, engine)
    return DayResponse(hour_px=engine.scale(filters), day=engine.day_overlay(day, filters))


def get_category_counts(payload: Optional[FilterPayload] = None) -> CountsResponse:
    engine = get_engine()
    return CountsResponse(counts=engine.category_counts(_filters(payload, engine)))


# ---------------------------------------------------------------------------
# Figure builder
# ---------------------------------------------------------------------------

_BADGE_ROW_PX = 12
_GAP_PX = 2
_WEEK_MARGIN_PX = 2


def _rect(x0: float, x1: float, y0: float, y1: float, color: str) -> dict:
    return dict(
        type="rect",
        x0=x0,
        x1=x1,
        y0=y0,
        y1=y1,
        xref="x",
        yref="y",
        fillcolor=color,
        line=dict(width=0),
        layer="below",
    )


def build_timeline_figure(
    weeks: list[WeekOverlay],
    tails: list[str],
    hour_px: float,
) -> go.Figure:
    """Calendar-style figure: one band per week, one column per day.

    Each week band holds a badge row, one row per tail (``2 * hour_px`` high)
    and the flight-category and temperature rows (``hour_px`` high each).
    """
    fig = go.Figure()
    if not weeks:
        fig.add_annotation(
            text="No weeks in the configured date range.",
            x=0.5,
            y=0.5,
            xref="paper",
            yref="paper",
            showarrow=False,
        )
        fig.update_layout(height=200)
        return fig

    day_width = 24 * hour_px
    ac_row = 2 * hour_px
    metar_row = hour_px
    week_height = (
        _BADGE_ROW_PX + len(tails) * ac_row + _GAP_PX + 2 * metar_row + _WEEK_MARGIN_PX
    )

    shapes: list[dict] = []
    hover_x: list[float] = []
    hover_y: list[float] = []
    hover_text: list[str] = []
    badge_x: list[float] = []
    badge_y: list[float] = []
    badge_text: list[str] = []

    def _hover(x0: float, width: float, y0: float, height: float, text: str) -> None:
        hover_x.append(x0 + width / 2)
        hover_y.append(y0 + height / 2)
        hover_text.append(text)

    for wi, week in enumerate(weeks):
        top = wi * week_height
        for di, day in enumerate(week.days):
            left = di * day_width
            if day.background != "transparent":
                shapes.append(_rect(left, left + day_width, top, top + week_height, day.background))
            badge_x.append(left + 1)
            badge_y.append(top + _BADGE_ROW_PX / 2)
            badge_text.append(day.badge)

            row_top = top + _BADGE_ROW_PX
            for tail in tails:
                for seg in day.activity.get(tail, []):
                    shapes.append(
                        _rect(
                            left + seg.offset_px,
                            left + seg.offset_px + seg.width_px,
                            row_top,
                            row_top + ac_row,
                            seg.color,
                        )
                    )
                    _hover(left + seg.offset_px, seg.width_px, row_top, ac_row, seg.title)
                row_top += ac_row

            cat_top = row_top + _GAP_PX
            for seg in day.flight_categories:
                shapes.append(
                    _rect(left + seg.offset_px, left + seg.offset_px + seg.width_px,
                          cat_top, cat_top + metar_row, seg.color)
                )
                _hover(left + seg.offset_px, seg.width_px, cat_top, metar_row, seg.title)

            temp_top = cat_top + metar_row
            for seg in day.temperatures:
                if seg.color == "transparent":
                    continue
                shapes.append(
                    _rect(left + seg.offset_px, left + seg.offset_px + seg.width_px,
                          temp_top, temp_top + metar_row, seg.color)
                )
                _hover(left + seg.offset_px, seg.width_px, temp_top, metar_row, seg.title)

    # Hour tick lines across the whole figure
    total_height = len(weeks) * week_height
    for di in range(DAYS_PER_WEEK):
        for _, offset in tick_offsets(hour_px):
            x = di * day_width + offset
            shapes.append(
                dict(type="line", x0=x, x1=x, y0=0, y1=total_height,
                     xref="x", yref="y", line=dict(width=1, color="#CCC"), layer="below")
            )

    fig.add_trace(
        go.Scatter(
            x=badge_x,
            y=badge_y,
            mode="text",
            text=badge_text,
            textposition="middle right",
            textfont=dict(size=8, color="#333"),
            hoverinfo="skip",
            showlegend=False,
        )
    )
    fig.add_trace(
        go.Scatter(
            x=hover_x,
            y=hover_y,
            mode="markers",
            marker=dict(size=max(hour_px, 4), opacity=0),
            hoverinfo="text",
            hovertext=hover_text,
            showlegend=False,
        )
    )

    fig.update_layout(
        shapes=shapes,
        height=max(int(total_height) + 60, 200),
        width=int(DAYS_PER_WEEK * day_width) + 120,
        plot_bgcolor="white",
        margin=dict(l=80, r=10, t=30, b=10),
        xaxis=dict(
            range=[0, DAYS_PER_WEEK * day_width],
            tickvals=[di * day_width + day_width / 2 for di in range(DAYS_PER_WEEK)],
            ticktext=["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"],
            side="top",
            showgrid=False,
            zeroline=False,
            fixedrange=True,
        ),
        yaxis=dict(
            range=[total_height, 0],
            tickvals=[wi * week_height + week_height / 2 for wi in range(len(weeks))],
            ticktext=[w.label for w in weeks],
            tickfont=dict(size=9),
            showgrid=False,
            zeroline=False,
        ),
    )
    return fig


def build_figure(
    payload: Optional[FilterPayload] = None,
    week_indices: Optional[list[int]] = None,
) -> go.Figure:
    """Figure for the given weeks (all weeks by default) under one filter state."""
    engine = get_engine()
    filters = _filters(payload, engine)
    indices = range(len(engine.weeks)) if week_indices is None else week_indices
    weeks = [engine.week_overlay(engine.weeks[i], filters) for i in indices]
    # Hidden tails keep their empty row so the layout does not jump
    return build_timeline_figure(weeks, engine.tails, engine.scale(filters))
