"""Per-day overlay of activity blocks and weather layers.

``TimelineEngine`` owns the derived structures (calendar grid, weather index,
category memo) for one version of the source datasets. Every public method is
a pure function of its arguments and those structures; the filter state is
passed in on each call and never stored.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Optional

from .calendar import build_weeks, day_background, day_badge, week_index_of, week_label
from .categories import CategoryMatcher, temperature_band
from .intervals import hour_bounds
from .models import (
    ActivityData,
    ActivityInterval,
    ActivitySegment,
    CategorySegment,
    DayOverlay,
    FilterState,
    FlightCategory,
    TemperatureSegment,
    TimelineConfig,
    WeatherRecord,
    WeekOverlay,
    WeekSpan,
)
from .weather_index import WeatherIndex

logger = logging.getLogger(__name__)


class TimelineEngine:
    def __init__(
        self,
        config: TimelineConfig,
        activity: ActivityData,
        weather: WeatherIndex | Iterable[WeatherRecord],
    ):
        self.config = config
        self.activity = activity
        self.index = weather if isinstance(weather, WeatherIndex) else WeatherIndex(weather)
        self.matcher = CategoryMatcher(self.index)
        self.weeks: list[WeekSpan] = build_weeks(config.start_date, config.end_date)

        # Configured order first, then any extra tails found in the data
        extra = sorted(t for t in activity if t not in config.tails_order)
        self.tails: list[str] = [t for t in config.tails_order if t in activity] + extra
        logger.info(
            "Timeline engine ready: %d tails, %d weeks (%s to %s)",
            len(self.tails),
            len(self.weeks),
            config.start_date,
            config.end_date,
        )

    def scale(self, filters: FilterState) -> float:
        """Pixels per hour for this render pass."""
        if filters.hour_px is None:
            return self.config.default_hour_px
        return filters.hour_px

    # -----------------------------------------------------------------------
    # Activity
    # -----------------------------------------------------------------------

    def intervals_for_day(self, tail: str, day: dt.date) -> list[ActivityInterval]:
        blocks = self.activity.get(tail, {}).get(day.isoformat(), [])
        return [ActivityInterval(tail=tail, day=day, start=s, end=e) for s, e in blocks]

    def iter_intervals(self, tails: Optional[Iterable[str]] = None) -> Iterable[ActivityInterval]:
        for tail in self.tails if tails is None else tails:
            for date_key, blocks in self.activity.get(tail, {}).items():
                day = dt.date.fromisoformat(date_key)
                for start, end in blocks:
                    yield ActivityInterval(tail=tail, day=day, start=start, end=end)

    def activity_segments(
        self, tail: str, day: dt.date, filters: FilterState
    ) -> list[ActivitySegment]:
        """Blocks of ``tail`` on ``day`` that co-occurred with an enabled category.

        Blocks without any enabled-category match are dropped, not dimmed.
        """
        enabled = filters.enabled_categories()
        color = self.config.tail_color(tail)
        px = self.scale(filters)
        segments: list[ActivitySegment] = []
        for interval in self.intervals_for_day(tail, day):
            found = self.matcher.categories_for_interval(day, interval.start, interval.end)
            if not any(c in found for c in enabled):
                continue
            s_hour, e_hour = hour_bounds(interval.start, interval.end)
            segments.append(
                ActivitySegment(
                    tail=tail,
                    start=interval.start,
                    end=interval.end,
                    start_hour=s_hour,
                    end_hour=e_hour,
                    offset_px=s_hour * px,
                    width_px=(e_hour - s_hour) * px,
                    color=color,
                    categories=sorted(found, key=lambda c: c.severity),
                    title=f"{tail} {day.isoformat()} {interval.start}–{interval.end}",
                )
            )
        return segments

    # -----------------------------------------------------------------------
    # Weather layers
    # -----------------------------------------------------------------------

    def category_segments(self, day: dt.date, filters: FilterState) -> list[CategorySegment]:
        if not filters.show_flight_category:
            return []
        px = self.scale(filters)
        return [
            CategorySegment(
                hour=rec.hour,
                flight_category=rec.flight_category,
                offset_px=rec.hour * px,
                width_px=px,
                color=self.config.category_colors.get(rec.flight_category, "transparent"),
                title=f"{rec.local_time.isoformat()}: {rec.flight_category.value}\n{rec.raw_data}",
            )
            for rec in self.index.records_for_day(day)
        ]

    def temperature_segments(
        self, day: dt.date, filters: FilterState
    ) -> list[TemperatureSegment]:
        if not filters.show_temperature:
            return []
        px = self.scale(filters)
        segments: list[TemperatureSegment] = []
        for rec in self.index.records_for_day(day):
            band = temperature_band(rec.temp_c, self.config.temperature_breakpoints)
            segments.append(
                TemperatureSegment(
                    hour=rec.hour,
                    temp_c=rec.temp_c,
                    dewpoint_c=rec.dewpoint_c,
                    band=band,
                    offset_px=rec.hour * px,
                    width_px=px,
                    color="transparent" if band is None else self.config.temperature_colors[band],
                    title=f"{rec.local_time.isoformat()}: {rec.temp_c}°C / {rec.dewpoint_c}°C",
                )
            )
        return segments

    # -----------------------------------------------------------------------
    # Aggregates
    # -----------------------------------------------------------------------

    def day_overlay(self, day: dt.date, filters: FilterState) -> DayOverlay:
        return DayOverlay(
            date=day,
            badge=day_badge(day),
            background=day_background(day, self.config.weekday_backgrounds),
            activity={
                tail: self.activity_segments(tail, day, filters)
                for tail in self.tails
                if filters.tail_visible(tail)
            },
            flight_categories=self.category_segments(day, filters),
            temperatures=self.temperature_segments(day, filters),
        )

    def week_overlay(self, week: WeekSpan, filters: FilterState) -> WeekOverlay:
        return WeekOverlay(
            label=week_label(week),
            days=[self.day_overlay(day, filters) for day in week.days],
        )

    def week_for(self, day: dt.date) -> Optional[WeekSpan]:
        idx = week_index_of(self.weeks, day)
        return None if idx is None else self.weeks[idx]

    def timeline(self, filters: FilterState) -> list[WeekOverlay]:
        return [self.week_overlay(week, filters) for week in self.weeks]

    def category_counts(self, filters: FilterState) -> dict[FlightCategory, int]:
        """Number of intervals of visible tails co-occurring with each category.

        An interval touching several categories counts once for each of them.
        Category toggles are ignored; the counts label those toggles.
        """
        counts = {c: 0 for c in FlightCategory}
        visible = [t for t in self.tails if filters.tail_visible(t)]
        for interval in self.iter_intervals(visible):
            for cat in self.matcher.categories_for_interval(
                interval.day, interval.start, interval.end
            ):
                counts[cat] += 1
        return counts
