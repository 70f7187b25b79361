"""Which flight categories co-occurred with an activity interval.

An interval is minute-resolution while METAR observations are hourly, so the
interval is walked in 60-minute steps from the top of its start hour and every step is mapped
to a (date, hour) bucket of the weather index. Steps past midnight land on the
following date.
"""

from __future__ import annotations

import bisect
import datetime as dt
from typing import Iterator, Optional, Sequence

from .intervals import HOURS_PER_DAY, minute_bounds
from .models import FlightCategory
from .weather_index import WeatherIndex


def touched_hours(day: dt.date, start: str, end: str) -> Iterator[tuple[dt.date, int]]:
    """Yield the (date, hour) buckets the interval overlaps, in order.

    The walk starts at the top of the start hour, so a partial last hour
    (e.g. 01:00-01:30 of a 23:30-01:30 block) is included.
    """
    s_min, e_min = minute_bounds(start, end)
    next_day = day + dt.timedelta(days=1)
    for t in range((s_min // 60) * 60, e_min, 60):
        hour = t // 60
        if hour >= HOURS_PER_DAY:
            yield next_day, hour % HOURS_PER_DAY
        else:
            yield day, hour


def block_has_category(
    index: WeatherIndex,
    day: dt.date,
    start: str,
    end: str,
    category: FlightCategory,
) -> bool:
    """True as soon as one touched hour has an observation in ``category``."""
    for bucket_day, hour in touched_hours(day, start, end):
        rec = index.lookup(bucket_day, hour)
        if rec is not None and rec.flight_category == category:
            return True
    return False


class CategoryMatcher:
    """Memoized category lookups for activity intervals against one weather index."""

    def __init__(self, index: WeatherIndex):
        self.index = index
        self._cache: dict[tuple[dt.date, str, str], frozenset[FlightCategory]] = {}

    def categories_for_interval(
        self, day: dt.date, start: str, end: str
    ) -> frozenset[FlightCategory]:
        key = (day, start, end)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        found: set[FlightCategory] = set()
        for bucket_day, hour in touched_hours(day, start, end):
            rec = self.index.lookup(bucket_day, hour)
            if rec is not None:
                found.add(rec.flight_category)
        result = frozenset(found)
        self._cache[key] = result
        return result

    def has_category(
        self, day: dt.date, start: str, end: str, category: FlightCategory
    ) -> bool:
        return category in self.categories_for_interval(day, start, end)

    def matches_any(
        self,
        day: dt.date,
        start: str,
        end: str,
        categories: Sequence[FlightCategory],
    ) -> bool:
        found = self.categories_for_interval(day, start, end)
        return any(c in found for c in categories)

    def clear(self) -> None:
        self._cache.clear()


# ---------------------------------------------------------------------------
# Temperature bands
# ---------------------------------------------------------------------------


def temperature_band(
    temp_c: Optional[float], breakpoints: Sequence[float]
) -> Optional[int]:
    """Index of the first breakpoint ``temp_c`` is at or below; ``len(breakpoints)`` if above all.

    Missing temperatures have no band.
    """
    if temp_c is None:
        return None
    return bisect.bisect_left(list(breakpoints), temp_c)


def temperature_color(
    temp_c: Optional[float],
    breakpoints: Sequence[float],
    colors: Sequence[str],
) -> str:
    band = temperature_band(temp_c, breakpoints)
    if band is None:
        return "transparent"
    return colors[band]
