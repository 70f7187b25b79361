"""Date/hour join index over hourly weather observations."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Iterator, Optional

from .models import WeatherRecord

logger = logging.getLogger(__name__)


def _date_key(day: dt.date | str) -> str:
    return day if isinstance(day, str) else day.isoformat()


class WeatherIndex:
    """Two-level lookup ``date -> hour -> WeatherRecord``.

    Built once from the full record sequence. When several observations fall
    in the same local hour the last one in source order wins. A missing bucket
    simply means there is no observation for that hour.
    """

    def __init__(self, records: Iterable[WeatherRecord]):
        self._by_date: dict[str, dict[int, WeatherRecord]] = {}
        self.source_count = 0
        self.overwritten = 0
        for rec in records:
            hours = self._by_date.setdefault(rec.date_key, {})
            if rec.hour in hours:
                self.overwritten += 1
            hours[rec.hour] = rec
            self.source_count += 1

        if self.overwritten:
            logger.warning(
                "Weather index: %d of %d observations replaced an earlier one in the same hour",
                self.overwritten,
                self.source_count,
            )
        logger.info(
            "Built weather index: %d hourly buckets over %d days",
            len(self),
            len(self._by_date),
        )

    def __len__(self) -> int:
        return sum(len(hours) for hours in self._by_date.values())

    def __iter__(self) -> Iterator[tuple[str, int]]:
        for date_key in sorted(self._by_date):
            for hour in sorted(self._by_date[date_key]):
                yield date_key, hour

    def lookup(self, day: dt.date | str, hour: int) -> Optional[WeatherRecord]:
        hours = self._by_date.get(_date_key(day))
        if hours is None:
            return None
        return hours.get(hour)

    def records_for_day(self, day: dt.date | str) -> list[WeatherRecord]:
        """All observations of one local date, ordered by hour."""
        hours = self._by_date.get(_date_key(day), {})
        return [hours[h] for h in sorted(hours)]

    def dates(self) -> list[str]:
        return sorted(self._by_date)
