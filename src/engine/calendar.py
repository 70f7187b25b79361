"""Calendar grid: whole Monday-to-Sunday weeks covering a date range."""

from __future__ import annotations

import datetime as dt

from .models import WeekSpan

DAYS_PER_WEEK = 7

# Hours that get a tick line and label in each day column
TICK_HOURS: tuple[int, ...] = (0, 6, 12, 18)


def monday_on_or_before(day: dt.date) -> dt.date:
    # date.weekday() is Mon=0, which equals (sunday_based_weekday + 6) % 7
    return day - dt.timedelta(days=day.weekday())


def build_weeks(start: dt.date, end: dt.date) -> list[WeekSpan]:
    """Return consecutive full weeks covering ``start``..``end``.

    The first week is back-filled to a Monday and the last one is always
    emitted in full, so it may run past ``end``. ``start > end`` gives ``[]``.
    """
    weeks: list[WeekSpan] = []
    cursor = monday_on_or_before(start)
    while cursor <= end:
        days = tuple(cursor + dt.timedelta(days=i) for i in range(DAYS_PER_WEEK))
        weeks.append(WeekSpan(days=days))
        cursor += dt.timedelta(days=DAYS_PER_WEEK)
    return weeks


def week_index_of(weeks: list[WeekSpan], day: dt.date) -> int | None:
    """Position of the week containing ``day``, or None if outside the grid."""
    if not weeks or day < weeks[0].monday or day > weeks[-1].sunday:
        return None
    return (day - weeks[0].monday).days // DAYS_PER_WEEK


def week_label(week: WeekSpan) -> str:
    """E.g. '07/01/2024' for the week starting Monday 1 July 2024."""
    return week.monday.strftime("%m/%d/%Y")


def day_badge(day: dt.date) -> str:
    """Short date badge: full date on New Year, month/day on the 1st, else the day."""
    if day.month == 1 and day.day == 1:
        return f"{day.month}/{day.day}/{day.year}"
    if day.day == 1:
        return f"{day.month}/{day.day}"
    return str(day.day)


def day_background(day: dt.date, weekday_backgrounds: dict[int, str]) -> str:
    return weekday_backgrounds.get(day.weekday(), "transparent")


def tick_offsets(hour_px: float) -> list[tuple[int, float]]:
    """(hour, pixel offset) pairs for the tick marks of one day column."""
    return [(h, h * hour_px) for h in TICK_HOURS]
