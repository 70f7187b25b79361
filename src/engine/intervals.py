"""Activity interval parsing and geometry.

Intervals are stored as pairs of 4-digit 24-hour clock codes (``"HHMM"``).
An end at or before the start means the block runs past midnight; it is still
drawn in the column of the day it started, extending up to 24 h to the right.
"""

from __future__ import annotations

MINUTES_PER_DAY = 1440
HOURS_PER_DAY = 24


def parse_clock(code: str) -> tuple[int, int]:
    """Split ``"HHMM"`` into (hour, minute). Codes are trusted as well-formed."""
    return int(code[:2]), int(code[2:4])


def clock_to_hours(code: str) -> float:
    hour, minute = parse_clock(code)
    return hour + minute / 60


def clock_to_minutes(code: str) -> int:
    hour, minute = parse_clock(code)
    return hour * 60 + minute


def is_overnight(start: str, end: str) -> bool:
    """True when the block continues into the next calendar day."""
    return clock_to_minutes(end) <= clock_to_minutes(start)


def hour_bounds(start: str, end: str) -> tuple[float, float]:
    """Fractional-hour interval ``[sH, eH)`` with ``0 <= sH < 24`` and ``eH < 48``."""
    s_hour = clock_to_hours(start)
    e_hour = clock_to_hours(end)
    if e_hour <= s_hour:
        e_hour += HOURS_PER_DAY
    return s_hour, e_hour


def minute_bounds(start: str, end: str) -> tuple[int, int]:
    """Minute-of-day interval ``[sMin, eMin)``, with the same rollover rule."""
    s_min = clock_to_minutes(start)
    e_min = clock_to_minutes(end)
    if e_min <= s_min:
        e_min += MINUTES_PER_DAY
    return s_min, e_min


def pixel_geometry(start: str, end: str, hour_px: float) -> tuple[float, float]:
    """Return ``(offset_px, width_px)`` of the block at ``hour_px`` pixels per hour."""
    s_hour, e_hour = hour_bounds(start, end)
    return s_hour * hour_px, (e_hour - s_hour) * hour_px


def duration_hours(start: str, end: str) -> float:
    s_hour, e_hour = hour_bounds(start, end)
    return e_hour - s_hour
