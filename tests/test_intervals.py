import pytest

from src.engine.intervals import (
    clock_to_hours,
    clock_to_minutes,
    duration_hours,
    hour_bounds,
    is_overnight,
    minute_bounds,
    parse_clock,
    pixel_geometry,
)


def test_parse_clock() -> None:
    assert parse_clock("0000") == (0, 0)
    assert parse_clock("2359") == (23, 59)
    assert clock_to_hours("0745") == pytest.approx(7.75)
    assert clock_to_minutes("1330") == 810


def test_same_day_interval_width_is_exact() -> None:
    s, e = hour_bounds("0815", "1045")
    assert (s, e) == pytest.approx((8.25, 10.75))
    offset, width = pixel_geometry("0815", "1045", 4)
    assert offset == pytest.approx(33.0)
    assert width == pytest.approx((10.75 - 8.25) * 4)
    assert not is_overnight("0815", "1045")


def test_cross_midnight_example() -> None:
    s, e = hour_bounds("2330", "0130")
    assert s == pytest.approx(23.5)
    assert e == pytest.approx(1.5 + 24)
    offset, width = pixel_geometry("2330", "0130", 4)
    assert offset == pytest.approx(94.0)
    assert width == pytest.approx(8.0)
    assert is_overnight("2330", "0130")


def test_equal_start_and_end_is_a_full_day() -> None:
    assert hour_bounds("0600", "0600") == pytest.approx((6.0, 30.0))
    assert minute_bounds("0600", "0600") == (360, 360 + 1440)
    assert duration_hours("0600", "0600") == pytest.approx(24.0)
    assert is_overnight("0600", "0600")


def test_end_at_midnight_rolls_over() -> None:
    assert hour_bounds("2200", "0000") == pytest.approx((22.0, 24.0))
    assert minute_bounds("2200", "0000") == (1320, 1440)


@pytest.mark.parametrize(
    "start,end",
    [("0000", "0001"), ("1200", "1159"), ("2359", "0000"), ("0930", "0930"), ("0100", "2300")],
)
def test_width_never_negative_and_bounds_in_range(start: str, end: str) -> None:
    s, e = hour_bounds(start, end)
    assert 0 <= s < 24
    assert s < e < 48
    _, width = pixel_geometry(start, end, 6)
    assert width >= 0
