import datetime as dt

from src.engine.models import FlightCategory, WeatherRecord
from src.engine.weather_index import WeatherIndex

from conftest import WEATHER, wx


def _records(rows) -> list[WeatherRecord]:
    return [WeatherRecord.model_validate(r) for r in rows]


def test_one_entry_per_distinct_bucket() -> None:
    index = WeatherIndex(_records(WEATHER))
    distinct = {(r["local_time"][:10], int(r["local_time"][11:13])) for r in WEATHER}
    assert len(index) == len(distinct)
    assert set(index) == distinct


def test_last_write_wins() -> None:
    index = WeatherIndex(
        _records([wx("2025-01-01T05:00", "VFR"), wx("2025-01-01T05:00", "IFR")])
    )
    assert len(index) == 1
    assert index.overwritten == 1
    assert index.lookup("2025-01-01", 5).flight_category is FlightCategory.IFR
    assert index.lookup(dt.date(2025, 1, 1), 5).flight_category is FlightCategory.IFR


def test_minutes_are_ignored_for_bucketing() -> None:
    index = WeatherIndex(
        _records([wx("2025-01-01T05:10", "VFR"), wx("2025-01-01T05:55", "MVFR")])
    )
    assert index.lookup("2025-01-01", 5).flight_category is FlightCategory.MVFR


def test_missing_bucket_is_none() -> None:
    index = WeatherIndex(_records(WEATHER))
    assert index.lookup("2025-01-15", 3) is None
    assert index.lookup("1999-01-01", 0) is None
    assert index.records_for_day("1999-01-01") == []


def test_records_for_day_are_hour_ordered() -> None:
    rows = [wx("2025-01-15T12:00", "IFR"), wx("2025-01-15T03:00", "VFR"), wx("2025-01-15T07:00", "MVFR")]
    index = WeatherIndex(_records(rows))
    assert [r.hour for r in index.records_for_day(dt.date(2025, 1, 15))] == [3, 7, 12]
    assert index.dates() == ["2025-01-15"]


def test_offset_timestamps_keep_local_wall_clock() -> None:
    index = WeatherIndex(_records([wx("2025-01-15T23:53:00-05:00", "VFR")]))
    assert index.lookup("2025-01-15", 23) is not None
