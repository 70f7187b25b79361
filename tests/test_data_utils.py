import datetime as dt
import json

import polars as pl
import pytest

import data_utils
from src.engine.models import FlightCategory

from conftest import ACTIVITY, wx


def test_parse_activity_accepts_both_shapes() -> None:
    flat = data_utils.parse_activity(ACTIVITY)
    wrapped = data_utils.parse_activity(
        {tail: {"blocksByDate": by_date} for tail, by_date in ACTIVITY.items()}
    )
    assert flat == wrapped
    assert flat["N65620"]["2025-01-15"] == [("0800", "0930"), ("2330", "0130")]


def test_weather_frame_keeps_source_order_and_fills_columns() -> None:
    rows = [wx("2025-01-01T05:00", "VFR", 3), wx("2025-01-01T05:00", "IFR", 2.5)]
    df = data_utils.weather_frame(rows)
    assert df.columns == ["local_time", "flight_category", "temp_C", "dewpoint_C", "raw_data"]
    assert df["flight_category"].to_list() == ["VFR", "IFR"]

    records = data_utils.parse_weather(df)
    assert [r.flight_category for r in records] == [FlightCategory.VFR, FlightCategory.IFR]
    assert records[0].temp_c == 3.0
    assert records[0].raw_data == ""


def test_weather_rows_without_timestamp_are_dropped() -> None:
    rows = [wx("2025-01-01T05:00", "VFR"), {"flight_category": "IFR", "temp_C": 1.0}]
    assert data_utils.weather_frame(rows).height == 1


def test_empty_weather_dataset() -> None:
    assert data_utils.parse_weather(data_utils.weather_frame([])) == []


def test_unknown_category_names_the_row() -> None:
    df = data_utils.weather_frame([wx("2025-01-01T05:00", "VFR"), wx("2025-01-01T06:00", "SUNNY")])
    with pytest.raises(ValueError, match="#1"):
        data_utils.parse_weather(df)


def test_activity_summary() -> None:
    frame = data_utils.activity_frame(data_utils.parse_activity(ACTIVITY))
    assert frame.height == 4
    assert frame.schema["date"] == pl.Date

    summary = data_utils.activity_summary(frame)
    row = summary.filter(pl.col("tail") == "N65620").row(0, named=True)
    assert row["blocks"] == 3
    assert row["days"] == 2
    assert row["first_date"] == dt.date(2025, 1, 15)
    assert row["last_date"] == dt.date(2025, 1, 16)
    assert row["total_hours"] == pytest.approx(1.5 + 2.0 + 1.0)


def test_empty_activity_frame() -> None:
    assert data_utils.activity_frame({}).height == 0


def test_datasets_read_and_version(dataset_files, tmp_path) -> None:
    assert set(dataset_files.read_activity()) == {"N65620", "N854GW"}
    assert len(dataset_files.read_weather()) == 7

    before = dataset_files.version()
    dataset_files.weather_path.write_text(json.dumps([wx("2025-01-01T05:00", "VFR")]), encoding="utf-8")
    assert dataset_files.version() != before


def test_missing_file_has_hint(tmp_path) -> None:
    ds = data_utils.Datasets(tmp_path / "nope.json", tmp_path / "nope2.json")
    with pytest.raises(FileNotFoundError, match="ACTIVITY_DATA_PATH"):
        ds.read_activity()
    with pytest.raises(FileNotFoundError):
        ds.version()
