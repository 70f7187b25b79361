import datetime as dt
import json
from pathlib import Path

import pytest

import data_utils
from src.engine.models import TimelineConfig, WeatherRecord
from src.engine.overlay import TimelineEngine
from src.web import timeline_service


def wx(local_time: str, category: str, temp: float | None = None, **extra) -> dict:
    row = {"local_time": local_time, "flight_category": category, "temp_C": temp}
    row.update(extra)
    return row


ACTIVITY = {
    "N65620": {
        "2025-01-15": [["0800", "0930"], ["2330", "0130"]],
        "2025-01-16": [["1000", "1100"]],
    },
    "N854GW": {
        "2025-01-15": [["1200", "1300"]],
    },
}

WEATHER = [
    wx("2025-01-15T08:53:00", "VFR", -5.0, dewpoint_C=-9.0, raw_data="KALB 151353Z"),
    wx("2025-01-15T09:53:00", "MVFR", -4.0),
    wx("2025-01-15T12:53:00", "IFR", -2.0),
    wx("2025-01-15T23:53:00", "VFR", -8.0),
    wx("2025-01-16T00:53:00", "LIFR", -9.0),
    wx("2025-01-16T01:53:00", "LIFR", None),
    wx("2025-01-16T10:53:00", "VFR", 1.0),
]


@pytest.fixture
def config() -> TimelineConfig:
    return TimelineConfig(
        start_date=dt.date(2025, 1, 13),
        end_date=dt.date(2025, 1, 19),
        tails_order=["N65620", "N854GW"],
        tail_colors={"N65620": "#E63946", "N854GW": "#2A9D8F"},
    )


@pytest.fixture
def weather_records() -> list[WeatherRecord]:
    return [WeatherRecord.model_validate(row) for row in WEATHER]


@pytest.fixture
def activity():
    return data_utils.parse_activity(ACTIVITY)


@pytest.fixture
def engine(config, activity, weather_records) -> TimelineEngine:
    return TimelineEngine(config, activity, weather_records)


@pytest.fixture
def dataset_files(tmp_path: Path) -> data_utils.Datasets:
    activity_path = tmp_path / "activity.json"
    weather_path = tmp_path / "metar.json"
    activity_path.write_text(json.dumps(ACTIVITY), encoding="utf-8")
    weather_path.write_text(json.dumps(WEATHER), encoding="utf-8")
    return data_utils.Datasets(activity_path, weather_path)


@pytest.fixture
def service(dataset_files):
    timeline_service.set_datasets(dataset_files)
    yield timeline_service
    timeline_service.set_datasets(data_utils.Datasets())

