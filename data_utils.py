"""Loading of the activity and weather JSON datasets."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import polars as pl
from pydantic import ValidationError

from src.engine.intervals import duration_hours
from src.engine.models import ActivityData, WeatherRecord
from src.web.config import settings

logger = logging.getLogger(__name__)

_WEATHER_COLUMNS = ["local_time", "flight_category", "temp_C", "dewpoint_C", "raw_data"]


def _require(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(
            f"Dataset {path} not found. Set ACTIVITY_DATA_PATH / WEATHER_DATA_PATH."
        )
    return path


def _read_json(path: Path) -> Any:
    with _require(path).open("r", encoding="utf-8") as file:
        return json.load(file)


def parse_activity(raw: dict[str, Any]) -> ActivityData:
    """Normalise the activity mapping to ``tail -> date -> [(start, end), ...]``.

    Accepts both ``{tail: {date: blocks}}`` and the wrapped
    ``{tail: {"blocksByDate": {date: blocks}}}`` form.
    """
    result: ActivityData = {}
    for tail, by_date in raw.items():
        if isinstance(by_date, dict) and "blocksByDate" in by_date:
            by_date = by_date["blocksByDate"]
        result[tail] = {
            date_key: [(str(block[0]), str(block[1])) for block in blocks]
            for date_key, blocks in by_date.items()
        }
    return result


def weather_frame(raw: list[dict[str, Any]]) -> pl.DataFrame:
    """Weather rows as a DataFrame in source order, restricted to the known columns."""
    if not raw:
        return pl.DataFrame(schema={c: pl.Utf8 for c in _WEATHER_COLUMNS})
    df = pl.DataFrame(raw, infer_schema_length=None)
    for col in _WEATHER_COLUMNS:
        if col not in df.columns:
            df = df.with_columns(pl.lit(None).alias(col))
    df = df.select(_WEATHER_COLUMNS)

    missing = df.filter(
        pl.col("local_time").is_null() | pl.col("flight_category").is_null()
    ).height
    if missing:
        logger.warning("Dropping %d weather rows without local_time or flight_category", missing)
        df = df.filter(
            pl.col("local_time").is_not_null() & pl.col("flight_category").is_not_null()
        )
    return df


def parse_weather(df: pl.DataFrame) -> list[WeatherRecord]:
    records: list[WeatherRecord] = []
    for i, row in enumerate(df.iter_rows(named=True)):
        try:
            records.append(WeatherRecord.model_validate(row))
        except ValidationError as exc:
            raise ValueError(f"Invalid weather record #{i} ({row.get('local_time')}): {exc}") from exc
    return records


def activity_frame(activity: ActivityData) -> pl.DataFrame:
    """Long table with one row per activity block."""
    rows = [
        {
            "tail": tail,
            "date": date_key,
            "start": start,
            "end": end,
            "hours": duration_hours(start, end),
        }
        for tail, by_date in activity.items()
        for date_key, blocks in by_date.items()
        for start, end in blocks
    ]
    schema = {
        "tail": pl.Utf8,
        "date": pl.Utf8,
        "start": pl.Utf8,
        "end": pl.Utf8,
        "hours": pl.Float64,
    }
    return pl.DataFrame(rows, schema=schema).with_columns(
        pl.col("date").str.to_date("%Y-%m-%d")
    )


def activity_summary(frame: pl.DataFrame) -> pl.DataFrame:
    """Per-tail block count, active days, first/last date and total hours."""
    return (
        frame.group_by("tail")
        .agg(
            pl.len().alias("blocks"),
            pl.col("date").n_unique().alias("days"),
            pl.col("date").min().alias("first_date"),
            pl.col("date").max().alias("last_date"),
            pl.col("hours").sum().round(2).alias("total_hours"),
        )
        .sort("tail")
    )


class Datasets:
    """Reads the two source files configured in settings (or given explicitly)."""

    def __init__(
        self,
        activity_path: Optional[Path] = None,
        weather_path: Optional[Path] = None,
    ):
        self.activity_path = Path(activity_path or settings.activity_data_path)
        self.weather_path = Path(weather_path or settings.weather_data_path)

    def version(self) -> tuple[int, ...]:
        """Modification time and size of both files; changes whenever either is rewritten."""
        act = _require(self.activity_path).stat()
        wx = _require(self.weather_path).stat()
        return (act.st_mtime_ns, act.st_size, wx.st_mtime_ns, wx.st_size)

    def read_activity(self) -> ActivityData:
        activity = parse_activity(_read_json(self.activity_path))
        logger.info(
            "Loaded activity for %d tails from %s", len(activity), self.activity_path
        )
        return activity

    def read_weather(self) -> list[WeatherRecord]:
        records = parse_weather(weather_frame(_read_json(self.weather_path)))
        logger.info("Loaded %d weather observations from %s", len(records), self.weather_path)
        return records


if __name__ == "__main__":
    ds = Datasets()
    print(activity_summary(activity_frame(ds.read_activity())))
    print(f"{len(ds.read_weather())} weather observations")
