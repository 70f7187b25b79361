"""Centralised configuration loaded from environment variables via pydantic-settings."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.engine.models import TimelineConfig


class Settings(BaseSettings):
    """Application settings — validated once at import time."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Source datasets
    activity_data_path: Path = Path("data/aircraft_activity.json")
    """Activity JSON: tail -> date -> [[start, end], ...] clock codes."""
    weather_data_path: Path = Path("data/alb_metar.json")
    """METAR JSON: list of hourly observations with local_time and flight_category."""

    # Observed period
    timeline_start_date: dt.date = dt.date(2024, 7, 1)
    timeline_end_date: dt.date = dt.date(2025, 8, 1)

    # Aircraft (order of the rows and their colours)
    tails_order: list[str] = ["N65620", "N854GW", "N756VH"]
    tail_colors: dict[str, str] = {
        "N65620": "#E63946",
        "N854GW": "#2A9D8F",
        "N756VH": "#264653",
    }

    # Layout
    default_hour_px: float = 4.0
    """Initial zoom in pixels per hour; the UI slider moves in steps of 2 from 2 to 8."""

    def timeline_config(self) -> TimelineConfig:
        """Engine configuration derived from these settings."""
        return TimelineConfig(
            start_date=self.timeline_start_date,
            end_date=self.timeline_end_date,
            tails_order=self.tails_order,
            tail_colors=self.tail_colors,
            default_hour_px=self.default_hour_px,
        )


settings = Settings()  # type: ignore[call-arg]
