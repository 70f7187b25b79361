"""Render the activity/weather timeline to JSON and (optionally) a standalone HTML figure."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import data_utils
from src.engine.models import FlightCategory
from src.web import timeline_service
from src.web.models import FilterPayload

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Export the aircraft activity timeline")
    p.add_argument("--activity", type=Path, help="Activity JSON (defaults to ACTIVITY_DATA_PATH)")
    p.add_argument("--weather", type=Path, help="METAR JSON (defaults to WEATHER_DATA_PATH)")
    p.add_argument("--out", type=Path, default=Path("timeline.json"))
    p.add_argument("--html", type=Path, default=None, help="Also write a plotly HTML figure")
    p.add_argument("--hide-tail", nargs="*", default=[], help="Tails to hide")
    p.add_argument(
        "--exclude-category",
        nargs="*",
        default=[],
        choices=[c.value for c in FlightCategory],
        help="Drop blocks that only co-occurred with these categories",
    )
    p.add_argument("--no-flight-category", action="store_true")
    p.add_argument("--no-temperature", action="store_true")
    p.add_argument("--hour-px", type=float, default=None)
    p.add_argument("--log-level", default="INFO")
    return p


def export(
    out: Path,
    payload: FilterPayload,
    html_path: Optional[Path] = None,
) -> dict:
    engine = timeline_service.get_engine()
    filters = payload.to_filter_state(engine.config.default_hour_px)
    weeks = engine.timeline(filters)
    counts = engine.category_counts(filters)
    document = {
        "hour_px": engine.scale(filters),
        "tails": engine.tails,
        "category_counts": {c.value: n for c, n in counts.items()},
        "weeks": [w.model_dump(mode="json") for w in weeks],
    }
    out.write_text(json.dumps(document), encoding="utf-8")
    logger.info("Wrote %d weeks to %s", len(weeks), out)

    if html_path is not None:
        fig = timeline_service.build_timeline_figure(weeks, engine.tails, engine.scale(filters))
        fig.write_html(html_path, include_plotlyjs="cdn")
        logger.info("Wrote figure to %s", html_path)
    return document


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    if args.activity or args.weather:
        timeline_service.set_datasets(data_utils.Datasets(args.activity, args.weather))

    try:
        payload = FilterPayload(
            visible_tails={t: False for t in args.hide_tail},
            categories={FlightCategory(c): False for c in args.exclude_category},
            show_flight_category=not args.no_flight_category,
            show_temperature=not args.no_temperature,
            hour_px=args.hour_px,
        )
        export(args.out, payload, html_path=args.html)
    except Exception:  # noqa: BLE001
        logger.exception("Export failed")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
