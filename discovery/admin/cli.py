"""Developer CLI for running the filter engine over JSON event dumps."""
from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import orjson
from dateutil import parser as dateparser
from pydantic import ValidationError

from discovery.engine.models import (
    CATEGORIES,
    MODE_ALL,
    MODE_IN_PERSON,
    MODE_ONLINE,
    PRICE_ALL,
    PRICE_FREE,
    PRICE_PAID,
    SORT_OPTIONS,
    TIME_RANGE_OPTIONS,
    TIME_CUSTOM,
    Event,
    FilterState,
)
from discovery.engine.ranking import smart_score
from discovery.engine.timewindow import local_now, resolve_time_range
from discovery.engine.view import build_event_view
from discovery.observability.log import configure_logging
from discovery.settings import EngineSettings, load_settings


def load_events(path: Path) -> List[Event]:
    """Read a JSON array of event objects, validating each row."""
    if not path.exists():
        raise FileNotFoundError(f"Events file not found: {path}")
    payload = orjson.loads(path.read_bytes())
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of events in {path}")
    events: List[Event] = []
    for index, row in enumerate(payload):
        try:
            events.append(Event.model_validate(row))
        except ValidationError as exc:
            raise ValueError(f"Invalid event row {index}: {exc}") from exc
    return events


def _parse_now(value: Optional[str]) -> Optional[datetime]:
    return dateparser.isoparse(value) if value else None


def _reference(args: argparse.Namespace, settings: EngineSettings) -> Tuple[float, float]:
    if args.lat is not None and args.lon is not None:
        return args.lat, args.lon
    point = settings.reference_point
    return point.latitude, point.longitude


def _emit(payload: object) -> None:
    print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


def filters_from_args(args: argparse.Namespace, settings: EngineSettings) -> FilterState:
    return FilterState(
        time_range=args.time_range,
        custom_date_start=args.date_from,
        custom_date_end=args.date_to,
        categories=args.category or [],
        event_mode=args.mode,
        price_type=args.price,
        max_distance=args.max_distance,
        sort_by=args.sort or settings.default_sort,
        search_query=args.search,
    )


def cmd_view(args: argparse.Namespace, settings: EngineSettings) -> None:
    events = load_events(Path(args.events))
    filters = filters_from_args(args, settings)
    ref_lat, ref_lon = _reference(args, settings)
    view = build_event_view(events, filters, ref_lat, ref_lon, now=_parse_now(args.now))
    _emit(
        {
            "headline": view.headline,
            "active_filters": view.active_filter_count,
            "summary": view.summary,
            "events": [
                {"id": event.id, "title": event.title, "starts_at": event.starts_at.isoformat()}
                for event in view.events
            ],
        }
    )


def cmd_explain(args: argparse.Namespace, settings: EngineSettings) -> None:
    events = load_events(Path(args.events))
    ref_lat, ref_lon = _reference(args, settings)
    now = local_now(_parse_now(args.now))
    rows: List[Dict[str, object]] = []
    for event in events:
        score = smart_score(event, ref_lat, ref_lon, now=now)
        rows.append(
            {
                "id": event.id,
                "title": event.title,
                "soonness": round(score.soonness, 2),
                "proximity": round(score.proximity, 2),
                "rating": round(score.rating, 2),
                "popularity": round(score.popularity, 2),
                "total": round(score.total, 2),
            }
        )
    rows.sort(key=lambda row: -row["total"])
    _emit(rows)


def cmd_window(args: argparse.Namespace, settings: EngineSettings) -> None:
    window = resolve_time_range(args.key, args.date_from, args.date_to, now=_parse_now(args.now))
    _emit({"key": args.key, "start": window.start.isoformat(), "end": window.end.isoformat()})


def _add_reference_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, help="Reference latitude (defaults to settings)")
    parser.add_argument("--lon", type=float, help="Reference longitude (defaults to settings)")
    parser.add_argument("--now", help="ISO timestamp to evaluate against instead of the clock")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="discovery", description="Event filter and ranking engine")
    parser.add_argument("--settings", default="config/settings.toml", help="Path to settings TOML")
    sub = parser.add_subparsers(dest="command", required=True)

    time_keys = [option["key"] for option in TIME_RANGE_OPTIONS] + [TIME_CUSTOM]

    view = sub.add_parser("view", help="Filter and sort events from a JSON file")
    view.add_argument("--events", required=True, help="JSON array of events")
    view.add_argument("--time-range", default="this_week", choices=time_keys)
    view.add_argument("--from", dest="date_from", help="Custom range start date")
    view.add_argument("--to", dest="date_to", help="Custom range end date")
    view.add_argument("--category", action="append", choices=sorted(CATEGORIES))
    view.add_argument("--mode", default=MODE_ALL, choices=[MODE_ALL, MODE_IN_PERSON, MODE_ONLINE])
    view.add_argument("--price", default=PRICE_ALL, choices=[PRICE_ALL, PRICE_FREE, PRICE_PAID])
    view.add_argument("--max-distance", type=float, help="Maximum distance in km")
    view.add_argument("--sort", choices=[option["key"] for option in SORT_OPTIONS])
    view.add_argument("--search", default="", help="Keywords that must all match")
    _add_reference_args(view)

    explain = sub.add_parser("explain", help="Show the smart-sort score breakdown per event")
    explain.add_argument("--events", required=True, help="JSON array of events")
    _add_reference_args(explain)

    window = sub.add_parser("window", help="Print the concrete window for a time range key")
    window.add_argument("key", help="Time range key")
    window.add_argument("--from", dest="date_from", help="Custom range start date")
    window.add_argument("--to", dest="date_to", help="Custom range end date")
    window.add_argument("--now", help="ISO timestamp to evaluate against instead of the clock")

    return parser


COMMANDS = {
    "view": cmd_view,
    "explain": cmd_explain,
    "window": cmd_window,
}


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = load_settings(Path(args.settings))
        configure_logging(settings.logging_config_path)
        COMMANDS[args.command](args, settings)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
