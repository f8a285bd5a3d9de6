"""Predicate filter applied to the in-memory event list."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from discovery.engine.geo import event_distance
from discovery.engine.models import (
    MODE_IN_PERSON,
    MODE_ONLINE,
    PRICE_FREE,
    PRICE_PAID,
    Event,
    FilterState,
)
from discovery.engine.timewindow import TimeWindow, resolve_time_range

LOGGER = logging.getLogger(__name__)


def matches_time_window(event: Event, window: TimeWindow) -> bool:
    return window.contains(event.starts_at)


def matches_category(event: Event, categories: Sequence[str]) -> bool:
    """An empty category selection places no restriction."""
    if not categories:
        return True
    return event.category in categories


def matches_mode(event: Event, event_mode: str) -> bool:
    """Exclude only the opposite pure mode; hybrid events always pass."""
    if event_mode == MODE_IN_PERSON:
        return event.event_mode != MODE_ONLINE
    if event_mode == MODE_ONLINE:
        return event.event_mode != MODE_IN_PERSON
    return True


def matches_price(event: Event, price_type: str) -> bool:
    if price_type == PRICE_FREE:
        return event.is_free
    if price_type == PRICE_PAID:
        return not event.is_free
    return True


def matches_distance(
    event: Event,
    max_distance: Optional[float],
    ref_lat: Optional[float] = None,
    ref_lon: Optional[float] = None,
) -> bool:
    """Events without coordinates are never excluded by distance."""
    if max_distance is None or not event.has_location:
        return True
    return event_distance(event, ref_lat, ref_lon) <= max_distance


def searchable_text(event: Event) -> str:
    parts: Iterable[Optional[str]] = (
        event.title,
        event.venue_name,
        event.description,
        event.address_text,
        event.category,
    )
    return " ".join(part for part in parts if part).lower()


def matches_search(event: Event, query: Optional[str]) -> bool:
    """Every whitespace-separated token must appear somewhere in the event text."""
    if not query or not query.strip():
        return True
    corpus = searchable_text(event)
    return all(token in corpus for token in query.lower().split())


def filter_events(
    events: Sequence[Event],
    filters: FilterState,
    ref_lat: Optional[float] = None,
    ref_lon: Optional[float] = None,
    *,
    now: Optional[datetime] = None,
) -> List[Event]:
    """Return a new list holding the events that satisfy every active predicate."""
    window = resolve_time_range(
        filters.time_range,
        filters.custom_date_start,
        filters.custom_date_end,
        now=now,
    )
    kept = [
        event
        for event in events
        if matches_time_window(event, window)
        and matches_category(event, filters.categories)
        and matches_mode(event, filters.event_mode)
        and matches_price(event, filters.price_type)
        and matches_distance(event, filters.max_distance, ref_lat, ref_lon)
        and matches_search(event, filters.search_query)
    ]
    LOGGER.debug(
        "filter_applied",
        extra={
            "total": len(events),
            "kept": len(kept),
            "window_start": window.start.isoformat(),
            "window_end": window.end.isoformat(),
        },
    )
    return kept
