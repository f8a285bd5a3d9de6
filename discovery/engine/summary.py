"""Derived, UI-facing views of a filter state."""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from discovery.engine.models import (
    MODE_ALL,
    MODE_IN_PERSON,
    PRICE_ALL,
    PRICE_FREE,
    SORT_SMART,
    TIME_CUSTOM,
    TIME_THIS_WEEK,
    TIME_TODAY,
    TIME_TOMORROW,
    TIME_WEEKEND,
    FilterState,
)

SUMMARY_SEPARATOR = " · "

TIME_RANGE_LABELS = {
    TIME_THIS_WEEK: "this week",
    TIME_TODAY: "today",
    TIME_TOMORROW: "tomorrow",
    TIME_WEEKEND: "this weekend",
    TIME_CUSTOM: "custom dates",
}


def format_km(value: float) -> str:
    """Plain decimal rendering: 5.0 -> "5", 2.5 -> "2.5", 1e6 -> "1000000"."""
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def active_filter_count(filters: FilterState) -> int:
    """Count non-default filter dimensions.

    Time range and search query have their own controls and are not counted.
    """
    count = 0
    if filters.categories:
        count += 1
    if filters.event_mode != MODE_ALL:
        count += 1
    if filters.price_type != PRICE_ALL:
        count += 1
    if filters.max_distance is not None:
        count += 1
    if filters.sort_by != SORT_SMART:
        count += 1
    return count


def filter_summary(filters: FilterState) -> Optional[str]:
    parts: List[str] = []
    if filters.categories:
        total = len(filters.categories)
        parts.append(f"{total} categor{'y' if total == 1 else 'ies'}")
    if filters.event_mode != MODE_ALL:
        parts.append("In-person" if filters.event_mode == MODE_IN_PERSON else "Online")
    if filters.price_type != PRICE_ALL:
        parts.append("Free" if filters.price_type == PRICE_FREE else "Paid")
    if filters.max_distance is not None:
        parts.append(f"Within {format_km(filters.max_distance)} km")
    return SUMMARY_SEPARATOR.join(parts) if parts else None


def time_range_label(range_key: Optional[str]) -> str:
    return TIME_RANGE_LABELS.get(range_key or TIME_THIS_WEEK, TIME_RANGE_LABELS[TIME_THIS_WEEK])


def results_headline(count: int, filters: FilterState) -> str:
    """Header line for the result list, e.g. "3 events this weekend · Free"."""
    noun = "event" if count == 1 else "events"
    headline = f"{count} {noun} {time_range_label(filters.time_range)}"
    summary = filter_summary(filters)
    if summary:
        headline = f"{headline}{SUMMARY_SEPARATOR}{summary}"
    return headline
