"""Filter, sort and summarise events in one pass for list and map screens."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from discovery.engine.filters import filter_events
from discovery.engine.models import Event, FilterState
from discovery.engine.ranking import sort_events
from discovery.engine.summary import active_filter_count, filter_summary, results_headline
from discovery.engine.timewindow import local_now


@dataclass
class EventView:
    """Ordered result set plus the derived header values."""

    events: List[Event] = field(default_factory=list)
    active_filter_count: int = 0
    summary: Optional[str] = None
    headline: str = ""

    @property
    def total(self) -> int:
        return len(self.events)


def build_event_view(
    events: Sequence[Event],
    filters: FilterState,
    ref_lat: Optional[float] = None,
    ref_lon: Optional[float] = None,
    *,
    now: Optional[datetime] = None,
) -> EventView:
    """Apply the filter state to the events and order them by its sort key."""
    now = local_now(now)
    kept = filter_events(events, filters, ref_lat, ref_lon, now=now)
    ordered = sort_events(kept, filters.sort_by, ref_lat, ref_lon, now=now)
    return EventView(
        events=ordered,
        active_filter_count=active_filter_count(filters),
        summary=filter_summary(filters),
        headline=results_headline(len(ordered), filters),
    )
