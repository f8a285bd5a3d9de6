"""Sort strategies for filtered events, including the composite smart score."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Sequence

from discovery.engine.geo import event_distance
from discovery.engine.models import (
    SORT_DATE,
    SORT_DISTANCE,
    SORT_POPULARITY,
    SORT_RATING,
    SORT_SMART,
    Event,
)
from discovery.engine.timewindow import local_now

LOGGER = logging.getLogger(__name__)

SOONNESS_MAX = 30.0
SOONNESS_DECAY_PER_HOUR = 0.2
PROXIMITY_MAX = 25.0
PROXIMITY_DECAY_PER_KM = 3.0
PROXIMITY_UNKNOWN = 10.0
RATING_WEIGHT = 4.0
RATING_MAX = 20.0
POPULARITY_WEIGHT = 0.1
POPULARITY_MAX = 25.0


@dataclass(frozen=True)
class SmartScore:
    """Per-component breakdown of an event's smart-sort score."""

    soonness: float
    proximity: float
    rating: float
    popularity: float

    @property
    def total(self) -> float:
        return self.soonness + self.proximity + self.rating + self.popularity


def _as_utc(moment: datetime, now: datetime) -> datetime:
    """Naive timestamps are wall time in now's zone."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=now.tzinfo)
    return moment.astimezone(timezone.utc)


def smart_score(
    event: Event,
    ref_lat: Optional[float] = None,
    ref_lon: Optional[float] = None,
    *,
    now: Optional[datetime] = None,
) -> SmartScore:
    """Score an event on soonness, proximity, rating and popularity (max 100)."""
    now = local_now(now)
    hours_until = (_as_utc(event.starts_at, now) - now.astimezone(timezone.utc)) / timedelta(hours=1)
    soonness = min(SOONNESS_MAX, max(0.0, SOONNESS_MAX - hours_until * SOONNESS_DECAY_PER_HOUR))

    distance = event_distance(event, ref_lat, ref_lon)
    if distance is None:
        proximity = PROXIMITY_UNKNOWN
    else:
        proximity = max(0.0, PROXIMITY_MAX - distance * PROXIMITY_DECAY_PER_KM)

    rating = min(RATING_MAX, max(0.0, (event.avg_rating or 0) * RATING_WEIGHT))
    popularity = min(POPULARITY_MAX, max(0.0, event.popularity * POPULARITY_WEIGHT))
    return SmartScore(soonness=soonness, proximity=proximity, rating=rating, popularity=popularity)


def _by_date(events: Sequence[Event], ref_lat, ref_lon, now) -> List[Event]:
    return sorted(events, key=lambda event: _as_utc(event.starts_at, now))


def _by_distance(events: Sequence[Event], ref_lat, ref_lon, now) -> List[Event]:
    def key(event: Event):
        distance = event_distance(event, ref_lat, ref_lon)
        return (distance is None, distance or 0.0)

    return sorted(events, key=key)


def _by_rating(events: Sequence[Event], ref_lat, ref_lon, now) -> List[Event]:
    return sorted(events, key=lambda event: (-(event.avg_rating or 0), -(event.rating_count or 0)))


def _by_popularity(events: Sequence[Event], ref_lat, ref_lon, now) -> List[Event]:
    return sorted(events, key=lambda event: -event.popularity)


def _by_smart_score(events: Sequence[Event], ref_lat, ref_lon, now) -> List[Event]:
    return sorted(events, key=lambda event: -smart_score(event, ref_lat, ref_lon, now=now).total)


STRATEGIES: Dict[str, Callable[..., List[Event]]] = {
    SORT_SMART: _by_smart_score,
    SORT_DATE: _by_date,
    SORT_DISTANCE: _by_distance,
    SORT_RATING: _by_rating,
    SORT_POPULARITY: _by_popularity,
}


def sort_events(
    events: Sequence[Event],
    sort_by: Optional[str],
    ref_lat: Optional[float] = None,
    ref_lon: Optional[float] = None,
    *,
    now: Optional[datetime] = None,
) -> List[Event]:
    """Return a newly ordered list; unknown keys use the smart score.

    Sorting is stable, so exact ties keep their input order.
    """
    now = local_now(now)
    strategy = STRATEGIES.get(sort_by or SORT_SMART, _by_smart_score)
    ordered = strategy(events, ref_lat, ref_lon, now)
    LOGGER.debug("events_sorted", extra={"sort_by": sort_by, "count": len(ordered)})
    return ordered
