"""Great-circle distance helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from discovery.engine.models import Event

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """Represents a resolved coordinate pair."""

    latitude: float
    longitude: float


# Toronto city centre. Used whenever the caller has no live location.
DEFAULT_REFERENCE_POINT = GeoPoint(latitude=43.6532, longitude=-79.3832)


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in kilometres between two coordinates."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def reference_point(ref_lat: Optional[float] = None, ref_lon: Optional[float] = None) -> GeoPoint:
    """Return the supplied reference point, or DEFAULT_REFERENCE_POINT when incomplete."""
    if ref_lat is None or ref_lon is None:
        return DEFAULT_REFERENCE_POINT
    return GeoPoint(latitude=ref_lat, longitude=ref_lon)


def event_distance(
    event: Event,
    ref_lat: Optional[float] = None,
    ref_lon: Optional[float] = None,
) -> Optional[float]:
    """Distance from the reference point to the event, or None for events without coordinates."""
    if not event.has_location:
        return None
    origin = reference_point(ref_lat, ref_lon)
    return distance_km(origin.latitude, origin.longitude, event.latitude, event.longitude)
