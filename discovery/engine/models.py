"""Pydantic models for events and the user's filter state."""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

TIME_TODAY = "today"
TIME_TOMORROW = "tomorrow"
TIME_WEEKEND = "weekend"
TIME_THIS_WEEK = "this_week"
TIME_CUSTOM = "custom"

MODE_ALL = "all"
MODE_IN_PERSON = "in_person"
MODE_ONLINE = "online"
MODE_HYBRID = "hybrid"

PRICE_ALL = "all"
PRICE_FREE = "free"
PRICE_PAID = "paid"

SORT_SMART = "smart"
SORT_DATE = "date"
SORT_DISTANCE = "distance"
SORT_RATING = "rating"
SORT_POPULARITY = "popularity"

CATEGORIES: Dict[str, str] = {
    "music": "Music",
    "food": "Food",
    "sports": "Sports",
    "art": "Art",
    "community": "Community",
    "nightlife": "Nightlife",
    "tech": "Tech",
    "wellness": "Wellness",
    "other": "Other",
}

TIME_RANGE_OPTIONS = [
    {"key": TIME_THIS_WEEK, "label": "This week"},
    {"key": TIME_TODAY, "label": "Today"},
    {"key": TIME_TOMORROW, "label": "Tomorrow"},
    {"key": TIME_WEEKEND, "label": "This weekend"},
]

SORT_OPTIONS = [
    {"key": SORT_SMART, "label": "Smart sort"},
    {"key": SORT_DATE, "label": "Soonest first"},
    {"key": SORT_DISTANCE, "label": "Nearest first"},
    {"key": SORT_RATING, "label": "Top rated"},
    {"key": SORT_POPULARITY, "label": "Most popular"},
]

DISTANCE_OPTIONS = [
    {"key": None, "label": "Any distance"},
    {"key": 1, "label": "1 km"},
    {"key": 2, "label": "2 km"},
    {"key": 5, "label": "5 km"},
    {"key": 10, "label": "10 km"},
]


class Event(BaseModel):
    """A single real-world happening as supplied by the event source.

    Counters and rating are taken as supplied; out-of-range values are
    clamped where they are scored rather than rejected here.
    """

    model_config = ConfigDict(frozen=True)

    id: Union[str, int]
    title: str
    starts_at: datetime
    ends_at: Optional[datetime] = None
    category: str = "other"
    event_mode: str = MODE_IN_PERSON
    description: Optional[str] = None
    venue_name: Optional[str] = None
    address_text: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    price_text: Optional[str] = None
    save_count: Optional[int] = 0
    share_count: Optional[int] = 0
    avg_rating: Optional[float] = None
    rating_count: Optional[int] = 0

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def popularity(self) -> int:
        return (self.save_count or 0) + (self.share_count or 0)

    @property
    def is_free(self) -> bool:
        """Free when the price text is absent, mentions "free", or is exactly "$0"."""
        if not self.price_text:
            return True
        lowered = self.price_text.lower()
        return "free" in lowered or lowered == "$0"


class FilterState(BaseModel):
    """Complete description of the user's current view configuration.

    Keyed fields are plain strings rather than enums: unrecognised values are
    accepted here and resolved by the engine's fallbacks. An empty
    ``categories`` list means every category is shown.
    """

    model_config = ConfigDict(frozen=True)

    time_range: str = TIME_THIS_WEEK
    custom_date_start: Optional[Union[datetime, date]] = None
    custom_date_end: Optional[Union[datetime, date]] = None
    categories: List[str] = Field(default_factory=list)
    event_mode: str = MODE_ALL
    price_type: str = PRICE_ALL
    max_distance: Optional[float] = None
    sort_by: str = SORT_SMART
    search_query: str = ""

    def with_changes(self, **updates: object) -> "FilterState":
        """Return a new state with the supplied fields replaced and re-validated."""
        payload = self.model_dump()
        payload.update(updates)
        return FilterState.model_validate(payload)


DEFAULT_FILTERS = FilterState()
