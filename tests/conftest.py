import itertools
from datetime import datetime, timedelta, timezone

import pytest

from discovery.engine.models import Event

# Wednesday afternoon.
FIXED_NOW = datetime(2024, 7, 3, 15, 0, tzinfo=timezone.utc)


@pytest.fixture()
def now():
    return FIXED_NOW


@pytest.fixture()
def make_event():
    counter = itertools.count(1)

    def _make(**overrides):
        payload = {
            "id": f"evt-{next(counter)}",
            "title": "Sample Event",
            "starts_at": FIXED_NOW + timedelta(hours=2),
            "category": "music",
            "event_mode": "in_person",
            "latitude": 43.6532,
            "longitude": -79.3832,
        }
        payload.update(overrides)
        return Event(**payload)

    return _make
