"""Resolve named time ranges into concrete local-time windows."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from dateutil import parser as dateparser
from dateutil import tz

from discovery.engine.models import (
    TIME_CUSTOM,
    TIME_THIS_WEEK,
    TIME_TODAY,
    TIME_TOMORROW,
    TIME_WEEKEND,
)

LOGGER = logging.getLogger(__name__)

DateLike = Union[datetime, date, str]

SATURDAY = 5
SUNDAY = 6
END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [start, end] pair of timezone-aware instants."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        """Return True when the instant falls inside the window, bounds included.

        Naive instants are read as wall time in the window's timezone.
        """
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=self.start.tzinfo)
        return self.start <= instant <= self.end


def local_now(now: Optional[datetime] = None) -> datetime:
    """Return `now` as an aware datetime, defaulting to the current local time.

    The local zone is attached as a zone rather than a fixed offset so that
    day boundaries on other dates pick up their own daylight-saving offset.
    A naive `now` is taken as local wall time.
    """
    if now is None:
        return datetime.now(tz.tzlocal())
    if now.tzinfo is None:
        return now.replace(tzinfo=tz.tzlocal())
    return now


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), END_OF_DAY, tzinfo=moment.tzinfo)


def _localise(value: DateLike, now: datetime) -> datetime:
    """Bring a date, datetime or ISO string onto now's timezone."""
    if isinstance(value, str):
        value = dateparser.isoparse(value)
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=now.tzinfo)
    if value.tzinfo is None:
        return value.replace(tzinfo=now.tzinfo)
    return value.astimezone(now.tzinfo)


def _today(now: datetime) -> TimeWindow:
    return TimeWindow(start=start_of_day(now), end=end_of_day(now))


def _tomorrow(now: datetime) -> TimeWindow:
    tomorrow = now + timedelta(days=1)
    return TimeWindow(start=start_of_day(tomorrow), end=end_of_day(tomorrow))


def _weekend(now: datetime) -> TimeWindow:
    # On Sunday the weekend is the one ending today.
    weekday = now.weekday()
    offset = -1 if weekday == SUNDAY else SATURDAY - weekday
    saturday = now + timedelta(days=offset)
    sunday = saturday + timedelta(days=1)
    return TimeWindow(start=start_of_day(saturday), end=end_of_day(sunday))


def _this_week(now: datetime) -> TimeWindow:
    # Weeks start on Monday; Sunday closes the week that began six days earlier.
    monday = now - timedelta(days=now.weekday())
    sunday = monday + timedelta(days=6)
    return TimeWindow(start=start_of_day(monday), end=end_of_day(sunday))


def _custom(now: datetime, custom_start: Optional[DateLike], custom_end: Optional[DateLike]) -> TimeWindow:
    start = start_of_day(_localise(custom_start, now)) if custom_start else start_of_day(now)
    end = end_of_day(_localise(custom_end, now)) if custom_end else end_of_day(now)
    return TimeWindow(start=start, end=end)


def resolve_time_range(
    range_key: Optional[str],
    custom_start: Optional[DateLike] = None,
    custom_end: Optional[DateLike] = None,
    *,
    now: Optional[datetime] = None,
) -> TimeWindow:
    """Map a range key onto concrete start/end instants.

    ``now`` defaults to the current local time. For ``custom`` ranges a
    missing bound falls back to today's boundary, not to the other supplied
    bound. Unknown keys resolve to ``this_week``.
    """
    now = local_now(now)
    if range_key == TIME_TODAY:
        return _today(now)
    if range_key == TIME_TOMORROW:
        return _tomorrow(now)
    if range_key == TIME_WEEKEND:
        return _weekend(now)
    if range_key == TIME_THIS_WEEK:
        return _this_week(now)
    if range_key == TIME_CUSTOM:
        return _custom(now, custom_start, custom_end)
    LOGGER.debug("time_range_fallback", extra={"range_key": range_key, "fallback": TIME_THIS_WEEK})
    return _this_week(now)
