from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import NamedTuple, Optional


class TimeRange(str, Enum):
    LAST_HOUR = "1h"
    LAST_6_HOURS = "6h"
    LAST_24_HOURS = "24h"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"


RANGE_DURATIONS = {
    TimeRange.LAST_HOUR: timedelta(hours=1),
    TimeRange.LAST_6_HOURS: timedelta(hours=6),
    TimeRange.LAST_24_HOURS: timedelta(hours=24),
    TimeRange.LAST_7_DAYS: timedelta(days=7),
    TimeRange.LAST_30_DAYS: timedelta(days=30),
}

DEFAULT_RANGE = TimeRange.LAST_24_HOURS

HOUR = "hour"
DAY = "day"


class TimeWindow(NamedTuple):
    from_: datetime
    to: datetime

    @property
    def duration(self) -> timedelta:
        return self.to - self.from_


def parse_range(tag) -> TimeRange:
    """Coerce a range tag to a TimeRange; anything unrecognised is the 24h default."""
    if isinstance(tag, TimeRange):
        return tag
    try:
        return TimeRange(str(tag).strip().lower())
    except ValueError:
        return DEFAULT_RANGE


def resolve_range(tag=None, now: Optional[datetime] = None) -> TimeWindow:
    to = now or datetime.now(timezone.utc)
    return TimeWindow(to - RANGE_DURATIONS[parse_range(tag)], to)


def trailing_window(minutes: int, now: Optional[datetime] = None) -> TimeWindow:
    to = now or datetime.now(timezone.utc)
    return TimeWindow(to - timedelta(minutes=minutes), to)


def previous_window(window: TimeWindow) -> TimeWindow:
    return TimeWindow(window.from_ - window.duration, window.from_)


def bucket_granularity(tag=None) -> str:
    if RANGE_DURATIONS[parse_range(tag)] <= timedelta(hours=24):
        return HOUR
    return DAY


def bucket_key(instant: datetime, granularity: str) -> str:
    # ISO prefixes sort lexically in time order
    utc = instant.astimezone(timezone.utc)
    if granularity == HOUR:
        return utc.strftime("%Y-%m-%dT%H:00")
    return utc.strftime("%Y-%m-%d")


def bucket_label(key: str, granularity: str) -> str:
    return key[11:16] if granularity == HOUR else key
