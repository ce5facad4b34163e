import itertools
from datetime import datetime, timedelta, timezone

import pytest

from calltrends.core.models import CallRecord, CallSegment

# Wednesday, 15:30 UTC
NOW = datetime(2026, 3, 4, 15, 30, tzinfo=timezone.utc)

_seq = itertools.count(1)


def _make_call(**kw) -> CallRecord:
    n = next(_seq)
    ended_at = kw.pop("ended_at", NOW - timedelta(minutes=5))
    duration = kw.pop("duration_seconds", 300)
    member = kw.pop("member_sentiment", 7)
    intent = kw.pop("primary_intent", "Address update")
    topic = kw.pop("primary_topic", "Personal information")
    fields = dict(
        id=f"call-{n}",
        external_id=f"F9-{1000000 + n}",
        started_at=ended_at - timedelta(seconds=duration),
        ended_at=ended_at,
        duration_seconds=duration,
        member_sentiment=member,
        agent_sentiment=7,
        primary_intent=intent,
        primary_topic=topic,
        segments=[CallSegment(0, duration, topic, intent, member, 7)],
    )
    fields.update(kw)
    return CallRecord(**fields)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_call():
    return _make_call


@pytest.fixture
def segment():
    def _segment(start, end, member, emotions=None):
        return CallSegment(start, end, "Complaints", "Complaint - delay", member, 6, emotions)
    return _segment
