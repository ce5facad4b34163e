"""Trend and insight views over a set of call records.

Every function takes an already time-filtered sequence of CallRecord and
returns plain dicts/lists. Buckets that can be drawn keep the ids of the
calls behind them under `call_ids`.
"""
import math
from datetime import timezone
from typing import Callable, Dict, Hashable, Iterable, List, Sequence

from .models import CallRecord
from .sentiment import SENTIMENT_BUCKETS, grid_point, sentiment_bucket
from .timewindow import bucket_granularity, bucket_key, bucket_label

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def round_half_up(value: float, ndigits: int = 0) -> float:
    m = 10 ** ndigits
    return math.floor(value * m + 0.5) / m


def round1(value: float) -> float:
    return round_half_up(value, 1)


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def rate_pct(part: int, total: int) -> float:
    # percentage with one decimal, 0 for an empty denominator
    return math.floor(part / total * 1000 + 0.5) / 10 if total else 0.0


def group_calls(calls: Iterable[CallRecord], key: Callable[[CallRecord], Hashable]) -> Dict[Hashable, List[CallRecord]]:
    """Single pass grouping; dict order is first-seen and only used to break ties."""
    groups: Dict[Hashable, List[CallRecord]] = {}
    for c in calls:
        groups.setdefault(key(c), []).append(c)
    return groups


def call_ids(calls: Iterable[CallRecord]) -> List[str]:
    return [c.id for c in calls]


def avg_member_sentiment(calls: Sequence[CallRecord]) -> float:
    return round1(mean([c.member_sentiment for c in calls]))


def _categorical(calls: Sequence[CallRecord], key: Callable[[CallRecord], str], prefix: str) -> List[Dict]:
    groups = group_calls(calls, key)
    items = [
        {"id": f"{prefix}-{i}", "name": name, "count": len(group), "call_ids": call_ids(group)}
        for i, (name, group) in enumerate(groups.items())
    ]
    items.sort(key=lambda x: x["count"], reverse=True)
    return items


def aggregate_intents(calls: Sequence[CallRecord]) -> List[Dict]:
    return _categorical(calls, lambda c: c.primary_intent, "intent")


def aggregate_topics(calls: Sequence[CallRecord]) -> List[Dict]:
    return _categorical(calls, lambda c: c.primary_topic, "topic")


def aggregate_sentiment(calls: Sequence[CallRecord]) -> List[Dict]:
    buckets = [{"label": label, "count": 0, "call_ids": []} for label, _ in SENTIMENT_BUCKETS]
    for c in calls:
        b = buckets[sentiment_bucket(c.member_sentiment)]
        b["count"] += 1
        b["call_ids"].append(c.id)
    total = len(calls)
    return [
        {
            "label": b["label"],
            "count": b["count"],
            "percentage": int(round_half_up(b["count"] / total * 100)) if total else 0,
            "call_ids": b["call_ids"],
        }
        for b in buckets
    ]


def time_buckets(calls: Sequence[CallRecord], range_=None) -> List[tuple]:
    """(key, label, calls) triples ordered by bucket key; granularity follows the range tag.

    Hourly labels repeat across days, the key does not.
    """
    granularity = bucket_granularity(range_)
    groups = group_calls(calls, lambda c: bucket_key(c.ended_at, granularity))
    return [(key, bucket_label(key, granularity), groups[key]) for key in sorted(groups)]


def get_volume_over_time(calls: Sequence[CallRecord], range_=None) -> List[Dict]:
    return [
        {
            "key": key,
            "label": label,
            "count": len(group),
            "complaints": sum(1 for c in group if c.is_complaint),
            "avg_member_sentiment": avg_member_sentiment(group),
            "call_ids": call_ids(group),
        }
        for key, label, group in time_buckets(calls, range_)
    ]


def get_topic_sentiment(calls: Sequence[CallRecord]) -> List[Dict]:
    rows = [
        {
            "topic": topic,
            "count": len(group),
            "avg_member_sentiment": avg_member_sentiment(group),
            "call_ids": call_ids(group),
        }
        for topic, group in group_calls(calls, lambda c: c.primary_topic).items()
    ]
    rows.sort(key=lambda r: r["avg_member_sentiment"])  # riskiest topics first
    return rows


def get_intent_complaints(calls: Sequence[CallRecord]) -> List[Dict]:
    rows = []
    for intent, group in group_calls(calls, lambda c: c.primary_intent).items():
        complaints = sum(1 for c in group if c.is_complaint)
        rows.append({
            "intent": intent,
            "count": len(group),
            "complaints": complaints,
            "complaint_rate_pct": rate_pct(complaints, len(group)),
            "call_ids": call_ids(group),
        })
    rows.sort(key=lambda r: r["complaint_rate_pct"], reverse=True)
    return rows


def _utc(c: CallRecord):
    return c.ended_at.astimezone(timezone.utc)


def get_volume_by_hour(calls: Sequence[CallRecord]) -> List[Dict]:
    counts = [0] * 24
    for c in calls:
        counts[_utc(c).hour] += 1
    return [{"hour": h, "label": f"{h}:00", "count": n} for h, n in enumerate(counts)]


def get_volume_by_day_of_week(calls: Sequence[CallRecord]) -> List[Dict]:
    counts = [0] * 7
    for c in calls:
        # weekday() is Monday=0; slots are Sunday=0
        counts[(_utc(c).weekday() + 1) % 7] += 1
    return [{"day": d, "label": DAY_NAMES[d], "count": n} for d, n in enumerate(counts)]


def get_kpis(calls: Sequence[CallRecord]) -> Dict:
    if not calls:
        return {
            "total_calls": 0,
            "avg_duration_sec": 0,
            "complaint_count": 0,
            "complaint_rate_pct": 0.0,
            "avg_member_sentiment": 0.0,
            "avg_agent_sentiment": 0.0,
        }
    total = len(calls)
    complaint_count = sum(1 for c in calls if c.is_complaint)
    return {
        "total_calls": total,
        "avg_duration_sec": int(round_half_up(mean([c.duration_seconds for c in calls]))),
        "complaint_count": complaint_count,
        "complaint_rate_pct": rate_pct(complaint_count, total),
        "avg_member_sentiment": avg_member_sentiment(calls),
        "avg_agent_sentiment": round1(mean([c.agent_sentiment for c in calls])),
    }


def get_member_agent_sentiment(calls: Sequence[CallRecord]) -> List[Dict]:
    groups = group_calls(calls, lambda c: (grid_point(c.member_sentiment), grid_point(c.agent_sentiment)))
    return [
        {"member_sentiment": m, "agent_sentiment": a, "count": len(groups[(m, a)]), "call_ids": call_ids(groups[(m, a)])}
        for m, a in sorted(groups)
    ]
