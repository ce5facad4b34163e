"""Member journey views: why members call and how the call leaves them."""
from typing import Dict, List, Sequence

from .aggregations import (
    aggregate_intents,
    aggregate_topics,
    avg_member_sentiment,
    call_ids,
    group_calls,
    mean,
    rate_pct,
    round1,
    round_half_up,
)
from .models import CallRecord
from .tags import NEED_CATEGORY_ORDER, need_category

HEATMAP_SIZE = 5
TALKING_POINTS_LIMIT = 10


def get_need_categories(calls: Sequence[CallRecord]) -> List[Dict]:
    groups = group_calls(calls, lambda c: need_category(c.primary_intent))
    total = len(calls)
    return [
        {
            "category": cat,
            "count": len(groups[cat]),
            "percentage": rate_pct(len(groups[cat]), total),
            "avg_member_sentiment": avg_member_sentiment(groups[cat]),
            "call_ids": call_ids(groups[cat]),
        }
        for cat in NEED_CATEGORY_ORDER
        if cat in groups
    ]


def get_sentiment_arc(calls: Sequence[CallRecord]) -> List[Dict]:
    with_segments = [c for c in calls if c.segments]
    rows = []
    for intent, group in group_calls(with_segments, lambda c: c.primary_intent).items():
        opening = round1(mean([c.ordered_segments()[0].member_sentiment for c in group]))
        closing = round1(mean([c.ordered_segments()[-1].member_sentiment for c in group]))
        rows.append({
            "intent": intent,
            "count": len(group),
            "opening_sentiment": opening,
            "closing_sentiment": closing,
            "delta": round1(closing - opening),
            "call_ids": call_ids(group),
        })
    rows.sort(key=lambda r: r["delta"])  # worst deterioration first
    return rows


def _top_labels(calls: Sequence[CallRecord], key, n: int) -> List[str]:
    groups = group_calls(calls, key)
    return sorted(groups, key=lambda label: len(groups[label]), reverse=True)[:n]


def get_outcome_heatmap(calls: Sequence[CallRecord]) -> Dict:
    top_topics = _top_labels(calls, lambda c: c.primary_topic, HEATMAP_SIZE)
    top_intents = _top_labels(calls, lambda c: c.primary_intent, HEATMAP_SIZE)
    topic_rank = {t: i for i, t in enumerate(top_topics)}
    intent_rank = {t: i for i, t in enumerate(top_intents)}

    inside = [c for c in calls if c.primary_topic in topic_rank and c.primary_intent in intent_rank]
    groups = group_calls(inside, lambda c: (c.primary_topic, c.primary_intent))
    cells = [
        {
            "topic": topic,
            "intent": intent,
            "count": len(group),
            "avg_member_sentiment": avg_member_sentiment(group),
            "call_ids": call_ids(group),
        }
        for (topic, intent), group in groups.items()
    ]
    cells.sort(key=lambda x: (topic_rank[x["topic"]], intent_rank[x["intent"]]))
    return {"topics": top_topics, "intents": top_intents, "cells": cells}


def _emotion_side(calls: Sequence[CallRecord]) -> Dict[str, Dict]:
    # emotion -> {sum, count, call_ids}; averaged per segment reading, call_ids kept as an ordered set
    acc: Dict[str, Dict] = {}
    for c in calls:
        for seg in c.segments:
            for emotion, value in (seg.emotions or {}).items():
                cur = acc.setdefault(emotion, {"sum": 0.0, "count": 0, "call_ids": {}})
                cur["sum"] += value
                cur["count"] += 1
                cur["call_ids"][c.id] = None
    return acc


def get_emotion_profile(calls: Sequence[CallRecord]) -> List[Dict]:
    complaint = _emotion_side([c for c in calls if c.is_complaint])
    normal = _emotion_side([c for c in calls if not c.is_complaint])
    empty = {"sum": 0.0, "count": 0, "call_ids": {}}

    rows = []
    for emotion in list(complaint) + [e for e in normal if e not in complaint]:
        cv = complaint.get(emotion, empty)
        nv = normal.get(emotion, empty)
        rows.append({
            "emotion": emotion,
            "complaint_avg": round_half_up(cv["sum"] / cv["count"], 3) if cv["count"] else 0.0,
            "non_complaint_avg": round_half_up(nv["sum"] / nv["count"], 3) if nv["count"] else 0.0,
            "complaint_call_ids": list(cv["call_ids"]),
            "non_complaint_call_ids": list(nv["call_ids"]),
        })
    # biggest escalation signal first
    rows.sort(key=lambda r: r["complaint_avg"] - r["non_complaint_avg"], reverse=True)
    return rows


def get_handle_time_sentiment(calls: Sequence[CallRecord]) -> Dict:
    intents = []
    for intent, group in group_calls(calls, lambda c: c.primary_intent).items():
        intents.append({
            "intent": intent,
            "count": len(group),
            "avg_handle_time_sec": int(round_half_up(mean([c.duration_seconds for c in group]))),
            "avg_member_sentiment": avg_member_sentiment(group),
            "complaint_rate_pct": rate_pct(sum(1 for c in group if c.is_complaint), len(group)),
            "call_ids": call_ids(group),
        })
    intents.sort(key=lambda r: r["count"], reverse=True)
    return {
        "intents": intents,
        "avg_handle_time_sec": int(round_half_up(mean([c.duration_seconds for c in calls]))),
        "avg_member_sentiment": avg_member_sentiment(calls),
    }


def get_actions_by_topic(calls: Sequence[CallRecord]) -> List[Dict]:
    by_topic: Dict[str, Dict[str, List[str]]] = {}
    for c in calls:
        for action in c.actions:
            by_topic.setdefault(c.primary_topic, {}).setdefault(action.description, []).append(c.id)

    rows = []
    for topic, actions in by_topic.items():
        items = [{"action": desc, "count": len(ids), "call_ids": ids} for desc, ids in actions.items()]
        items.sort(key=lambda a: a["count"], reverse=True)
        rows.append({"topic": topic, "actions": items})
    rows.sort(key=lambda r: sum(a["count"] for a in r["actions"]), reverse=True)
    return rows


def get_talking_points(calls: Sequence[CallRecord]) -> Dict:
    return {
        "top_topics": aggregate_topics(calls)[:TALKING_POINTS_LIMIT],
        "top_intents": aggregate_intents(calls)[:TALKING_POINTS_LIMIT],
        "total_calls": len(calls),
    }
