"""Board-level summaries composed from the aggregation and compliance views."""
from typing import Callable, Dict, List, Optional, Sequence

from .aggregations import call_ids, get_topic_sentiment, group_calls, mean, rate_pct, round1, round_half_up
from .compliance import (
    HIGH_RISK_SCORE,
    call_compliance_score,
    get_qm_compliance,
    is_high_risk,
    mean_score,
)
from .models import CallRecord
from .timewindow import DAY, bucket_key

AUTH_CHECKS = ("sin_verified", "identity_confirmed")
TREND_DAYS = 14
NEGATIVE_TOPIC_SENTIMENT = 6
LOW_CLARITY_PCT = 30
UNKNOWN_AGENT = "unknown"


def get_compliance_summary(calls: Sequence[CallRecord]) -> Dict:
    missing_auth: Dict[str, None] = {}  # ordered set
    for r in get_qm_compliance(calls):
        if r["check_id"] in AUTH_CHECKS:
            missing_auth.update(dict.fromkeys(r["call_ids_failed"]))

    advice_violations = [c.id for c in calls if c.advice_boundary_risk and c.advice_boundary_risk != "none"]
    high_risk = [c.id for c in calls if is_high_risk(c)]
    total = len(calls)

    by_day = group_calls(calls, lambda c: bucket_key(c.ended_at, DAY))
    trend_daily = [
        {"date": day, "score": mean_score([call_compliance_score(c) for c in by_day[day]])}
        for day in sorted(by_day)[-TREND_DAYS:]
    ]
    return {
        "overall_compliance_score": mean_score([call_compliance_score(c) for c in calls]),
        "pct_high_risk_calls": rate_pct(len(high_risk), total),
        "pct_missing_authentication": rate_pct(len(missing_auth), total),
        "pct_advice_boundary_violations": rate_pct(len(advice_violations), total),
        "trend_daily": trend_daily,
        "high_risk_call_ids": high_risk,
        "missing_auth_call_ids": list(missing_auth),
    }


def get_sentiment_summary(calls: Sequence[CallRecord]) -> Dict:
    deltas = []
    recovery_call_ids = []
    for c in calls:
        if len(c.segments) < 2:
            continue
        ordered = c.ordered_segments()
        delta = ordered[-1].member_sentiment - ordered[0].member_sentiment
        deltas.append(delta)
        if delta > 0:
            recovery_call_ids.append(c.id)

    empathy_passed = sum(1 for c in calls if (c.qm_checks or {}).get("empathy_shown") is True)
    negative_topics = [
        {"topic": t["topic"], "avg_sentiment": t["avg_member_sentiment"], "count": t["count"], "call_ids": t["call_ids"]}
        for t in get_topic_sentiment(calls)
        if t["avg_member_sentiment"] < NEGATIVE_TOPIC_SENTIMENT
    ][:5]
    return {
        "sentiment_recovery_rate_pct": rate_pct(len(recovery_call_ids), len(deltas)),
        "avg_sentiment_delta": round1(mean(deltas)),
        "pct_proactive_empathy": rate_pct(empathy_passed, len(calls)),
        "top_topics_negative_sentiment": negative_topics,
        "recovery_call_ids": recovery_call_ids,
    }


def _risk_table(calls: Sequence[CallRecord], key: Callable[[CallRecord], str], name: str) -> List[Dict]:
    rows = []
    for label, group in group_calls(calls, key).items():
        scores = [call_compliance_score(c) for c in group]
        rows.append({
            name: label,
            "compliance_score": mean_score(scores),
            "high_risk_count": sum(1 for s in scores if s < HIGH_RISK_SCORE),
            "call_ids": call_ids(group),
        })
    rows.sort(key=lambda r: r["compliance_score"])  # worst first
    return rows


def get_risk_summary(calls: Sequence[CallRecord]) -> Dict:
    total = len(calls)
    return {
        "pct_complaint_signal": rate_pct(sum(1 for c in calls if c.is_complaint), total),
        "pct_vulnerable_member_flag": rate_pct(sum(1 for c in calls if c.vulnerable_member_flag), total),
        "risk_by_agent": _risk_table(calls, lambda c: c.agent_id or UNKNOWN_AGENT, "agent_id"),
        "risk_by_topic": _risk_table(calls, lambda c: c.primary_topic, "topic"),
    }


def volume_change_pct(count: int, prior: int) -> int:
    if not prior:
        return 100 if count else 0
    return int(round_half_up((count - prior) / prior * 100))


def get_trend_summary(calls: Sequence[CallRecord], baseline: Optional[Sequence[CallRecord]] = None) -> Dict:
    """Emerging topics. `baseline` is the preceding period; without it no change is reported."""
    by_topic = group_calls(calls, lambda c: c.primary_topic)
    prior = {t: len(g) for t, g in group_calls(baseline or [], lambda c: c.primary_topic).items()}

    volume_change = [
        {
            "topic": topic,
            "count": len(group),
            "change_pct": volume_change_pct(len(group), prior.get(topic, 0)) if baseline is not None else 0,
            "call_ids": call_ids(group),
        }
        for topic, group in by_topic.items()
    ]
    volume_change.sort(key=lambda r: r["change_pct"], reverse=True)

    rising = []
    low_clarity = []
    for topic, group in by_topic.items():
        complaints = sum(1 for c in group if c.is_complaint)
        unclear = sum(1 for c in group if c.clarity_of_next_steps in ("partial", "unclear"))
        if complaints:
            rising.append({
                "topic": topic,
                "complaint_count": complaints,
                "complaint_rate_pct": rate_pct(complaints, len(group)),
                "call_ids": call_ids(group),
            })
        unclear_pct = rate_pct(unclear, len(group))
        if unclear_pct > LOW_CLARITY_PCT:
            low_clarity.append({"topic": topic, "unclear_pct": unclear_pct, "count": len(group), "call_ids": call_ids(group)})
    rising.sort(key=lambda r: r["complaint_rate_pct"], reverse=True)
    low_clarity.sort(key=lambda r: r["unclear_pct"], reverse=True)

    return {
        "topic_volume_change": volume_change[:8],
        "rising_complaint_topics": rising[:5],
        "low_clarity_topics": low_clarity[:5],
    }
