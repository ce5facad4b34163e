from datetime import datetime
from typing import Any, Callable, Dict, NamedTuple, Optional, Sequence

from . import aggregations, compliance, executive, journey
from .models import CallRecord
from .storage import CallStore
from .timewindow import TimeRange, parse_range, previous_window, resolve_range

TRENDS = "trends"
INSIGHTS = "insights"
DASHBOARD = "dashboard"


class UnknownViewError(KeyError):
    pass


class View(NamedTuple):
    name: str
    section: str
    compute: Callable[[Sequence[CallRecord], TimeRange, Optional[Sequence[CallRecord]]], Any]
    default_range: TimeRange = TimeRange.LAST_24_HOURS
    uses_baseline: bool = False


def _plain(fn):
    return lambda calls, range_, baseline: fn(calls)


def _ranged(fn):
    return lambda calls, range_, baseline: fn(calls, range_)


_VIEW_LIST = [
    View("intents", TRENDS, _plain(aggregations.aggregate_intents)),
    View("topics", TRENDS, _plain(aggregations.aggregate_topics)),
    View("sentiment", TRENDS, _plain(aggregations.aggregate_sentiment)),
    View("volume-over-time", INSIGHTS, _ranged(aggregations.get_volume_over_time)),
    View("topic-sentiment", INSIGHTS, _plain(aggregations.get_topic_sentiment)),
    View("intent-complaints", INSIGHTS, _plain(aggregations.get_intent_complaints)),
    View("volume-by-hour", INSIGHTS, _plain(aggregations.get_volume_by_hour), TimeRange.LAST_7_DAYS),
    View("volume-by-day", INSIGHTS, _plain(aggregations.get_volume_by_day_of_week), TimeRange.LAST_30_DAYS),
    View("kpis", INSIGHTS, _plain(aggregations.get_kpis)),
    View("member-agent-sentiment", INSIGHTS, _plain(aggregations.get_member_agent_sentiment)),
    View("need-categories", INSIGHTS, _plain(journey.get_need_categories)),
    View("sentiment-arc", INSIGHTS, _plain(journey.get_sentiment_arc)),
    View("outcome-heatmap", INSIGHTS, _plain(journey.get_outcome_heatmap)),
    View("emotion-profile", INSIGHTS, _plain(journey.get_emotion_profile)),
    View("handle-time-sentiment", INSIGHTS, _plain(journey.get_handle_time_sentiment)),
    View("actions-by-topic", INSIGHTS, _plain(journey.get_actions_by_topic)),
    View("talking-points", INSIGHTS, _plain(journey.get_talking_points)),
    View("qm-compliance", INSIGHTS, _plain(compliance.get_qm_compliance)),
    View("qm-compliance-over-time", INSIGHTS, _ranged(compliance.get_qm_compliance_over_time)),
    View("compliance-summary", DASHBOARD, _plain(executive.get_compliance_summary), TimeRange.LAST_30_DAYS),
    View("sentiment-summary", DASHBOARD, _plain(executive.get_sentiment_summary), TimeRange.LAST_30_DAYS),
    View("risk-summary", DASHBOARD, _plain(executive.get_risk_summary), TimeRange.LAST_30_DAYS),
    View("trend-summary", DASHBOARD,
         lambda calls, range_, baseline: executive.get_trend_summary(calls, baseline),
         TimeRange.LAST_30_DAYS, uses_baseline=True),
]

VIEWS: Dict[str, View] = {v.name: v for v in _VIEW_LIST}


def get_view(name: str, section: Optional[str] = None) -> View:
    view = VIEWS.get(name)
    if view is None or (section is not None and view.section != section):
        raise UnknownViewError(name)
    return view


def compute_view(name: str, calls: Sequence[CallRecord], range_=None,
                 baseline: Optional[Sequence[CallRecord]] = None):
    view = get_view(name)
    range_ = parse_range(range_) if range_ else view.default_range
    return view.compute(calls, range_, baseline)


def run_view(store: CallStore, name: str, range_=None, now: Optional[datetime] = None,
             section: Optional[str] = None) -> Dict:
    """Resolve the window, pull records from the store and compute one view."""
    view = get_view(name, section)
    range_ = parse_range(range_) if range_ else view.default_range
    window = resolve_range(range_, now)
    calls = store.in_window(window)
    baseline = None
    if view.uses_baseline:
        # end-exclusive so a call at window.from_ only counts in the current window
        baseline = [c for c in store.in_window(previous_window(window)) if c.ended_at < window.from_]
    return {
        "view": name,
        "range": range_.value,
        "total_calls": len(calls),
        "data": view.compute(calls, range_, baseline),
    }
