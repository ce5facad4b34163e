from datetime import timedelta

import pytest

from calltrends.core.alerts import get_complaint_alert
from calltrends.core.storage import CallStore
from calltrends.core.views import (
    DASHBOARD,
    INSIGHTS,
    TRENDS,
    VIEWS,
    UnknownViewError,
    compute_view,
    get_view,
    run_view,
)


def test_registry_sections():
    assert len(VIEWS) == 23
    assert {v.name for v in VIEWS.values() if v.section == TRENDS} == {"intents", "topics", "sentiment"}
    assert {v.name for v in VIEWS.values() if v.section == DASHBOARD} == {
        "compliance-summary", "sentiment-summary", "risk-summary", "trend-summary"}
    assert get_view("kpis", INSIGHTS).name == "kpis"


def test_unknown_or_misplaced_view():
    with pytest.raises(UnknownViewError):
        get_view("nope")
    with pytest.raises(UnknownViewError):
        get_view("kpis", TRENDS)
    with pytest.raises(UnknownViewError):
        compute_view("nope", [])


def test_run_view_wraps_result(make_call, now):
    store = CallStore.from_records([
        make_call(),
        make_call(is_complaint=True),
        make_call(ended_at=now - timedelta(days=2)),
    ])
    out = run_view(store, "kpis", now=now)
    assert out["view"] == "kpis"
    assert out["range"] == "24h"
    assert out["total_calls"] == 2
    assert out["data"]["complaint_count"] == 1

    assert run_view(store, "kpis", "7d", now=now)["total_calls"] == 3
    assert run_view(store, "kpis", "bogus", now=now)["range"] == "24h"
    assert run_view(store, "volume-by-hour", now=now)["range"] == "7d"
    assert run_view(store, "volume-by-day", now=now)["range"] == "30d"


def test_ranged_views_follow_range(make_call, now):
    calls = [make_call(), make_call(ended_at=now - timedelta(days=1))]
    assert [b["label"] for b in compute_view("volume-over-time", calls, "7d")] == ["2026-03-03", "2026-03-04"]
    assert [b["label"] for b in compute_view("volume-over-time", calls, "24h")] == ["15:00", "15:00"]
    assert [b["key"] for b in compute_view("volume-over-time", calls, "24h")] == ["2026-03-03T15:00", "2026-03-04T15:00"]


def test_trend_summary_uses_previous_window(make_call, now):
    store = CallStore.from_records([
        make_call(primary_topic="Fees and charges", ended_at=now - timedelta(days=1)),
        make_call(primary_topic="Fees and charges", ended_at=now - timedelta(days=2)),
        make_call(primary_topic="Fees and charges", ended_at=now - timedelta(days=40)),
    ])
    out = run_view(store, "trend-summary", now=now)
    assert out["range"] == "30d"
    assert out["total_calls"] == 2
    row = out["data"]["topic_volume_change"][0]
    assert row["topic"] == "Fees and charges"
    assert row["change_pct"] == 100


def test_complaint_alert_threshold(make_call):
    complaints = [make_call(is_complaint=True) for _ in range(8)]
    alert = get_complaint_alert(complaints, threshold=8, window_minutes=60)
    assert alert["complaints_elevated"] is True
    assert alert["complaint_count"] == 8
    assert alert["message"] == "High complaint volume: 8 complaints in the last 60 minutes (threshold: 8)."

    quiet = get_complaint_alert(complaints[:7] + [make_call()], threshold=8, window_minutes=60)
    assert quiet["complaints_elevated"] is False
    assert quiet["complaint_count"] == 7
    assert quiet["message"] is None


def test_call_on_window_boundary_is_not_in_baseline(make_call, now):
    store = CallStore.from_records([make_call(primary_topic="Portability", ended_at=now - timedelta(days=30))])
    out = run_view(store, "trend-summary", now=now)
    assert out["total_calls"] == 1
    assert out["data"]["topic_volume_change"][0]["change_pct"] == 100
