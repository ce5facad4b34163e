from datetime import timedelta

from calltrends.core.aggregations import (
    aggregate_intents,
    aggregate_sentiment,
    aggregate_topics,
    get_intent_complaints,
    get_kpis,
    get_member_agent_sentiment,
    get_topic_sentiment,
    get_volume_by_day_of_week,
    get_volume_by_hour,
    get_volume_over_time,
    rate_pct,
    round_half_up,
)


def _mixed(make_call):
    return [
        make_call(primary_intent="Address update", primary_topic="Personal information", member_sentiment=8),
        make_call(primary_intent="Tax form request", primary_topic="Tax documents", member_sentiment=6),
        make_call(primary_intent="Address update", primary_topic="Personal information", member_sentiment=9),
        make_call(primary_intent="Complaint - delay", primary_topic="Complaints", member_sentiment=1, is_complaint=True),
        make_call(primary_intent="Address update", primary_topic="Complaints", member_sentiment=2, is_complaint=True),
    ]


def test_round_half_up_matches_dashboard_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.25, 1) == 0.3
    assert round_half_up(-2.5) == -2
    assert rate_pct(1, 3) == 33.3
    assert rate_pct(2, 3) == 66.7
    assert rate_pct(5, 0) == 0


def test_categorical_aggregates_partition_calls(make_call):
    calls = _mixed(make_call)
    for agg in (aggregate_intents(calls), aggregate_topics(calls)):
        assert sum(item["count"] for item in agg) == len(calls)
        ids = [cid for item in agg for cid in item["call_ids"]]
        assert sorted(ids) == sorted(c.id for c in calls)
        counts = [item["count"] for item in agg]
        assert counts == sorted(counts, reverse=True)

    intents = aggregate_intents(calls)
    assert intents[0]["name"] == "Address update"
    assert intents[0]["count"] == 3
    assert intents[0]["id"] == "intent-0"


def test_categorical_ties_keep_first_seen_order(make_call):
    calls = [make_call(primary_topic="B"), make_call(primary_topic="A"), make_call(primary_topic="C")]
    assert [t["name"] for t in aggregate_topics(calls)] == ["B", "A", "C"]


def test_sentiment_buckets(make_call):
    calls = [make_call(member_sentiment=s) for s in (0, 3, 3.01, 3.5, 4, 6, 6.5, 7, 10)]
    buckets = aggregate_sentiment(calls)
    assert [b["label"] for b in buckets] == ["Negative (0–3)", "Neutral (4–6)", "Positive (7–10)"]
    assert [b["count"] for b in buckets] == [2, 4, 3]
    assert buckets[1]["call_ids"] == [calls[2].id, calls[3].id, calls[4].id, calls[5].id]
    assert calls[6].id in buckets[2]["call_ids"]
    assert sum(b["count"] for b in buckets) == len(calls)
    assert abs(sum(b["percentage"] for b in buckets) - 100) <= 1
    assert buckets[1]["percentage"] == 44


def test_sentiment_buckets_empty():
    assert [b["count"] for b in aggregate_sentiment([])] == [0, 0, 0]
    assert [b["percentage"] for b in aggregate_sentiment([])] == [0, 0, 0]


def test_volume_over_time_hourly_then_daily(make_call, now):
    calls = [
        make_call(ended_at=now - timedelta(hours=1), member_sentiment=4, is_complaint=True),
        make_call(ended_at=now - timedelta(minutes=10), member_sentiment=7),
        make_call(ended_at=now - timedelta(minutes=20), member_sentiment=8),
        make_call(ended_at=now - timedelta(days=2), member_sentiment=5),
    ]
    hourly = get_volume_over_time(calls, "24h")
    assert [b["key"] for b in hourly] == ["2026-03-02T15:00", "2026-03-04T14:00", "2026-03-04T15:00"]
    assert [b["label"] for b in hourly] == ["15:00", "14:00", "15:00"]
    assert [b["count"] for b in hourly] == [1, 1, 2]
    assert hourly[-1]["avg_member_sentiment"] == 7.5
    assert sorted(hourly[-1]["call_ids"]) == sorted([calls[1].id, calls[2].id])

    daily = get_volume_over_time(calls, "7d")
    assert [b["label"] for b in daily] == ["2026-03-02", "2026-03-04"]
    assert [b["key"] for b in daily] == ["2026-03-02", "2026-03-04"]
    assert daily[1]["count"] == 3
    assert daily[1]["complaints"] == 1
    assert daily[1]["avg_member_sentiment"] == 6.3
    assert sum(b["count"] for b in daily) == len(calls)


def test_hourly_keys_increase_across_midnight(make_call, now):
    calls = [
        make_call(ended_at=now - timedelta(minutes=1)),
        make_call(ended_at=now - timedelta(hours=23, minutes=50)),
        make_call(ended_at=now - timedelta(hours=15)),
        make_call(ended_at=now - timedelta(hours=16)),
    ]
    buckets = get_volume_over_time(calls, "24h")
    keys = [b["key"] for b in buckets]
    assert keys == ["2026-03-03T15:00", "2026-03-03T23:00", "2026-03-04T00:00", "2026-03-04T15:00"]
    assert all(a < b for a, b in zip(keys, keys[1:]))
    assert [b["label"] for b in buckets] == ["15:00", "23:00", "00:00", "15:00"]
    assert buckets[0]["call_ids"] == [calls[1].id]
    assert buckets[-1]["call_ids"] == [calls[0].id]


def test_topic_sentiment_worst_first(make_call):
    rows = get_topic_sentiment(_mixed(make_call))
    assert [r["topic"] for r in rows] == ["Complaints", "Tax documents", "Personal information"]
    assert rows[0]["avg_member_sentiment"] == 1.5
    assert rows[-1]["avg_member_sentiment"] == 8.5


def test_intent_complaints_rate(make_call):
    rows = get_intent_complaints(_mixed(make_call))
    assert rows[0]["intent"] == "Complaint - delay"
    assert rows[0]["complaint_rate_pct"] == 100.0
    address = next(r for r in rows if r["intent"] == "Address update")
    assert address["complaints"] == 1
    assert address["complaint_rate_pct"] == 33.3
    rates = [r["complaint_rate_pct"] for r in rows]
    assert rates == sorted(rates, reverse=True)


def test_volume_by_hour_and_day_are_zero_filled(make_call, now):
    calls = [make_call(ended_at=now), make_call(ended_at=now - timedelta(days=1, hours=3))]
    hours = get_volume_by_hour(calls)
    assert [h["hour"] for h in hours] == list(range(24))
    assert hours[15]["count"] == 1
    assert hours[12]["count"] == 1
    assert hours[15]["label"] == "15:00"
    assert sum(h["count"] for h in hours) == 2

    days = get_volume_by_day_of_week(calls)
    assert [d["label"] for d in days] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert days[3]["count"] == 1  # Wednesday
    assert days[2]["count"] == 1
    assert get_volume_by_hour([])[0]["count"] == 0


def test_kpis(make_call):
    calls = [
        make_call(duration_seconds=100, member_sentiment=2, agent_sentiment=6, is_complaint=True),
        make_call(duration_seconds=201, member_sentiment=9, agent_sentiment=9),
    ]
    assert get_kpis(calls) == {
        "total_calls": 2,
        "avg_duration_sec": 151,
        "complaint_count": 1,
        "complaint_rate_pct": 50.0,
        "avg_member_sentiment": 5.5,
        "avg_agent_sentiment": 7.5,
    }


def test_kpis_empty_input():
    kpis = get_kpis([])
    assert kpis["total_calls"] == 0
    assert all(v == 0 for v in kpis.values())


def test_member_agent_grid(make_call):
    calls = [
        make_call(member_sentiment=7.2, agent_sentiment=8),
        make_call(member_sentiment=6.9, agent_sentiment=8.1),
        make_call(member_sentiment=7.25, agent_sentiment=3),
    ]
    cells = get_member_agent_sentiment(calls)
    assert [(c["member_sentiment"], c["agent_sentiment"], c["count"]) for c in cells] == [
        (7.0, 8.0, 2),
        (7.5, 3.0, 1),
    ]
    assert sum(c["count"] for c in cells) == len(calls)


def test_views_are_idempotent(make_call):
    calls = _mixed(make_call)
    for fn in (aggregate_intents, aggregate_sentiment, get_topic_sentiment, get_member_agent_sentiment):
        assert fn(calls) == fn(calls)
    snapshot = [c.to_dict() for c in calls]
    get_volume_over_time(calls, "7d")
    assert [c.to_dict() for c in calls] == snapshot
