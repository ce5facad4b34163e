from typing import Dict, List, Sequence

from .aggregations import mean, rate_pct, round1, round_half_up, time_buckets
from .models import QM_CHECK_IDS, QM_LABELS, CallRecord

# Unreviewed calls are not penalised
DEFAULT_COMPLIANCE_SCORE = 85
HIGH_RISK_SCORE = 70


def call_compliance_score(call: CallRecord) -> int:
    checks = call.qm_checks or {}
    if not checks:
        return DEFAULT_COMPLIANCE_SCORE
    passed = sum(1 for v in checks.values() if v)
    return int(round_half_up(passed / len(checks) * 100))


def is_high_risk(call: CallRecord) -> bool:
    return call_compliance_score(call) < HIGH_RISK_SCORE


def mean_score(scores: Sequence[int]) -> int:
    return int(round_half_up(mean(scores))) if scores else 0


def get_qm_compliance(calls: Sequence[CallRecord]) -> List[Dict]:
    results = []
    for check_id in QM_CHECK_IDS:
        passed, failed = [], []
        for c in calls:
            v = (c.qm_checks or {}).get(check_id)
            if v is True:
                passed.append(c.id)
            elif v is False:
                failed.append(c.id)
        total = len(passed) + len(failed)
        results.append({
            "check_id": check_id,
            "label": QM_LABELS[check_id],
            "passed": len(passed),
            "total": total,
            "rate_pct": rate_pct(len(passed), total),
            "call_ids_passed": passed,
            "call_ids_failed": failed,
        })
    results.sort(key=lambda r: r["rate_pct"])  # gaps first
    return results


def get_qm_compliance_over_time(calls: Sequence[CallRecord], range_=None) -> List[Dict]:
    out = []
    for key, label, group in time_buckets(calls, range_):
        by_check = get_qm_compliance(group)
        out.append({
            "key": key,
            "label": label,
            "overall_rate_pct": round1(mean([r["rate_pct"] for r in by_check])),
            "by_check": [{"check_id": r["check_id"], "rate_pct": r["rate_pct"]} for r in by_check],
        })
    return out
