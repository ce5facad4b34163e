"""Synthetic call records for demos and local development.

Complaint calls get low member sentiment, negative-leaning emotions and
slightly weaker empathy/closing QM results so every dashboard view has
something to show. Pass a seed for reproducible data.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import numpy as np

from .config import DEMO_CALL_COUNT, DEMO_RECENT_COMPLAINT_CALLS, DEMO_SEED
from .models import QM_CHECK_IDS, CallAction, CallRecord, CallSegment
from .sentiment import clamp

INTENTS = [
    "Pension balance inquiry",
    "Contribution change",
    "Benefit start date",
    "Complaint - delay",
    "Complaint - incorrect amount",
    "Address update",
    "Tax form request",
    "Retirement estimate",
    "Spouse benefit",
    "Transfer in/out",
]
COMPLAINT_INTENTS = [i for i in INTENTS if i.startswith("Complaint")]
ROUTINE_INTENTS = [i for i in INTENTS if not i.startswith("Complaint")]

TOPICS = [
    "Account balance",
    "Contributions",
    "Benefits eligibility",
    "Complaints",
    "Personal information",
    "Tax documents",
    "Retirement planning",
    "Dependent benefits",
    "Portability",
    "Fees and charges",
]
COMPLAINT_TOPIC = "Complaints"

ACTIONS_BY_TOPIC: Dict[str, List[str]] = {
    "Account balance": ["Send statement by email", "Verify last contribution", "Schedule callback if discrepancy"],
    "Contributions": ["Update contribution rate", "Send confirmation letter", "Follow up with payroll"],
    "Benefits eligibility": ["Mail eligibility letter", "Add to waitlist", "Schedule assessment call"],
    "Complaints": ["Escalate to supervisor", "Open case for review", "Callback within 48h", "Send apology letter"],
    "Personal information": ["Update address in system", "Resend verification", "Confirm identity docs"],
    "Tax documents": ["Send T4 by email", "Mail T4A to address", "Generate duplicate by Friday"],
    "Retirement planning": ["Send estimate package", "Book advisor call", "Email projection report"],
    "Dependent benefits": ["Add dependent to file", "Request birth certificate", "Update beneficiary form"],
    "Portability": ["Initiate transfer form", "Request statement from prior plan", "Confirm transfer timeline"],
    "Fees and charges": ["Waive fee once", "Explain fee breakdown", "Send fee schedule"],
}

QM_PASS_RATES: Dict[str, float] = dict(zip(QM_CHECK_IDS, [0.92, 0.88, 0.85, 0.87, 0.94, 0.82, 0.79, 0.90]))
COMPLAINT_WEAK_CHECKS = ("empathy_shown", "closing_courteous")

AGENT_IDS = [f"agent-00{i}" for i in range(1, 7)]
EMOTIONS = ["angry", "disappointed", "concerned", "neutral", "satisfied", "relieved"]
NEGATIVE_EMOTIONS = {"angry", "disappointed", "concerned"}

# weighted by repetition
CLARITY_CHOICES = ["clear", "clear", "partial", "unclear"]
ADVICE_CHOICES = ["none", "none", "none", "moderate", "high"]


class CallGenerator:
    def __init__(self, seed: Optional[int] = None, now: Optional[datetime] = None):
        self.rng = np.random.default_rng(seed)
        self.now = now or datetime.now(timezone.utc)

    def _int(self, lo: int, hi: int) -> int:
        return int(self.rng.integers(lo, hi + 1))

    def _choice(self, items):
        return items[int(self.rng.integers(len(items)))]

    def _uuid(self) -> str:
        return str(uuid.UUID(bytes=self.rng.bytes(16), version=4))

    def _emotions(self, is_complaint: bool) -> Dict[str, float]:
        out = {}
        for e in EMOTIONS:
            elevated = (e in NEGATIVE_EMOTIONS) == is_complaint
            lo, span = (0.5, 0.45) if elevated else (0.05, 0.25)
            out[e] = round(lo + float(self.rng.random()) * span, 3)
        return out

    def _segments(self, duration: int, topic: str, intent: str, member: int, agent: int,
                  is_complaint: bool) -> List[CallSegment]:
        count = self._int(1, 4)
        seg_len = duration // count
        segments = []
        for s in range(count):
            segments.append(CallSegment(
                start_offset=s * seg_len,
                end_offset=(s + 1) * seg_len,
                topic=topic if s == 0 else self._choice(TOPICS),
                intent=intent if s == 0 else self._choice(INTENTS),
                member_sentiment=clamp(member + self._int(-2, 2)),
                agent_sentiment=clamp(agent + self._int(-2, 2)),
                emotions=self._emotions(is_complaint),
            ))
        return segments

    def _actions(self, topic: str) -> List[CallAction]:
        options = ACTIONS_BY_TOPIC.get(topic, ACTIONS_BY_TOPIC["Account balance"])
        n = self._int(0, min(3, len(options)))
        picked = self.rng.choice(len(options), size=n, replace=False)
        return [CallAction(description=options[int(i)], category=topic) for i in picked]

    def _qm_checks(self, is_complaint: bool) -> Dict[str, bool]:
        checks = {}
        for check_id, rate in QM_PASS_RATES.items():
            if is_complaint and check_id in COMPLAINT_WEAK_CHECKS:
                rate -= 0.1
            jitter = (float(self.rng.random()) - 0.5) * 0.1
            checks[check_id] = bool(self.rng.random() < rate + jitter)
        return checks

    def call(self, index: int, complaint_bias: float, max_age: timedelta) -> CallRecord:
        duration = self._int(120, 900)
        ended_at = self.now - timedelta(seconds=float(self.rng.random()) * max_age.total_seconds())
        is_complaint = bool(self.rng.random() < complaint_bias)
        intent = self._choice(COMPLAINT_INTENTS if is_complaint else ROUTINE_INTENTS)
        topic = COMPLAINT_TOPIC if is_complaint else self._choice(TOPICS)
        member = self._int(0, 4) if is_complaint else self._int(6, 10)
        agent = self._int(4, 8) if is_complaint else self._int(6, 10)
        mood = "expressed frustration" if is_complaint else "inquiry resolved"
        return CallRecord(
            id=self._uuid(),
            external_id=f"F9-{1000000 + index}-{int(self.now.timestamp()):x}",
            started_at=ended_at - timedelta(seconds=duration),
            ended_at=ended_at,
            duration_seconds=duration,
            member_sentiment=member,
            agent_sentiment=agent,
            primary_intent=intent,
            primary_topic=topic,
            segments=self._segments(duration, topic, intent, member, agent, is_complaint),
            summary=f"Call regarding {topic.lower()}. Member {mood}.",
            actions=self._actions(topic),
            qm_checks=self._qm_checks(is_complaint),
            is_complaint=is_complaint,
            agent_id=self._choice(AGENT_IDS),
            clarity_of_next_steps=self._choice(CLARITY_CHOICES),
            vulnerable_member_flag=bool(self.rng.random() < 0.08),
            advice_boundary_risk=self._choice(ADVICE_CHOICES),
        )

    def generate(self, count: int, complaint_bias: float = 0.35,
                 max_age: timedelta = timedelta(hours=72), start: int = 0) -> List[CallRecord]:
        return [self.call(start + i, complaint_bias, max_age) for i in range(count)]


def seed_calls(count: int = DEMO_CALL_COUNT, recent_complaints: int = DEMO_RECENT_COMPLAINT_CALLS,
               seed: Optional[int] = DEMO_SEED, now: Optional[datetime] = None) -> List[CallRecord]:
    """Default demo set: `count` calls over 72h plus a complaint-heavy last half hour."""
    gen = CallGenerator(seed, now)
    calls = gen.generate(count)
    # keeps the complaint alert and emotion profile interesting
    calls += gen.generate(recent_complaints, complaint_bias=0.85, max_age=timedelta(minutes=30),
                          start=count)
    return calls
