from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional

QM_CHECK_IDS: List[str] = [
    "greeting_correct",
    "sin_verified",
    "phone_verified",
    "identity_confirmed",
    "disclosure_given",
    "empathy_shown",
    "next_steps_summarized",
    "closing_courteous",
]

QM_LABELS: Dict[str, str] = {
    "greeting_correct": "Agent greeted member correctly",
    "sin_verified": "SIN verified",
    "phone_verified": "Phone number verified",
    "identity_confirmed": "Identity confirmed",
    "disclosure_given": "Required disclosure given",
    "empathy_shown": "Empathy shown",
    "next_steps_summarized": "Next steps summarized",
    "closing_courteous": "Courteous closing",
}

CLARITY_LEVELS = ("clear", "partial", "unclear")
ADVICE_RISK_LEVELS = ("none", "moderate", "high")


@dataclass
class CallSegment:
    start_offset: int
    end_offset: int
    topic: str
    intent: str
    member_sentiment: float
    agent_sentiment: float
    emotions: Optional[Dict[str, float]] = None  # label -> intensity 0..1


@dataclass
class CallAction:
    description: str
    category: Optional[str] = None


@dataclass
class CallRecord:
    id: str
    external_id: str
    started_at: datetime  # tz-aware UTC
    ended_at: datetime
    duration_seconds: int
    member_sentiment: float  # 0..10, 5 = neutral
    agent_sentiment: float
    primary_intent: str
    primary_topic: str
    segments: List[CallSegment] = field(default_factory=list)
    summary: Optional[str] = None
    actions: List[CallAction] = field(default_factory=list)
    qm_checks: Dict[str, bool] = field(default_factory=dict)
    is_complaint: bool = False
    agent_id: Optional[str] = None
    clarity_of_next_steps: Optional[str] = None  # clear|partial|unclear
    vulnerable_member_flag: Optional[bool] = None
    advice_boundary_risk: Optional[str] = None  # none|moderate|high

    def ordered_segments(self) -> List[CallSegment]:
        return sorted(self.segments, key=lambda s: s.start_offset)

    def to_dict(self) -> Dict:
        out = asdict(self)
        out["started_at"] = self.started_at.isoformat()
        out["ended_at"] = self.ended_at.isoformat()
        return out
