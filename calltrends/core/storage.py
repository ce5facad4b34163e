import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .models import CallRecord
from .timewindow import TimeWindow

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 200

Loader = Callable[[], Iterable[CallRecord]]


class CallStore:
    """In-memory call collection, loaded once from an injected supplier.

    The loaded records are held as a tuple sorted newest-first by end time and
    are never mutated; `replace` swaps the whole collection.
    """

    def __init__(self, loader: Loader):
        self._loader = loader
        self._records: Optional[Tuple[CallRecord, ...]] = None

    @classmethod
    def from_records(cls, records: Iterable[CallRecord]) -> "CallStore":
        records = list(records)
        return cls(lambda: records)

    @staticmethod
    def _freeze(records: Iterable[CallRecord]) -> Tuple[CallRecord, ...]:
        return tuple(sorted(records, key=lambda c: c.ended_at, reverse=True))

    def load(self) -> Tuple[CallRecord, ...]:
        if self._records is None:
            self._records = self._freeze(self._loader())
            logger.info("Loaded %d call records", len(self._records))
        return self._records

    @property
    def records(self) -> Tuple[CallRecord, ...]:
        return self.load()

    def replace(self, records: Iterable[CallRecord]):
        self._records = self._freeze(records)
        logger.info("Replaced call records (%d)", len(self._records))

    def filter(self, from_: Optional[datetime] = None, to: Optional[datetime] = None) -> List[CallRecord]:
        # inclusive on both ends
        out = []
        for c in self.records:
            if from_ is not None and c.ended_at < from_:
                continue
            if to is not None and c.ended_at > to:
                continue
            out.append(c)
        return out

    def in_window(self, window: TimeWindow) -> List[CallRecord]:
        return self.filter(window.from_, window.to)

    def get(self, call_id: str) -> Optional[CallRecord]:
        for c in self.records:
            if c.id == call_id:
                return c
        return None

    def list_calls(self, window: TimeWindow, intent: Optional[str] = None, topic: Optional[str] = None,
                   complaints_only: bool = False, limit: int = 50) -> List[CallRecord]:
        limit = max(1, min(int(limit), MAX_LIST_LIMIT))
        calls: Sequence[CallRecord] = self.in_window(window)
        if intent:
            calls = [c for c in calls if c.primary_intent == intent]
        if topic:
            calls = [c for c in calls if c.primary_topic == topic]
        if complaints_only:
            calls = [c for c in calls if c.is_complaint]
        return list(calls[:limit])
