from typing import Dict, Sequence

from .config import ALERT_WINDOW_MINUTES, COMPLAINT_THRESHOLD
from .models import CallRecord


def get_complaint_alert(calls: Sequence[CallRecord], threshold: int = COMPLAINT_THRESHOLD,
                        window_minutes: int = ALERT_WINDOW_MINUTES) -> Dict:
    # `calls` is expected to already cover the last `window_minutes`
    complaint_count = sum(1 for c in calls if c.is_complaint)
    elevated = complaint_count >= threshold
    message = None
    if elevated:
        message = (f"High complaint volume: {complaint_count} complaints in the last "
                   f"{window_minutes} minutes (threshold: {threshold}).")
    return {
        "complaints_elevated": elevated,
        "complaint_count": complaint_count,
        "threshold": threshold,
        "window_minutes": window_minutes,
        "message": message,
    }
