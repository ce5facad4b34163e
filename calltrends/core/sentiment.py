from typing import List, Tuple

# (label, upper bound inclusive) on the 0-10 member sentiment scale
SENTIMENT_BUCKETS: List[Tuple[str, float]] = [
    ("Negative (0–3)", 3.0),
    ("Neutral (4–6)", 6.0),
    ("Positive (7–10)", 10.0),
]

SCALE_MIN = 0.0
SCALE_MAX = 10.0


def clamp(value: float, lo: float = SCALE_MIN, hi: float = SCALE_MAX) -> float:
    return max(lo, min(hi, value))


def sentiment_bucket(score: float) -> int:
    """Index into SENTIMENT_BUCKETS; scores between integer bounds fall upward (3.5 -> Neutral, 6.5 -> Positive)."""
    for i, (_, upper) in enumerate(SENTIMENT_BUCKETS):
        if score <= upper:
            return i
    return len(SENTIMENT_BUCKETS) - 1


def grid_point(score: float, step: float = 0.5) -> float:
    # Nearest multiple of `step`, halves rounded up
    steps = int(clamp(score) / step + 0.5)
    return steps * step
