from typing import Any, Callable, List, Mapping, NamedTuple, Tuple, TypeVar

CHART_TYPES = ("bar", "line", "pie", "area")
CHART_METRICS = ("intents", "topics", "sentiment", "calls", "volume-over-time")

DEFAULT_TYPE = "bar"
DEFAULT_METRIC = "intents"
DEFAULT_TITLE = "Custom view"
MAX_TITLE_LEN = 80

T = TypeVar("T")


class ChartSpec(NamedTuple):
    type: str
    metric: str
    title: str


def _any(*words: str) -> Callable[[str], bool]:
    return lambda t: any(w in t for w in words)


def _all(*words: str) -> Callable[[str], bool]:
    return lambda t: all(w in t for w in words)


# Ordered (predicate, result) tables, first match wins
TYPE_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (lambda t: "line" in t or _all("trend", "time")(t), "line"),
    (_any("pie", "breakdown", "donut"), "pie"),
    (_any("area"), "area"),
]

METRIC_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_any("topic"), "topics"),
    (_any("sentiment"), "sentiment"),
    (lambda t: "volume" in t and _any("time", "over")(t), "volume-over-time"),
    (lambda t: _any("call volume", "number of calls")(t) or ("calls" in t and "intent" not in t), "calls"),
]

TITLE_RULES: List[Tuple[Callable[[str, str], bool], str]] = [
    (lambda t, m: "intent" in t, "Intents"),
    (lambda t, m: "topic" in t, "Topics"),
    (lambda t, m: "sentiment" in t, "Member sentiment"),
    (lambda t, m: m == "volume-over-time", "Call volume over time"),
    (lambda t, m: m == "calls", "Call volume"),
]


def first_match(rules, default: T, *args) -> T:
    for predicate, result in rules:
        if predicate(*args):
            return result
    return default


def parse_chart_request(text: str) -> ChartSpec:
    t = text.lower()
    chart_type = first_match(TYPE_RULES, DEFAULT_TYPE, t)
    metric = first_match(METRIC_RULES, DEFAULT_METRIC, t)
    title = first_match(TITLE_RULES, DEFAULT_TITLE, t, metric)
    return ChartSpec(chart_type, metric, title)


def sanitize_config(payload: Mapping[str, Any]) -> ChartSpec:
    """Coerce an untrusted {type, metric, title} payload onto the closed chart schema."""
    chart_type = payload.get("type")
    metric = payload.get("metric")
    title = payload.get("title") or DEFAULT_TITLE
    return ChartSpec(
        chart_type if chart_type in CHART_TYPES else DEFAULT_TYPE,
        metric if metric in CHART_METRICS else DEFAULT_METRIC,
        str(title)[:MAX_TITLE_LEN],
    )
