import logging
import uuid
from typing import Dict, Optional

from .llm import ChatCompletionClient, interpret_with_model
from .parser import ChartSpec, parse_chart_request, sanitize_config

logger = logging.getLogger(__name__)

DATA_KEY = "count"


class EmptyQueryError(ValueError):
    pass


def new_chart_id() -> str:
    return f"chart-{uuid.uuid4().hex}"


def build_config(spec: ChartSpec, chart_id: Optional[str] = None) -> Dict:
    return {
        "id": chart_id or new_chart_id(),
        "type": spec.type,
        "title": spec.title,
        "data_key": DATA_KEY,
        "metric": spec.metric,
    }


def resolve_visualization_request(query: str, client: Optional[ChatCompletionClient] = None) -> Dict:
    # client=None means no remote model; the keyword parser answers alone
    query = (query or "").strip()
    if not query:
        raise EmptyQueryError("Missing query")

    spec = interpret_with_model(query, client)
    if spec is None:
        spec = sanitize_config(parse_chart_request(query)._asdict())
        logger.debug("Chart request resolved by keywords: %s", spec)

    return {
        "config": build_config(spec),
        "message": f'Added "{spec.title}" as {spec.type} chart.',
    }
