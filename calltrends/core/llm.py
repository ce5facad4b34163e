import json
import logging
import re
from typing import Optional

from openai import OpenAI

from .config import (
    COPILOT_MAX_TOKENS,
    COPILOT_TEMPERATURE,
    LLM_PROVIDER,
    OPENAI_API_KEY,
    OPENAI_MODEL,
    OPENAI_TIMEOUT_SEC,
)
from .parser import ChartSpec, sanitize_config
from .prompts import CHART_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
FENCE_CLOSE_RE = re.compile(r"\s*```$")


class ChatCompletionClient:
    """Thin wrapper over OpenAI chat completions: (system prompt, user query) -> reply text."""

    def __init__(self, api_key: str, model: str = OPENAI_MODEL, temperature: float = COPILOT_TEMPERATURE,
                 max_tokens: int = COPILOT_MAX_TOKENS, timeout: float = OPENAI_TIMEOUT_SEC):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def complete(self, system_prompt: str, user_query: str) -> Optional[str]:
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_query},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not resp.choices:
            return None
        return (resp.choices[0].message.content or "").strip() or None


def default_client() -> Optional[ChatCompletionClient]:
    if LLM_PROVIDER != "openai" or not OPENAI_API_KEY.strip():
        return None
    return ChatCompletionClient(OPENAI_API_KEY)


def strip_code_fence(text: str) -> str:
    return FENCE_CLOSE_RE.sub("", FENCE_OPEN_RE.sub("", text.strip())).strip()


def interpret_with_model(query: str, client: Optional[ChatCompletionClient]) -> Optional[ChartSpec]:
    """Ask the remote model for a chart spec. Returns None on any failure."""
    if client is None:
        return None
    try:
        content = client.complete(CHART_SYSTEM_PROMPT, query)
        if not content:
            return None
        parsed = json.loads(strip_code_fence(content))
    except Exception as e:
        logger.warning("Chart model request failed: %s", str(e)[:200])
        return None
    if not isinstance(parsed, dict):
        logger.warning("Chart model reply is not a JSON object: %s", content[:200])
        return None
    return sanitize_config(parsed)
