import os
import logging
from dotenv import load_dotenv

load_dotenv()

LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")          # offline|openai
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_SEC = float(os.getenv("OPENAI_TIMEOUT_SEC", "10"))

COPILOT_TEMPERATURE = float(os.getenv("COPILOT_TEMPERATURE", "0.1"))
COPILOT_MAX_TOKENS = int(os.getenv("COPILOT_MAX_TOKENS", "150"))

DEMO_CALL_COUNT = int(os.getenv("DEMO_CALL_COUNT", "165"))
DEMO_RECENT_COMPLAINT_CALLS = int(os.getenv("DEMO_RECENT_COMPLAINT_CALLS", "35"))
DEMO_SEED = int(os.getenv("DEMO_SEED")) if os.getenv("DEMO_SEED") else None  # unset = fresh data per process

COMPLAINT_THRESHOLD = int(os.getenv("COMPLAINT_THRESHOLD", "8"))
ALERT_WINDOW_MINUTES = int(os.getenv("ALERT_WINDOW_MINUTES", "60"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL):
    # Entry points only; library modules just use logging.getLogger(__name__)
    from rich.logging import RichHandler
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
