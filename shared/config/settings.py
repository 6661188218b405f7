import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


ADMIN_EMAILS = frozenset(
    email.strip().lower()
    for email in os.getenv("ADMIN_EMAILS", "").split(",")
    if email.strip()
)

# When off, any status may follow any other except the payment guard
STRICT_ORDER_TRANSITIONS = _flag("STRICT_ORDER_TRANSITIONS")

RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "true")
ORDER_RATE_LIMIT = os.getenv("ORDER_RATE_LIMIT", "20/minute")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
