import json
import logging
import os
from datetime import datetime, timezone


logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

logger = logging.getLogger("pitch_proxy")

# Never written to logs, whatever the caller passes
SENSITIVE_FIELDS = {"token", "authorization", "api_key", "gemini_key", "pexels_key", "prompt"}


def log_event(event: str, **fields):
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        **{k: ("[REDACTED]" if k in SENSITIVE_FIELDS else v) for k, v in fields.items()},
    }

    logger.info(json.dumps(payload, default=str))
