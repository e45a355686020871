"""JSON log lines carrying booking, availability and user ids when a call site passes them."""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "user_id", "booking_id", "availability_id", "error_code", "path",
    "attempt", "input_tokens", "output_tokens",
)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val if isinstance(val, (int, float, bool)) else str(val)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install one root stream handler; fmt="text" for local runs.

    Calling it again replaces the handler it installed earlier.
    """
    for existing in list(logging.root.handlers):
        if getattr(existing, "_tutor_network", False):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler._tutor_network = True
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
