"""Structured JSON logging.

Every record becomes one JSON object per line: timestamp, level, logger,
message, plus whatever was passed as `extra`. Extras named after credentials
are replaced with a marker before they reach the stream.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Tuple

REDACTED = "[REDACTED]"

_SECRET_KEYS = frozenset({
    'password', 'new_password', 'newPassword', 'password_hash',
    'token', 'reset_token', 'resetToken', 'otp', 'secret', 'authorization',
})

# Attributes every LogRecord carries; anything else came from `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'taskName'}


def _extras(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or callable(value):
            continue
        yield key, REDACTED if key in _SECRET_KEYS else value


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        log_data: Dict[str, Any] = {
            "timestamp": created.isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(_extras(record))
        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str = "INFO"):
    """Send all logging, uvicorn's included, through one JSON handler.

    uvicorn's own access log is cut to warnings; RequestLoggingMiddleware
    covers requests.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

    access = logging.getLogger("uvicorn.access")
    access.handlers = [handler]
    access.setLevel(logging.WARNING)
