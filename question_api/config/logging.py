"""Logging setup for the question_api package.

Modules log through ``logging.getLogger(__name__)``; this installs a single
handler on the package logger, either plain text or one JSON object per line.
"""

import json
import logging
from datetime import datetime, timezone

from question_api.config.settings import get_settings

PACKAGE_LOGGER = "question_api"

# Extra attributes copied into JSON records when present
_EXTRA_FIELDS = (
    "request_id", "method", "path", "client_ip", "user_agent", "user_id", "company_id", "action", "result",
)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                data[field] = getattr(record, field)
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def configure_logging() -> None:
    settings = get_settings()
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.LOG_LEVEL.upper())

    # Idempotent: the app factory may run more than once per process (tests)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
