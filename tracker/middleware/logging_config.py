"""
Structured logging configuration.

Production writes one JSON object per line for the log aggregator;
development and tests get a short coloured line. Every record emitted while
a request is being served is tagged with the request id and the session
user, so an import run can be followed from upload to ledger entry.

LOG_LEVEL overrides the default level (DEBUG in development, INFO otherwise).
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context, session

# Attributes copied from the record into the JSON payload when set
_CONTEXT_KEYS = (
    "request_id",
    "user_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "remote_addr",
)

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


class RequestContextFilter(logging.Filter):
    """Stamp request_id / user_id onto records logged inside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            if getattr(record, "request_id", None) is None:
                record.request_id = g.get("request_id")
            if getattr(record, "user_id", None) is None:
                record.user_id = session.get("user_id")
        return True


class JSONFormatter(logging.Formatter):
    """One JSON document per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        payload.update({
            key: getattr(record, key)
            for key in _CONTEXT_KEYS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """Compact coloured line for a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, "")
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{stamp} {record.levelname:<8}{_RESET} {record.name}: {record.getMessage()}"

        request_id = getattr(record, "request_id", None)
        if request_id:
            line += f" [req={request_id}]"
        duration = getattr(record, "duration_ms", None)
        if duration is not None:
            line += f" [{duration:.0f}ms]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(app):
    """Install a single stderr handler on the root logger for *app*."""
    testing = app.config.get("TESTING", False)
    production = not app.config.get("DEBUG", False) and not testing

    level_name = os.getenv("LOG_LEVEL", "INFO" if production else "DEBUG").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if production else ReadableFormatter())
    handler.addFilter(RequestContextFilter())

    # Replace rather than append: create_app may run more than once per process
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    app.logger.setLevel(level)

    for name in ("werkzeug", "urllib3", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)

    if not testing:
        app.logger.info("Logging configured: level=%s json=%s", level_name, production)
