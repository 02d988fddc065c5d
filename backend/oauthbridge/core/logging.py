"""Logging for oauthbridge.

A single module-level ``logger`` is configured from settings. Code that runs
inside a flow attaches dimensions with ``logger.with_context(...)`` so every
line carries them:

    log = logger.with_context(provider="twitter", flow=flow_id[:8])
    log.info("Request token obtained")
"""

import json
import logging
import sys
from typing import Any, Dict

from oauthbridge.core.config import settings

_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None)))
_RESERVED_ATTRS.update({"message", "asctime"})


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that merges a fixed set of dimensions into every record."""

    def __init__(self, logger: logging.Logger, dimensions: Dict[str, Any]) -> None:
        """Wrap ``logger`` and remember the dimensions to attach."""
        super().__init__(logger, {})
        self.dimensions = dict(dimensions)

    def process(self, msg, kwargs):
        """Merge the adapter's dimensions into the record's ``extra``."""
        extra = dict(self.dimensions)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a child logger with additional dimensions."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


class _JSONFormatter(logging.Formatter):
    """One JSON object per line, dimensions included as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _TextFormatter(logging.Formatter):
    """Human-readable lines with dimensions appended as key=value."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        dims = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        ]
        return f"{line} [{' '.join(dims)}]" if dims else line


def _configure_root_logger() -> logging.Logger:
    base = logging.getLogger("oauthbridge")
    base.setLevel(settings.LOG_LEVEL.upper())
    base.propagate = False

    if not base.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if settings.is_local:
            handler.setFormatter(
                _TextFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
        else:
            handler.setFormatter(_JSONFormatter())
        base.addHandler(handler)

    return base


logger = ContextualLogger(_configure_root_logger(), {})
