"""Logging configuration."""

import json
import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from receiptanalyzer.core.config import Settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_HANDLER_NAME = "receiptanalyzer"

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "stack_info",
    "exc_info",
    "exc_text",
    "message",
    "getMessage",
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter that keeps credentials out of the logs."""

    def __init__(self, *, sanitize_sensitive: bool = True) -> None:
        """Initialize formatter with sanitization option."""
        super().__init__()
        self.sanitize_sensitive = sanitize_sensitive
        self.sensitive_fields = {
            "api_key",
            "apikey",
            "authorization",
            "token",
            "password",
            "secret",
        }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName if record.funcName else "<unknown>",
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }
        if extra_fields:
            if self.sanitize_sensitive:
                extra_fields = self._sanitize_data(extra_fields)
            log_entry.update(extra_fields)

        return json.dumps(log_entry, default=self._json_serializer, ensure_ascii=False)

    def _sanitize_data(self, data: dict[str, Any]) -> dict[str, Any]:
        """Mask sensitive values, recursing into nested dicts and lists."""
        sanitized = {}
        for key, value in data.items():
            if self._is_sensitive_key(key) and not self._is_usage_metric(key):
                sanitized[key] = "***REDACTED***"
            elif isinstance(value, dict):
                sanitized[key] = self._sanitize_data(value)
            elif isinstance(value, list):
                sanitized[key] = [
                    self._sanitize_data(item) if isinstance(item, dict) else item
                    for item in value
                ]
            else:
                sanitized[key] = value
        return sanitized

    def _is_sensitive_key(self, key: str) -> bool:
        """Check if a key should be considered sensitive."""
        normalized = re.sub(r"[^a-z]", "", key.lower())
        return any(
            re.sub(r"[^a-z]", "", sensitive) in normalized
            for sensitive in self.sensitive_fields
        )

    def _is_usage_metric(self, key: str) -> bool:
        """Check if the key is a token count such as ``total_tokens``."""
        return key.lower().endswith("_tokens")

    def _json_serializer(self, obj: Any) -> str:  # noqa: ANN401
        """JSON serializer for non-standard types."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Path):
            return str(obj)
        return str(obj)


def setup_logging(settings: Settings) -> None:
    """Configure the root logger from settings."""
    handler = logging.StreamHandler()
    if settings.log_format.lower() == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    handler.set_name(_HANDLER_NAME)

    root_logger = logging.getLogger()
    # Replace our own handler only, leaving handlers installed by the server
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
