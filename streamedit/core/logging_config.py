"""Structured logging. API keys and bearer headers never reach log output."""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import Any

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
        "asctime",
    }
)

_SENSITIVE_MARKERS = ("api_key", "apikey", "secret", "bearer", "authorization")
# DeepSeek and OpenAI-style keys
_API_KEY_RE = re.compile(r"^\s*sk-[A-Za-z0-9]")


def _redact(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if _is_sensitive_key(k) else _redact(v) for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_redact(v) for v in obj]
    if isinstance(obj, str) and (
        _API_KEY_RE.match(obj) or any(s in obj.lower() for s in _SENSITIVE_MARKERS)
    ):
        return "[REDACTED]"
    return obj


def _is_sensitive_key(key: Any) -> bool:
    return isinstance(key, str) and key.lower() in ("api_key", "authorization", "token", "key")


class StructuredFormatter(logging.Formatter):
    """JSON or key=value format; redacts credentials passed via ``extra``."""

    def __init__(self, use_json: bool = True) -> None:
        super().__init__()
        self.use_json = use_json

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            log_dict[key] = "[REDACTED]" if _is_sensitive_key(key) else _redact(value)
        if self.use_json:
            return json.dumps(log_dict, default=str)
        parts = [f"{k}={v!r}" for k, v in log_dict.items()]
        return " ".join(parts)


def setup_logging(level: str = "INFO", use_json: bool = True) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter(use_json=use_json))
        root.addHandler(handler)
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
