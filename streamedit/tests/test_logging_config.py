"""Tests for core/logging_config: redaction, StructuredFormatter, setup_logging."""

import json
import logging

from streamedit.core.logging_config import StructuredFormatter, _redact, setup_logging


def _record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="test", level=level, pathname="", lineno=0, msg=msg, args=(), exc_info=None
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_redact_strings():
    assert _redact("Bearer sk-123") == "[REDACTED]"
    assert _redact("hello") == "hello"
    assert _redact("sk-live123") == "[REDACTED]"


def test_redact_leaves_words_containing_sk_dash():
    assert _redact("task-3") == "task-3"
    assert _redact("disk-full") == "disk-full"
    assert _redact({"job": "mask-sk-value"}) == {"job": "mask-sk-value"}


def test_redact_sensitive_keys():
    assert _redact({"api_key": "abc", "model": "deepseek-chat"}) == {
        "api_key": "[REDACTED]",
        "model": "deepseek-chat",
    }
    assert _redact([{"authorization": "x"}]) == [{"authorization": "[REDACTED]"}]


def test_structured_formatter_json_with_extra():
    fmt = StructuredFormatter(use_json=True)
    data = json.loads(fmt.format(_record("hello", attempt=2, api_key="sk-live")))
    assert data["message"] == "hello"
    assert data["level"] == "INFO"
    assert data["attempt"] == 2
    assert data["api_key"] == "[REDACTED]"


def test_structured_formatter_key_value():
    out = StructuredFormatter(use_json=False).format(_record("warn", level=logging.WARNING))
    assert "warn" in out
    assert "WARNING" in out


def test_structured_formatter_with_exc_info():
    fmt = StructuredFormatter(use_json=True)
    try:
        raise ValueError("test error")
    except ValueError:
        exc_info = __import__("sys").exc_info()
    record = _record("failed", level=logging.ERROR)
    record.exc_info = exc_info
    data = json.loads(fmt.format(record))
    assert "ValueError" in data["exception"]


def test_setup_logging_levels():
    setup_logging(level="WARNING", use_json=False)
    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
    setup_logging(level="INFO")
    assert logging.getLogger().level == logging.INFO
