"""Error taxonomy for generation requests.

Only a rate-limited response is worth retrying. A server-sent error frame is a
semantic rejection and terminates the request; transport and other HTTP
failures surface immediately.
"""

from __future__ import annotations

from enum import Enum

import httpx


class StreamEditError(Exception):
    """Base class for errors raised by streamedit itself."""


class StreamError(StreamEditError):
    """The server reported an error inside the event stream."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingApiKeyError(StreamEditError):
    """No API key is stored or configured."""

    def __init__(self, message: str = "DeepSeek API key is not set; run `streamedit set-key` first") -> None:
        super().__init__(message)


class EmptySelectionError(StreamEditError):
    """The selected text is empty or whitespace only."""

    def __init__(self, message: str = "Selected text is empty") -> None:
        super().__init__(message)


class ErrorKind(str, Enum):
    RATE_LIMIT = "rate_limit"
    HTTP = "http"
    TRANSPORT = "transport"
    STREAM = "stream"
    UNKNOWN = "unknown"


RATE_LIMIT_STATUS = 429


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, StreamError):
        return ErrorKind.STREAM
    if isinstance(exc, httpx.HTTPStatusError):
        if exc.response.status_code == RATE_LIMIT_STATUS:
            return ErrorKind.RATE_LIMIT
        return ErrorKind.HTTP
    if isinstance(exc, (httpx.TransportError, TimeoutError)):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNKNOWN


def error_message(exc: BaseException) -> str:
    """Short human-readable message for notifications and inline markers."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} from {exc.request.url}"
    return str(exc) or type(exc).__name__
