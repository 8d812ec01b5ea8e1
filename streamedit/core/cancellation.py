"""Cooperative cancellation token.

Patchers poll ``cancelled`` once per fragment; nothing is interrupted
preemptively.
"""

from __future__ import annotations

from threading import Lock


class CancellationToken:
    """A readable flag set by the host (signal handler, UI button)."""

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None
        self._lock = Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        # first reason wins
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            self._reason = reason

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"
