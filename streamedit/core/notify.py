"""User-facing notifications (progress toasts, error popups in an editor host)."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: messages go to the ``streamedit.notify`` log."""

    def __init__(self, name: str = "streamedit.notify") -> None:
        self._logger = logging.getLogger(name)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)


def notify_error(notifier: Notifier | None, message: str) -> None:
    """Show an error to the user. Best effort: a failing notifier only logs."""
    if notifier is None:
        return
    try:
        notifier.error(message)
    except Exception as e:
        logger.warning("notify_error failed: %s", e)
