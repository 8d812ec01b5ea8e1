"""Progressively overwrite a whole document with generated content.

New content pushes back over the original text step by step instead of
clearing the document upfront. The part of the original not yet overwritten
stays visible as a "pending" region until the stream catches up with it or
ends, at which point any leftover tail is deleted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncIterable, Optional

from streamedit.core.cancellation import CancellationToken
from streamedit.core.errors import error_message
from streamedit.core.notify import Notifier, notify_error
from streamedit.editor.document import Document, Position, Range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverwriteState:
    original: str
    accumulated: str = ""

    @property
    def remaining(self) -> str:
        if len(self.accumulated) < len(self.original):
            return self.original[len(self.accumulated):]
        return ""

    @property
    def text(self) -> str:
        return self.accumulated + self.remaining


@dataclass(frozen=True)
class Mutation:
    """Replace the whole document with ``text``; pending region starts at ``pending_start``."""

    text: str
    pending_start: Optional[int] = None


def next_state(state: OverwriteState, fragment: str) -> tuple[OverwriteState, Mutation]:
    new = OverwriteState(state.original, state.accumulated + fragment)
    pending_start = len(new.accumulated) if new.remaining else None
    return new, Mutation(new.text, pending_start)


class WholeFilePatcher:
    def __init__(self, document: Document, notifier: Notifier | None = None) -> None:
        self._document = document
        self._notifier = notifier

    def _full_range(self) -> Range:
        return Range(
            Position(0, 0), self._document.offset_to_position(len(self._document.get_text()))
        )

    async def _apply_mutation(self, mutation: Mutation) -> None:
        await self._document.replace(self._full_range(), mutation.text)
        if mutation.pending_start is None:
            self._document.clear_pending()
            return
        self._document.mark_pending(
            Range(
                self._document.offset_to_position(mutation.pending_start),
                self._document.offset_to_position(len(mutation.text)),
            )
        )

    async def _finish(self, state: OverwriteState) -> None:
        if len(state.accumulated) < len(state.original):
            tail = Range(
                self._document.offset_to_position(len(state.accumulated)),
                self._document.offset_to_position(len(self._document.get_text())),
            )
            await self._document.delete(tail)
        try:
            await self._document.format()
        except Exception as e:
            logger.warning("format after whole-file replace failed: %s", e)

    async def apply(
        self, fragments: AsyncIterable[str], token: CancellationToken | None = None
    ) -> OverwriteState:
        """Replace the document with ``fragments``; returns the last state reached."""
        state = OverwriteState(self._document.get_text())
        try:
            async for fragment in fragments:
                if token is not None and token.cancelled:
                    logger.info(
                        "whole-file replace cancelled at %d/%d chars",
                        len(state.accumulated),
                        len(state.original),
                    )
                    return state
                state, mutation = next_state(state, fragment)
                await self._apply_mutation(mutation)
            await self._finish(state)
        except Exception as e:
            notify_error(self._notifier, f"File update failed: {error_message(e)}")
            raise
        finally:
            self._document.clear_pending()
        logger.info("whole-file replace finished: %d chars", len(state.accumulated))
        return state
