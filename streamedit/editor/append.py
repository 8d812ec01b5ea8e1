"""Append generated fragments at a fixed insertion point, tracking the live cursor.

Every fragment becomes its own document edit so the user watches the code
appear. The cursor is an explicit :class:`CursorState` value returned by each
step; nothing else holds a reference to it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterable, Callable

from streamedit.config.loader import EditorSettings
from streamedit.core.cancellation import CancellationToken
from streamedit.core.errors import error_message
from streamedit.editor.document import Document, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CursorState:
    position: Position
    written: str = ""


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n")


def advance_cursor(position: Position, text: str) -> Position:
    """Cursor position after inserting ``text`` at ``position``."""
    lines = text.split("\n")
    if len(lines) > 1:
        return Position(position.line + len(lines) - 1, len(lines[-1]))
    return position.translate(column_delta=len(text))


def step(state: CursorState, fragment: str) -> CursorState:
    return CursorState(advance_cursor(state.position, fragment), state.written + fragment)


class AppendPatcher:
    def __init__(
        self,
        document: Document,
        settings: EditorSettings | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._document = document
        self._settings = settings or EditorSettings()
        self._clock = clock

    def _comment(self, text: str) -> str:
        return f"{self._settings.comment_prefix} {text}"

    def build_header(self, insertion_point: Position) -> str:
        """Timestamped marker line plus a blank line, on a line of its own."""
        stamp = self._clock().strftime("%Y-%m-%d %H:%M:%S")
        marker = self._comment(self._settings.header.format(timestamp=stamp))
        lead = "\n" if insertion_point.column > 0 else ""
        return f"{lead}{marker}\n\n"

    async def apply(
        self,
        fragments: AsyncIterable[str],
        insertion_point: Position,
        token: CancellationToken | None = None,
    ) -> CursorState:
        """Stream ``fragments`` into the document after a generation header.

        Returns the final cursor state. Errors are annotated inline and re-raised.
        """
        insertion_point = self._document.offset_to_position(
            self._document.position_to_offset(insertion_point)
        )
        header = self.build_header(insertion_point)
        await self._document.insert(insertion_point, header)
        state = CursorState(advance_cursor(insertion_point, header))
        try:
            async for fragment in fragments:
                if token is not None and token.cancelled:
                    await self._document.insert(
                        state.position, "\n" + self._comment(self._settings.cancelled_marker)
                    )
                    logger.info("generation cancelled after %d chars", len(state.written))
                    return state
                if self._settings.normalize_line_endings:
                    fragment = normalize_line_endings(fragment)
                await self._document.insert(state.position, fragment)
                state = step(state, fragment)
            await self._document.insert(state.position, "\n")
        except Exception as e:
            marker = self._settings.error_marker.format(message=error_message(e))
            await self._document.insert(state.position, "\n" + self._comment(marker))
            raise
        logger.info("generation finished: %d chars", len(state.written))
        return state
