"""Text document interface consumed by the patchers, plus an in-memory implementation.

Positions are zero-based ``(line, column)`` pairs. Lines are separated by
``\\n``. Mutations are coroutines so an editor host can await its edit API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Position:
    line: int
    column: int

    def translate(self, line_delta: int = 0, column_delta: int = 0) -> "Position":
        return Position(self.line + line_delta, self.column + column_delta)


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@runtime_checkable
class Document(Protocol):
    """What the patchers need from a host editor buffer."""

    def get_text(self) -> str: ...

    def offset_to_position(self, offset: int) -> Position: ...

    def position_to_offset(self, position: Position) -> int: ...

    async def insert(self, position: Position, text: str) -> None: ...

    async def replace(self, range: Range, text: str) -> None: ...

    async def delete(self, range: Range) -> None: ...

    def mark_pending(self, range: Range) -> None: ...

    def clear_pending(self) -> None: ...

    async def format(self) -> None: ...


class TextDocument:
    """In-memory document. Out-of-range positions are clamped like an editor would.

    ``on_change`` is called with the full text after every mutation.
    """

    def __init__(
        self,
        text: str = "",
        *,
        path: str | Path | None = None,
        on_change: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._text = text
        self.path = Path(path) if path else None
        self.pending: Range | None = None
        self._on_change = on_change

    @classmethod
    def load(cls, path: str | Path, **kwargs) -> "TextDocument":
        p = Path(path)
        return cls(p.read_text(encoding="utf-8"), path=p, **kwargs)

    def save(self, path: str | Path | None = None) -> Path:
        target = Path(path) if path else self.path
        if target is None:
            raise ValueError("document has no path")
        target.write_text(self._text, encoding="utf-8")
        return target

    @property
    def text(self) -> str:
        return self._text

    def get_text(self, range: Range | None = None) -> str:
        if range is None:
            return self._text
        start = self.position_to_offset(range.start)
        end = self.position_to_offset(range.end)
        return self._text[start:end]

    def validate_position(self, position: Position) -> Position:
        lines = self._text.split("\n")
        if position.line < 0:
            return Position(0, 0)
        if position.line >= len(lines):
            return Position(len(lines) - 1, len(lines[-1]))
        column = min(max(position.column, 0), len(lines[position.line]))
        return Position(position.line, column)

    def position_to_offset(self, position: Position) -> int:
        pos = self.validate_position(position)
        offset = 0
        for i, line in enumerate(self._text.split("\n")):
            if i == pos.line:
                return offset + pos.column
            offset += len(line) + 1
        return len(self._text)

    def offset_to_position(self, offset: int) -> Position:
        offset = min(max(offset, 0), len(self._text))
        before = self._text[:offset]
        line = before.count("\n")
        return Position(line, offset - (before.rfind("\n") + 1))

    def full_range(self) -> Range:
        return Range(Position(0, 0), self.offset_to_position(len(self._text)))

    def _splice(self, start: int, end: int, text: str) -> None:
        self._text = self._text[:start] + text + self._text[end:]
        if self._on_change is not None:
            self._on_change(self._text)

    async def insert(self, position: Position, text: str) -> None:
        offset = self.position_to_offset(position)
        self._splice(offset, offset, text)

    async def replace(self, range: Range, text: str) -> None:
        start = self.position_to_offset(range.start)
        end = self.position_to_offset(range.end)
        self._splice(min(start, end), max(start, end), text)

    async def delete(self, range: Range) -> None:
        await self.replace(range, "")

    def mark_pending(self, range: Range) -> None:
        self.pending = range

    def clear_pending(self) -> None:
        self.pending = None

    async def format(self) -> None:
        """Strip trailing whitespace and end the document with exactly one newline."""
        lines = [line.rstrip() for line in self._text.split("\n")]
        formatted = "\n".join(lines).rstrip("\n") + "\n" if self._text.strip() else ""
        if formatted != self._text:
            self._splice(0, len(self._text), formatted)
