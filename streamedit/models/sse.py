"""Server-sent event decoder for the chat-completion stream.

Each ``data: <json>`` line carries one frame. The stream has no required
terminal sentinel: it ends when the connection closes, and a partial line
left in the buffer at that point is dropped.
"""

from __future__ import annotations

import codecs
import logging
from typing import AsyncIterable, AsyncIterator

from pydantic import ValidationError

from streamedit.core.errors import StreamError
from streamedit.core.events import StreamFrame

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def parse_line(line: str) -> str | None:
    """Decode one stream line to a fragment.

    Returns ``None`` for lines that carry nothing (other SSE fields, empty or
    malformed frames). Raises :class:`StreamError` for an error frame.
    """
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None
    raw = line[len(DATA_PREFIX):]
    if raw == DONE_SENTINEL:
        return None
    try:
        frame = StreamFrame.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("stream frame decode failed: %s", e.errors(include_url=False)[:1])
        return None
    if frame.error is not None:
        raise StreamError(frame.error.message)
    return frame.content or None


async def decode_stream(chunks: AsyncIterable[str | bytes]) -> AsyncIterator[str]:
    """Yield content fragments from raw stream blocks, in arrival order."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buf = ""
    async for chunk in chunks:
        buf += decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        while "\n" in buf:
            line, buf = buf.split("\n", 1)
            fragment = parse_line(line)
            if fragment:
                yield fragment
    if buf.strip():
        logger.debug("dropping unterminated stream line (%d chars)", len(buf))
