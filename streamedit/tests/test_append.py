"""Tests for AppendPatcher: cursor arithmetic, incremental edits, cancellation, errors."""

from datetime import datetime

import pytest

from streamedit.config.loader import EditorSettings
from streamedit.core.cancellation import CancellationToken
from streamedit.core.errors import StreamError
from streamedit.editor.append import (
    AppendPatcher,
    CursorState,
    advance_cursor,
    normalize_line_endings,
    step,
)
from streamedit.editor.document import Position, TextDocument

FIXED = datetime(2024, 1, 2, 3, 4, 5)
HEADER = "// AI generated code - 2024-01-02 03:04:05\n\n"


def _patcher(doc, settings=None):
    return AppendPatcher(doc, settings, clock=lambda: FIXED)


async def _fragments(*parts):
    for p in parts:
        yield p


def test_advance_cursor_multiline():
    assert advance_cursor(Position(2, 5), "a\nbc") == Position(3, 2)


def test_advance_cursor_single_line():
    assert advance_cursor(Position(2, 5), "xyz") == Position(2, 8)


def test_advance_cursor_trailing_newline():
    assert advance_cursor(Position(0, 4), "x\n") == Position(1, 0)


def test_step_threads_state():
    state = step(CursorState(Position(0, 0)), "ab\nc")
    state = step(state, "d")
    assert state == CursorState(Position(1, 2), "ab\ncd")


def test_normalize_line_endings():
    assert normalize_line_endings("a\r\nb\r\n") == "a\nb\n"


def test_header_starts_own_line_mid_line():
    patcher = _patcher(TextDocument())
    assert patcher.build_header(Position(3, 0)) == HEADER
    assert patcher.build_header(Position(3, 7)) == "\n" + HEADER


@pytest.mark.asyncio
async def test_final_document_is_prefix_header_fragments_newline():
    doc = TextDocument("int a;\n")
    state = await _patcher(doc).apply(
        _fragments("void ", "Tick();\n", "int b;"), Position(1, 0), CancellationToken()
    )
    assert doc.text == "int a;\n" + HEADER + "void Tick();\nint b;" + "\n"
    assert state.written == "void Tick();\nint b;"
    assert state.position == Position(4, 6)


@pytest.mark.asyncio
async def test_suffix_after_insertion_point_preserved():
    doc = TextDocument("line0\nline1\n")
    await _patcher(doc).apply(_fragments("A\n", "B"), Position(1, 0))
    assert doc.text == "line0\n" + HEADER + "A\nB\n" + "line1\n"


@pytest.mark.asyncio
async def test_mid_line_insertion():
    doc = TextDocument("class AActor {}; // end")
    await _patcher(doc).apply(_fragments("x"), Position(0, 16))
    assert doc.text == "class AActor {};\n" + HEADER + "x\n" + " // end"


@pytest.mark.asyncio
async def test_insertion_point_past_end_is_clamped():
    doc = TextDocument("int a;\nint b;")
    state = await _patcher(doc).apply(_fragments("X", "Y"), Position(10, 0))
    assert doc.text == "int a;\nint b;\n" + HEADER + "XY\n"
    assert state.position == Position(4, 2)
    assert doc.validate_position(state.position) == state.position


@pytest.mark.asyncio
async def test_negative_insertion_point_is_clamped():
    doc = TextDocument("tail")
    state = await _patcher(doc).apply(_fragments("X"), Position(-1, 0))
    assert doc.text == HEADER + "X\n" + "tail"
    assert state.position == Position(2, 1)


@pytest.mark.asyncio
async def test_each_fragment_is_a_visible_edit():
    changes = []
    doc = TextDocument("", on_change=changes.append)
    await _patcher(doc).apply(_fragments("a", "b\n", "c"), Position(0, 0))
    assert changes == [
        HEADER,
        HEADER + "a",
        HEADER + "ab\n",
        HEADER + "ab\nc",
        HEADER + "ab\nc\n",
    ]


@pytest.mark.asyncio
async def test_crlf_fragments_normalized():
    doc = TextDocument("")
    await _patcher(doc).apply(_fragments("a\r\n", "b"), Position(0, 0))
    assert doc.text == HEADER + "a\nb\n"


@pytest.mark.asyncio
async def test_normalization_can_be_disabled():
    doc = TextDocument("")
    settings = EditorSettings(normalize_line_endings=False)
    await _patcher(doc, settings).apply(_fragments("a\r\n"), Position(0, 0))
    assert doc.text == HEADER + "a\r\n\n"


@pytest.mark.asyncio
async def test_cancellation_stops_further_fragments():
    token = CancellationToken()
    doc = TextDocument("")

    async def source():
        yield "a"
        yield "b"
        token.cancel("user")
        yield "c"
        yield "d"

    state = await _patcher(doc).apply(source(), Position(0, 0), token)
    assert doc.text == HEADER + "ab" + "\n// Generation cancelled"
    assert state.written == "ab"


@pytest.mark.asyncio
async def test_error_annotated_inline_and_reraised():
    doc = TextDocument("")

    async def source():
        yield "partial"
        raise StreamError("quota exceeded")

    with pytest.raises(StreamError, match="quota exceeded"):
        await _patcher(doc).apply(source(), Position(0, 0))
    assert doc.text == HEADER + "partial" + "\n// Generation error: quota exceeded"


@pytest.mark.asyncio
async def test_custom_comment_prefix_and_markers():
    doc = TextDocument("")
    settings = EditorSettings(comment_prefix="#", header="generated at {timestamp}")
    await _patcher(doc, settings).apply(_fragments("pass"), Position(0, 0))
    assert doc.text == "# generated at 2024-01-02 03:04:05\n\npass\n"


@pytest.mark.asyncio
async def test_replay_is_idempotent():
    parts = ("UCLASS()\n", "class A", " : public AActor\n{};")
    first, second = TextDocument("// base\n"), TextDocument("// base\n")
    await _patcher(first).apply(_fragments(*parts), Position(1, 0))
    await _patcher(second).apply(_fragments(*parts), Position(1, 0))
    assert first.text == second.text
