from streamedit.editor.append import AppendPatcher, CursorState, advance_cursor
from streamedit.editor.document import Document, Position, Range, TextDocument
from streamedit.editor.whole_file import Mutation, OverwriteState, WholeFilePatcher, next_state

__all__ = [
    "AppendPatcher",
    "CursorState",
    "Document",
    "Mutation",
    "OverwriteState",
    "Position",
    "Range",
    "TextDocument",
    "WholeFilePatcher",
    "advance_cursor",
    "next_state",
]
