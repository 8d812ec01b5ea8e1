from __future__ import annotations

from streamedit.core.errors import EmptySelectionError
from streamedit.editor.document import Range, TextDocument


def resolve_selection(document: TextDocument, selection: Range | None) -> tuple[Range, str]:
    """Return the effective selection and its text.

    An empty or missing selection selects the whole document; otherwise both
    ends are clamped to the document. Raises
    :class:`EmptySelectionError` when the selected text is blank.
    """
    if selection is None or selection.is_empty:
        selection = document.full_range()
    else:
        selection = Range(
            document.validate_position(selection.start), document.validate_position(selection.end)
        )
    text = document.get_text(selection)
    if not text.strip():
        raise EmptySelectionError()
    return selection, text
