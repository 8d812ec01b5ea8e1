"""Generation commands: wire the model client, a patcher and the user surfaces together."""

from __future__ import annotations

import logging

from streamedit.config.loader import EditorSettings
from streamedit.core.cancellation import CancellationToken
from streamedit.core.errors import error_message
from streamedit.core.notify import Notifier, notify_error
from streamedit.editor.append import AppendPatcher, CursorState
from streamedit.editor.document import Range, TextDocument
from streamedit.editor.selection import resolve_selection
from streamedit.editor.whole_file import OverwriteState, WholeFilePatcher
from streamedit.models.prompts import build_insert_prompt
from streamedit.models.streaming import FragmentSource
from streamedit.security import audit
from streamedit.security.credentials import KeyStore

logger = logging.getLogger(__name__)


async def generate(
    document: TextDocument,
    selection: Range | None,
    client: FragmentSource,
    token: CancellationToken,
    *,
    notifier: Notifier | None = None,
    settings: EditorSettings | None = None,
) -> CursorState:
    """Generate code continuing the selection and stream it in after the selection end."""
    selection, selected_text = resolve_selection(document, selection)
    audit.generation_started("insert", len(selected_text))
    patcher = AppendPatcher(document, settings)
    try:
        state = await patcher.apply(
            client.generate(build_insert_prompt(selected_text)), selection.end, token
        )
    except Exception as e:
        audit.generation_failed("insert", e)
        notify_error(notifier, f"Code generation failed: {error_message(e)}")
        logger.exception("generate failed")
        raise
    audit.generation_finished("insert", len(state.written), cancelled=token.cancelled)
    return state


async def replace_file(
    document: TextDocument,
    client: FragmentSource,
    token: CancellationToken,
    *,
    notifier: Notifier | None = None,
) -> OverwriteState:
    """Rewrite the whole document with the model's refactored version of it."""
    original = document.get_text()
    audit.generation_started("replace", len(original))
    patcher = WholeFilePatcher(document, notifier)
    try:
        state = await patcher.apply(client.generate_for_full_file(original), token)
    except Exception as e:
        audit.generation_failed("replace", e)
        logger.exception("replace_file failed")
        raise
    audit.generation_finished("replace", len(state.accumulated), cancelled=token.cancelled)
    return state


def set_api_key(store: KeyStore, key: str, *, notifier: Notifier | None = None) -> None:
    store.store(key)
    audit.api_key_stored(store.path)
    if notifier is not None:
        notifier.info("API key stored")
