"""Entry point for streamedit: stream model output into a file from the command line.

Usage:
  streamedit set-key                       # prompts for the DeepSeek API key
  streamedit generate src/Actor.cpp --line 10 --column 0 --end-line 20 --end-column 0
  streamedit refactor src/Actor.cpp

Ctrl+C cancels cooperatively: the fragment in flight is written, a
cancellation marker is added (generate) and the file is saved as is.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import signal
import sys
from contextlib import suppress
from pathlib import Path
from typing import Sequence

from streamedit import commands
from streamedit.config import Config, get_config
from streamedit.core.cancellation import CancellationToken
from streamedit.core.errors import EmptySelectionError, MissingApiKeyError
from streamedit.core.logging_config import setup_logging
from streamedit.core.notify import LoggingNotifier
from streamedit.editor.document import Position, Range, TextDocument
from streamedit.models.deepseek import DeepSeekClient
from streamedit.security.credentials import KeyStore, require_api_key

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="streamedit", description=__doc__.splitlines()[0])
    parser.add_argument("--config", help="YAML config merged over the defaults")
    sub = parser.add_subparsers(dest="command", required=True)

    set_key = sub.add_parser("set-key", help="store the DeepSeek API key")
    set_key.add_argument("--key", help="API key (prompted for when omitted)")

    gen = sub.add_parser("generate", help="append generated code after a selection")
    gen.add_argument("file")
    gen.add_argument("--line", type=int, default=0, help="selection start line (0-based)")
    gen.add_argument("--column", type=int, default=0)
    gen.add_argument("--end-line", type=int, help="selection end line; whole file when omitted")
    gen.add_argument("--end-column", type=int, default=0)

    refactor = sub.add_parser("refactor", help="rewrite the whole file in place")
    refactor.add_argument("file")
    return parser


def _selection(args: argparse.Namespace) -> Range | None:
    if args.end_line is None:
        return None
    return Range(Position(args.line, args.column), Position(args.end_line, args.end_column))


def _bind_interrupt(token: CancellationToken) -> None:
    loop = asyncio.get_running_loop()
    # add_signal_handler is unavailable on Windows event loops
    with suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, token.cancel, "interrupted")


async def run_document_command(args: argparse.Namespace, config: Config) -> int:
    notifier = LoggingNotifier()
    path = Path(args.file)
    if not path.is_file():
        notifier.error(f"File not found: {path}")
        return EXIT_FAILED
    store = KeyStore(config.credentials.path)
    try:
        api_key = require_api_key(store, config.model.api_key)
    except MissingApiKeyError as e:
        notifier.error(str(e))
        return EXIT_FAILED
    client = DeepSeekClient.from_settings(api_key, config.model, config.retry)
    document = TextDocument.load(path)
    original = document.text
    token = CancellationToken()
    _bind_interrupt(token)
    try:
        if args.command == "generate":
            await commands.generate(
                document,
                _selection(args),
                client,
                token,
                notifier=notifier,
                settings=config.editor,
            )
        else:
            await commands.replace_file(document, client, token, notifier=notifier)
    except EmptySelectionError as e:
        notifier.error(str(e))
        return EXIT_FAILED
    except Exception:
        # already logged and reported by the command
        return EXIT_FAILED
    finally:
        if document.text != original:
            document.save()
    if token.cancelled:
        notifier.warning(f"generation cancelled ({token.reason or 'no reason given'})")
        return EXIT_CANCELLED
    notifier.info(f"updated {document.path}")
    return EXIT_OK


def run_set_key(args: argparse.Namespace, config: Config) -> int:
    key = args.key or getpass.getpass("DeepSeek API key: ")
    try:
        commands.set_api_key(KeyStore(config.credentials.path), key, notifier=LoggingNotifier())
    except ValueError as e:
        logger.error("%s", e)
        return EXIT_FAILED
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config(args.config)
    setup_logging(config.logging.level, use_json=config.logging.json_format)
    if args.command == "set-key":
        return run_set_key(args, config)
    return asyncio.run(run_document_command(args, config))


if __name__ == "__main__":
    sys.exit(main())
