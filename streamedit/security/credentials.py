"""API key storage. The key lives in a user-only JSON file or the environment, never in config files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from streamedit.core.errors import MissingApiKeyError

logger = logging.getLogger(__name__)

API_KEY_ENV = "DEEPSEEK_API_KEY"
_KEY_FIELD = "deepseek_api_key"


class KeyStore:
    """JSON file with 0600 permissions; ``DEEPSEEK_API_KEY`` takes precedence when set."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("key store unreadable (%s): %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self) -> str | None:
        env = (os.getenv(API_KEY_ENV) or "").strip()
        if env:
            return env
        key = self._read().get(_KEY_FIELD)
        return key.strip() if isinstance(key, str) and key.strip() else None

    def store(self, key: str) -> None:
        key = key.strip()
        if not key:
            raise ValueError("API key must not be empty")
        data = self._read()
        data[_KEY_FIELD] = key
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.chmod(self._path, 0o600)


def require_api_key(store: KeyStore, configured: str = "") -> str:
    """Return the stored or configured key; raise :class:`MissingApiKeyError` when there is none."""
    key = store.get() or configured.strip()
    if not key:
        raise MissingApiKeyError()
    return key
