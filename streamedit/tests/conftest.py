"""Pytest fixtures and config."""

import pytest


@pytest.fixture(autouse=True)
def env_cleanup(monkeypatch, tmp_path):
    """Never pick up a real API key, key store or env-specific config in tests."""
    for name in ("DEEPSEEK_API_KEY", "DEEPSEEK_BASE_URL", "STREAMEDIT_ENV_PREFIX", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield
