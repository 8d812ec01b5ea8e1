"""Load configuration from YAML and environment variables. No hardcoded secrets."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default config lives next to this module
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


class ModelSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MODEL_", extra="ignore", populate_by_name=True)
    base_url: str = "https://api.deepseek.com/v1"
    name: str = "deepseek-chat"
    temperature: float = 0.3
    timeout_seconds: float = 120.0
    api_key: str = Field(default="", alias="DEEPSEEK_API_KEY")


class RetrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RETRY_", extra="ignore")
    max_attempts: int = 3
    base_delay_seconds: float = 1.0


class EditorSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EDITOR_", extra="ignore")
    comment_prefix: str = "//"
    header: str = "AI generated code - {timestamp}"
    cancelled_marker: str = "Generation cancelled"
    error_marker: str = "Generation error: {message}"
    normalize_line_endings: bool = True


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")
    level: str = "INFO"
    json_format: bool = True


class CredentialSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CREDENTIALS_", extra="ignore")
    path: str = "~/.config/streamedit/credentials.json"


class Config(BaseSettings):
    """Application config: YAML + env. Secrets from env or the key store only."""

    model_config = SettingsConfigDict(env_nested_delimiter="__", extra="ignore")

    model: ModelSettings = Field(default_factory=ModelSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    editor: EditorSettings = Field(default_factory=EditorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "Config":
        yaml_data = _load_yaml(_DEFAULT_CONFIG_PATH)
        if config_path:
            yaml_data = _deep_merge(yaml_data, _load_yaml(Path(config_path)))
        env_prefix = os.getenv("STREAMEDIT_ENV_PREFIX", "")
        if env_prefix:
            yaml_data = _deep_merge(yaml_data, _load_yaml(Path(f"config/{env_prefix}.yaml")))
        api_key = os.getenv("DEEPSEEK_API_KEY")
        if api_key:
            yaml_data.setdefault("model", {})["api_key"] = api_key
        base_url = os.getenv("DEEPSEEK_BASE_URL")
        if base_url:
            yaml_data.setdefault("model", {})["base_url"] = base_url
        level = os.getenv("LOG_LEVEL")
        if level:
            yaml_data.setdefault("logging", {})["level"] = level
        return cls(**yaml_data)


def get_config(config_path: str | Path | None = None) -> Config:
    return Config.load(config_path)
