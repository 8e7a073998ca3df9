"""Configuration loader — reads config.yaml, validates with Pydantic.

Process-local settings only: the API key and model for the remote call,
where the shared namespaces live, and the foreground sync period. The
custom instruction is not here; it lives in the shared store.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "INLINEWRITE_CONFIG"
API_KEY_ENV_VAR = "GEMINI_API_KEY"
DEFAULT_CONFIG_PATH = "config.yaml"


class GeminiModel(str, Enum):
    """Models selectable from the settings screen."""

    FLASH = "gemini-2.0-flash"
    FLASH_LITE = "gemini-2.0-flash-lite"
    PRO = "gemini-1.5-pro"


class GeminiSettings(BaseModel):
    """Remote generative-text endpoint."""

    api_key: str = ""
    model: str = GeminiModel.FLASH.value
    base_url: str = "https://generativelanguage.googleapis.com"
    api_version: str = "v1beta"
    request_timeout: float = 60.0

    @field_validator("api_key")
    @classmethod
    def strip_key(cls, v: str) -> str:
        return v.strip()

    @field_validator("request_timeout")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v


class SharedStoreSettings(BaseModel):
    """Where the cross-process namespaces live."""

    root: str = "~/.local/share/inlinewrite/groups"
    config_group: str = "group.com.red.keygem"
    handoff_group: str = "group.red.tools"

    @field_validator("config_group", "handoff_group")
    @classmethod
    def plain_group_id(cls, v: str) -> str:
        if not v or "/" in v or v in (".", ".."):
            raise ValueError(f"Invalid group id '{v}'")
        return v


class ForegroundSyncSettings(BaseModel):
    interval_seconds: float = 2.0

    @field_validator("interval_seconds")
    @classmethod
    def positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("interval_seconds must be positive")
        return v


class Settings(BaseModel):
    """Top-level settings."""

    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    shared_store: SharedStoreSettings = Field(default_factory=SharedStoreSettings)
    foreground_sync: ForegroundSyncSettings = Field(default_factory=ForegroundSyncSettings)


# ---------------------------------------------------------------------------
# Module-level settings cache
# ---------------------------------------------------------------------------

_settings: Settings | None = None
_settings_path: str = DEFAULT_CONFIG_PATH


def resolve_config_path(path: str | None = None) -> str:
    return path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def load_settings(path: str | None = None) -> Settings:
    """Read settings from disk, validate, and cache.

    A missing file yields defaults. An empty API key falls back to the
    GEMINI_API_KEY environment variable.
    """
    global _settings, _settings_path
    _settings_path = resolve_config_path(path)

    config_file = Path(_settings_path)
    if config_file.exists():
        raw = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
        settings = Settings(**raw)
    else:
        logger.info(f"No config file at {config_file.resolve()}, using defaults")
        settings = Settings()

    if not settings.gemini.api_key:
        env_key = os.environ.get(API_KEY_ENV_VAR, "").strip()
        if env_key:
            settings.gemini.api_key = env_key
        else:
            logger.warning("Gemini API key is not configured.")

    _settings = settings
    logger.info(
        f"Loaded settings: model={settings.gemini.model}, "
        f"config_group={settings.shared_store.config_group}, "
        f"handoff_group={settings.shared_store.handoff_group}"
    )
    return _settings


def get_settings() -> Settings:
    """Return cached settings. Raises if not yet loaded."""
    if _settings is None:
        raise RuntimeError("Settings not loaded — call load_settings() first")
    return _settings


def reload_settings() -> Settings:
    logger.info(f"Reloading settings from {_settings_path}")
    return load_settings(_settings_path)


def save_settings(settings: Settings, path: str | None = None) -> Path:
    """Write settings back to YAML and refresh the cache."""
    global _settings, _settings_path
    if path is not None:
        _settings_path = path
    config_file = Path(_settings_path)
    if config_file.parent and not config_file.parent.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(
        yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=False),
        encoding="utf-8",
    )
    _settings = settings
    logger.info(f"Saved settings to {config_file}")
    return config_file
