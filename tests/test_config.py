"""Tests for settings loading, validation and persistence."""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from inlinewrite import config
from inlinewrite.config import (
    API_KEY_ENV_VAR,
    CONFIG_ENV_VAR,
    GeminiSettings,
    Settings,
    SharedStoreSettings,
    load_settings,
    save_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(config, "_settings", None)
    monkeypatch.setattr(config, "_settings_path", config.DEFAULT_CONFIG_PATH)


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        settings = load_settings(str(tmp_path / "absent.yaml"))
        assert settings.gemini.api_key == ""
        assert settings.gemini.model == "gemini-2.0-flash"
        assert settings.gemini.api_version == "v1beta"
        assert settings.shared_store.config_group == "group.com.red.keygem"
        assert settings.shared_store.handoff_group == "group.red.tools"
        assert settings.foreground_sync.interval_seconds == 2.0

    def test_yaml_values(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "gemini": {"api_key": "  abc  ", "model": "gemini-1.5-pro"},
                    "foreground_sync": {"interval_seconds": 5},
                }
            )
        )
        settings = load_settings(str(path))
        assert settings.gemini.api_key == "abc"
        assert settings.gemini.model == "gemini-1.5-pro"
        assert settings.foreground_sync.interval_seconds == 5.0

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_settings(str(path)) == Settings()

    def test_env_key_fills_empty_key(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv(API_KEY_ENV_VAR, " from-env ")
        settings = load_settings(str(tmp_path / "absent.yaml"))
        assert settings.gemini.api_key == "from-env"

    def test_file_key_wins_over_env(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv(API_KEY_ENV_VAR, "from-env")
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"gemini": {"api_key": "from-file"}}))
        assert load_settings(str(path)).gemini.api_key == "from-file"

    def test_env_var_selects_path(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "elsewhere.yaml"
        path.write_text(yaml.safe_dump({"gemini": {"model": "gemini-2.0-flash-lite"}}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_settings().gemini.model == "gemini-2.0-flash-lite"

    def test_get_settings_requires_load(self, tmp_path) -> None:
        with pytest.raises(RuntimeError):
            config.get_settings()
        loaded = load_settings(str(tmp_path / "absent.yaml"))
        assert config.get_settings() is loaded


class TestValidation:
    @pytest.mark.parametrize("group", ["", "a/b", ".", ".."])
    def test_bad_group_ids(self, group: str) -> None:
        with pytest.raises(ValidationError):
            SharedStoreSettings(config_group=group)

    def test_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            GeminiSettings(request_timeout=0)

    def test_non_positive_interval(self) -> None:
        with pytest.raises(ValidationError):
            Settings(foreground_sync={"interval_seconds": -1})


class TestSaveSettings:
    def test_save_then_reload(self, tmp_path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.gemini.api_key = "saved-key"
        settings.gemini.model = "gemini-1.5-pro"

        save_settings(settings, str(path))
        reloaded = config.reload_settings()

        assert reloaded.gemini.api_key == "saved-key"
        assert reloaded.gemini.model == "gemini-1.5-pro"
        assert yaml.safe_load(path.read_text())["gemini"]["api_key"] == "saved-key"
