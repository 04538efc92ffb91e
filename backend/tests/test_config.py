"""
Notes API: Settings Tests
=========================

What:  Defaults and validation of notes_api.config.Settings.
"""

import pytest
from pydantic import ValidationError as SettingsValidationError

from notes_api.config import Settings


def test_defaults(monkeypatch):
    for var in ("DATABASE_URL", "LOG_LEVEL", "BACKEND_HOST", "BACKEND_PORT", "CORS_ORIGINS"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings(_env_file=None)

    assert settings.backend_host == "0.0.0.0"
    assert settings.backend_port == 8081
    assert settings.log_level == "INFO"
    assert settings.database_url == "sqlite+aiosqlite:///./notes.db"
    assert settings.cors_origins_list == ["*"]


def test_log_level_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert Settings(_env_file=None).log_level == "DEBUG"


def test_invalid_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(SettingsValidationError):
        Settings(_env_file=None)


def test_cors_origins_are_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")

    assert Settings(_env_file=None).cors_origins_list == ["http://a.test", "http://b.test"]
