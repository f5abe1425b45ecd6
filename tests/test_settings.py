"""Tests for environment-specific settings defaults."""

import pytest

from signaling.settings import Environment, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove logging overrides so environment defaults apply."""
    for name in ("ENV", "LOG_LEVEL", "LOG_CONSOLE_FORMAT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()

    assert settings.ENV == Environment.DEV
    assert settings.HOST == "0.0.0.0"
    assert settings.PORT == 8181
    assert settings.WS_PATH == "/"
    assert settings.is_development


@pytest.mark.parametrize(
    "env, level, console_format",
    [
        ("dev", "DEBUG", "human"),
        ("staging", "INFO", "json"),
        ("production", "WARNING", "json"),
    ],
)
def test_environment_defaults(monkeypatch, env, level, console_format):
    monkeypatch.setenv("ENV", env)

    settings = Settings()

    assert settings.LOG_LEVEL == level
    assert settings.LOG_CONSOLE_FORMAT == console_format


def test_explicit_env_var_wins(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.is_production
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.LOG_CONSOLE_FORMAT == "json"


def test_explicit_keyword_wins():
    settings = Settings(ENV=Environment.STAGING, LOG_CONSOLE_FORMAT="human")

    assert settings.is_staging
    assert settings.LOG_CONSOLE_FORMAT == "human"
    assert settings.LOG_LEVEL == "INFO"


def test_listening_address_from_env(monkeypatch):
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9000")

    settings = Settings()

    assert settings.HOST == "127.0.0.1"
    assert settings.PORT == 9000
