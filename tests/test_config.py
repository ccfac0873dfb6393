"""Tests for configuration module."""

from __future__ import annotations

from fit14.config import DEFAULT_AI_ENDPOINT, Settings, _ENV_PROFILES, get_database_url, get_settings


def test_settings_dataclass():
    s = Settings(database_url="sqlite:///test.db")
    assert s.database_url == "sqlite:///test.db"
    assert s.app_env == "dev"
    assert s.ai_endpoint == DEFAULT_AI_ENDPOINT
    assert s.request_timeout_sec == 45.0
    assert s.plan_length_days == 14


def test_settings_frozen():
    s = Settings(database_url="x")
    try:
        s.database_url = "y"
        assert False, "Should raise"
    except AttributeError:
        pass


def test_settings_is_production():
    s = Settings(app_env="production")
    assert s.is_production is True
    assert s.is_dev is False


def test_settings_has_api_key():
    assert Settings().has_api_key is False
    assert Settings(ai_api_key="   ").has_api_key is False
    assert Settings(ai_api_key="sk-test").has_api_key is True


def test_get_database_url_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://from-env/db")
    assert get_database_url() == "postgresql://from-env/db"


def test_get_database_url_default(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert get_database_url().startswith("sqlite:///")


def test_get_settings_uses_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("FIT14_AI_API_KEY", "sk-live")
    monkeypatch.setenv("FIT14_AI_ENDPOINT", "https://example.test/generate")
    monkeypatch.setenv("FIT14_REQUEST_TIMEOUT", "12.5")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    s = get_settings()
    assert s.app_env == "production"
    assert s.ai_api_key == "sk-live"
    assert s.ai_endpoint == "https://example.test/generate"
    assert s.request_timeout_sec == 12.5
    assert s.log_level == "WARNING"


def test_get_settings_unknown_env_uses_dev_profile(monkeypatch):
    monkeypatch.setenv("APP_ENV", "qa")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("FIT14_REQUEST_TIMEOUT", raising=False)
    s = get_settings()
    assert s.log_level == "DEBUG"
    assert s.request_timeout_sec == 60.0


def test_env_profiles_exist():
    assert set(_ENV_PROFILES) == {"dev", "staging", "production"}
