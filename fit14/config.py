"""Application configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_AI_ENDPOINT = "https://api.fit14.app/v1/workout-plans/generate"
DEFAULT_DATABASE_URL = "sqlite:///fit14.db"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    database_url: str = DEFAULT_DATABASE_URL
    app_env: str = "dev"
    log_level: str = "INFO"

    # AI generation service
    ai_endpoint: str = DEFAULT_AI_ENDPOINT
    ai_api_key: str = ""
    request_timeout_sec: float = 45.0

    # Challenge shape
    plan_length_days: int = 14
    max_catch_up_per_day: int = 2

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def has_api_key(self) -> bool:
        return bool(self.ai_api_key.strip())


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "request_timeout_sec": 60.0,
    },
    "staging": {
        "log_level": "INFO",
        "request_timeout_sec": 45.0,
    },
    "production": {
        "log_level": "WARNING",
        "request_timeout_sec": 45.0,
    },
}


def get_database_url() -> str:
    """Resolve database URL from env var or the local SQLite default."""
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        database_url=get_database_url(),
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        ai_endpoint=os.getenv("FIT14_AI_ENDPOINT", DEFAULT_AI_ENDPOINT),
        ai_api_key=os.getenv("FIT14_AI_API_KEY", ""),
        request_timeout_sec=float(
            os.getenv("FIT14_REQUEST_TIMEOUT", str(profile.get("request_timeout_sec", 45.0)))
        ),
        plan_length_days=int(os.getenv("FIT14_PLAN_LENGTH_DAYS", "14")),
        max_catch_up_per_day=int(os.getenv("FIT14_MAX_CATCH_UP_PER_DAY", "2")),
    )
