"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SKILL_ENGINE_LOG_LEVEL: str = Field(default="info")
    SKILL_ENGINE_LOG_DIR: Path | None = Field(default=None)
    SKILL_ENGINE_LOG_SCHEMA_VERSION: str = Field(default="1.0.0")
    LOG_PSEUDONYM_SECRET: str = Field(default="skill-engine-dev-secret")

    # Dispatcher fallbacks
    FALLBACK_UTTERANCE: str = Field(
        default="Sorry, I didn't understand that. Please try again."
    )
    FALLBACK_ENDS_SESSION: bool = Field(default=False)
    APOLOGY_UTTERANCE: str = Field(
        default="Sorry, something went wrong. Please try again later."
    )

    # Transport request types that are not intents map onto these names.
    LAUNCH_INTENT_NAME: str = Field(default="LaunchIntent")
    SESSION_ENDED_INTENT_NAME: str = Field(default="SessionEndedRequest")

    # Content fetch collaborator
    CONTENT_BASE_URL: str | None = Field(default=None)
    CONTENT_TIMEOUT_SECONDS: float = Field(default=5.0)
    CONTENT_USER_AGENT: str = Field(default="skill-engine/0.1")
    # Intent name -> remote content key, e.g. CONTENT_INTENTS='{"DailyTipIntent": "daily-tip"}'
    CONTENT_INTENTS: dict[str, str] = Field(default_factory=dict)


settings = Settings()
config = settings  # Alias for backward compatibility


__all__ = ["Settings", "settings", "config"]
