"""Application configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import DEFAULT_RECOMMENDATION_LIMIT, HISTORY_WINDOW_TURNS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = "strain-sommelier"
    app_env: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # API Settings
    # -------------------------------------------------------------------------
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 4
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    # -------------------------------------------------------------------------
    # Generation Providers
    # -------------------------------------------------------------------------
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    preferred_provider: Literal["anthropic", "openai"] = "anthropic"

    openai_base_url: str = "https://api.openai.com/v1"
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    anthropic_api_version: str = "2023-06-01"

    openai_model_fast: str = "gpt-4o-mini"
    openai_model_standard: str = "gpt-4o"
    openai_model_powerful: str = "gpt-4o"

    anthropic_model_fast: str = "claude-3-5-haiku-20241022"
    anthropic_model_standard: str = "claude-sonnet-4-20250514"
    anthropic_model_powerful: str = "claude-sonnet-4-20250514"

    generation_timeout_seconds: float = 30.0
    history_window_turns: int = Field(default=HISTORY_WINDOW_TURNS, ge=1)

    # -------------------------------------------------------------------------
    # Recommendation Settings
    # -------------------------------------------------------------------------
    default_recommendation_limit: int = Field(default=DEFAULT_RECOMMENDATION_LIMIT, ge=1)

    @property
    def provider_models(self) -> dict[str, dict[str, str]]:
        """Tier to model mapping for every known provider."""
        return {
            "openai": {
                "fast": self.openai_model_fast,
                "standard": self.openai_model_standard,
                "powerful": self.openai_model_powerful,
            },
            "anthropic": {
                "fast": self.anthropic_model_fast,
                "standard": self.anthropic_model_standard,
                "powerful": self.anthropic_model_powerful,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
