"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "SmartCal"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    app_url: str = Field(default="http://localhost:8000")

    # Database (Turso) for calendar connections
    turso_database_url: str | None = Field(default=None)
    turso_auth_token: str | None = Field(default=None)

    # OpenRouter (OpenAI-compatible endpoint)
    openrouter_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_API_KEY", "OPENAI_API_KEY"),
    )
    openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1")
    openrouter_referer: str = Field(default="https://smartcal.app")
    openrouter_title: str = Field(default="SmartCal")
    preparation_model: str = Field(default="openai/gpt-4-turbo")
    classification_model: str = Field(default="mistralai/mistral-7b-instruct")
    local_events_model: str = Field(default="perplexity/sonar")
    chat_model: str = Field(default="anthropic/claude-3-opus-20240229")

    # Anthropic (low-latency primary for classification)
    anthropic_api_key: str | None = Field(default=None)
    anthropic_model: str = Field(default="claude-haiku-4-5")

    # Google OAuth / Calendar
    google_client_id: str | None = Field(default=None)
    google_client_secret: str | None = Field(default=None)

    # Google Maps / Places, Eventbrite
    google_maps_api_key: str | None = Field(default=None)
    google_places_api_key: str | None = Field(default=None)
    eventbrite_api_key: str | None = Field(default=None)

    default_location: str = Field(default="San Francisco, CA")
    default_time_zone: str = Field(default="UTC")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        """Whether the app runs in production (secure cookies)."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
