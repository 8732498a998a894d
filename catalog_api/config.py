"""Environment-driven settings via pydantic-settings.

get_settings() is cached, one Settings instance per process. Tests clear the
cache after changing the environment.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_API_KEY = "your-secret-api-key"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Shared secret for mutating routes. The fallback is for local development only.
    api_key: str = DEV_API_KEY

    # Listener
    host: str = "0.0.0.0"
    port: int = 3000

    # "development" exposes stack traces in error responses
    environment: str = Field(default="production", validation_alias=AliasChoices("APP_ENV", "environment"))

    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
