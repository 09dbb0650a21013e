"""Library configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Parser settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PANTRYPARSE_",
        extra="ignore",
    )

    # Parsing
    default_locale: str = "en"

    # Remote classification service (optional)
    classifier_base_url: str = "http://localhost:8080/api/v1"
    classifier_api_key: str = ""
    classifier_timeout: float = 10.0  # request timeout in seconds
    classifier_max_retries: int = 3

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def classify_url(self) -> str:
        """Get the batch classification endpoint."""
        return f"{self.classifier_base_url.rstrip('/')}/classify"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
