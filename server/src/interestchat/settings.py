"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Frontend
    frontend_url: str = "http://localhost:3000"
    cors_origins: list[str] = []

    # Development mode
    dev_mode: bool = False

    # Rate limiting (HTTP API only)
    rate_limiting_enabled: bool = True
    stats_rate_limit: str = "30/minute"

    # Chat
    system_display_name: str = "System"
    max_display_name_length: int = 32
    max_interest_length: int = 64
    max_message_length: int = 2000

    @property
    def allowed_origins(self) -> list[str]:
        """Origins accepted by the CORS middleware."""
        if self.dev_mode:
            return ["http://localhost:3000", "http://127.0.0.1:3000", *self.cors_origins]
        return [self.frontend_url, *self.cors_origins]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
