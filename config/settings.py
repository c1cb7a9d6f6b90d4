"""Application settings using Pydantic Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Remote service
    api_base_url: str = "http://localhost:8000"
    api_token: str = ""
    default_api_token: str = "demo-token"
    request_timeout: float = 10.0

    # Persistence
    storage_backend: str = "memory"  # memory or redis
    storage_key: str = "gymbuddy-app"
    redis_url: str = "redis://localhost:6379/0"

    # Application Configuration
    app_name: str = "GymBuddy"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"

    # Rest timer tick length in seconds
    rest_timer_tick: float = 1.0

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def auth_token(self) -> str:
        """Bearer token, falling back to the placeholder when unset."""
        return self.api_token or self.default_api_token


# Global settings instance
settings = Settings()
