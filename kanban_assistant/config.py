"""Application configuration"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    app_name: str = "Kanban Board Assistant"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Database
    database_path: str = "/app/data/db/kanban.json"

    # Security
    secret_key: str = "dev-secret-change-me"
    access_token_expire_minutes: int = 60 * 24  # 24 hours

    # Completion service (any OpenAI-compatible chat completions endpoint)
    completion_base_url: str = "https://api.groq.com/openai/v1"
    completion_api_key: Optional[str] = None
    completion_model: str = "llama-3.3-70b-versatile"
    completion_temperature: float = 0.3
    completion_max_tokens: int = 1000
    completion_timeout: float = 60.0

    @property
    def cors_origins_list(self) -> List[str]:
        """Return the configured CORS origins as a sanitized list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def validate_production_settings(settings: Settings) -> list:
    """Validate that the settings required outside development are configured"""
    errors = []

    if settings.secret_key == "dev-secret-change-me":
        errors.append("SECRET_KEY must be changed from default value")

    if not settings.completion_api_key:
        errors.append("COMPLETION_API_KEY is required for the chat assistant")

    return errors


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    base_settings = Settings()

    if not base_settings.debug:
        for error in validate_production_settings(base_settings):
            logger.warning(f"Production config warning: {error}")

    return base_settings


# Convenience access
settings = get_settings()
