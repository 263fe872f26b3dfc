"""
Configuration settings for the Vibe Engine
"""
import os
import logging
from typing import Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

# Configure basic logger for config module
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings"""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Remote provider (AIMLAPI, OpenAI-compatible chat completions)
    # An empty key switches generation to local scaffolding only
    AIMLAPI_KEY: str = os.getenv("AIMLAPI_KEY", "")
    AIMLAPI_BASE_URL: str = os.getenv("AIMLAPI_BASE_URL", "https://api.aimlapi.com/v1")
    AIMLAPI_CHAT_PATH: str = "/chat/completions"
    PROVIDER_NAME: str = "AIMLAPI"

    # Generation Settings
    DEFAULT_MODEL: str = os.getenv("DEFAULT_MODEL", "gpt-4")
    MAX_TOKENS: int = 8000
    TEMPERATURE: float = 0.7
    CONTEXT_WINDOW: int = 3  # Prior exchanges forwarded to the model
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "180"))

    # Usage tracking (advisory only, never enforced)
    USAGE_LIMIT: int = 100

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    GENERATE_RATE_LIMIT: str = os.getenv("GENERATE_RATE_LIMIT", "10/minute")

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "development")
    SENTRY_TRACES_SAMPLE_RATE: float = float(
        os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")
    )

    # CORS - comma-separated list of allowed origins
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def chat_completions_url(self) -> str:
        return f"{self.AIMLAPI_BASE_URL.rstrip('/')}{self.AIMLAPI_CHAT_PATH}"


# Global settings instance
settings = Settings()


def validate_required_config():
    """Validate configuration on startup.

    A missing provider key is not an error: generation falls back to
    local template scaffolding.
    """
    warnings = []

    if not settings.AIMLAPI_KEY:
        warnings.append("AIMLAPI_KEY not configured, running in degraded mode (template scaffolding only)")

    if settings.ENVIRONMENT == "production" and "*" in settings.CORS_ORIGINS:
        warnings.append("Wildcard CORS origin configured in production")

    for warning in warnings:
        logger.warning(f"Configuration warning: {warning}")

    return len(warnings) == 0
