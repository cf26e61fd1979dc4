"""Configuration settings for the bot webhook"""
import os
from pydantic_settings import BaseSettings, SettingsConfigDict


def detect_environment() -> str:
    """
    Detect current environment from the service name or env var.
    Returns: 'dev', 'staging', or 'prod'
    """
    # First check explicit ENVIRONMENT variable
    explicit_env = os.getenv("ENVIRONMENT", "").lower()
    if explicit_env in ("dev", "staging", "prod", "production", "development"):
        if explicit_env == "production":
            return "prod"
        if explicit_env == "development":
            return "dev"
        return explicit_env

    # Detect from Cloud Run service name
    service_name = os.getenv("K_SERVICE", "")
    if "dev" in service_name.lower():
        return "dev"
    elif "staging" in service_name.lower():
        return "staging"
    elif service_name:  # Has a service name but not dev/staging = production
        return "prod"

    # Local development
    return "dev"


class Settings(BaseSettings):
    """Application settings using Pydantic for validation and environment variable loading"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Webhook configuration
    WEBHOOK_PREFIX: str = "/api/bot"
    RESPONSE_VERSION: str = "2.0"
    # Return the unbuilt handler result instead of the response envelope
    EXPOSE_RAW_RESULT: bool = False

    # Rule engine
    RULE_CACHE_SIZE: int = 256

    # Application settings
    ENVIRONMENT: str = detect_environment()
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "dev"


# Global settings instance
settings = Settings()
