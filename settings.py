from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings for the InventiSync API."""

    ENVIRONMENT: Literal["local", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    PORT: int = 8000

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_NAME: str = "inventisync"

    # Bearer tokens
    ACCESS_TOKEN_SECRET: str = "dev-access-token-secret"
    TOKEN_ALGORITHM: str = "HS256"
    TOKEN_TTL_SECONDS: int = 3600

    # Quotas
    DEFAULT_PRODUCT_LIMIT: int = 3

    # Payments
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"
    PAYMENT_CURRENCY: str = "usd"

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
