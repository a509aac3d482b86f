"""Application settings loaded from the environment.

Every setting can be overridden with a ``STOREFRONT_`` prefixed environment
variable (``STOREFRONT_DATABASE_URL``, ``STOREFRONT_ENVIRONMENT`` ...) or a
``.env`` file in the working directory.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    environment: str = "development"
    database_url: str = "sqlite:///./storefront.db"
    database_echo: bool = False
    create_schema_on_startup: bool = True
    cors_origins: list[str] = ["*"]

    # Rotating storefront.log / storefront_error.log are written here when set
    log_dir: Path | None = None

    payment_gateway: Literal["fake", "stripe"] = "fake"
    stripe_api_key: str | None = None
    currency: str = "INR"

    @model_validator(mode="after")
    def stripe_needs_a_key(self) -> "Settings":
        if self.payment_gateway == "stripe" and not self.stripe_api_key:
            raise ValueError("STOREFRONT_STRIPE_API_KEY is required when payment_gateway is 'stripe'")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once."""
    return Settings()
