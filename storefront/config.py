"""
Runtime configuration for the storefront service.

Values are read from environment variables prefixed with
``STOREFRONT_`` (for example ``STOREFRONT_BACKEND_URL``) or from a
local ``.env`` file. Only the backend URL usually needs changing; the
other settings have sensible defaults for a single shopper running the
service on their own machine.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CART_FILE = Path.home() / ".salman_books" / "cart.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Salman Books storefront"

    # Base URL of the bookstore backend serving /api/books and /api/orders
    backend_url: str = "http://localhost:8000"
    request_timeout: float = 10.0

    cart_file: Path = DEFAULT_CART_FILE
    tax_rate: Decimal = Decimal("0.07")

    # Number of featured books shown on the home page
    featured_limit: int = 6

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
