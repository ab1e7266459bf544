from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Optional env vars (.env):
      - DATABASE_URL (defaults to a local SQLite file)
      - LOG_LEVEL

    Pricing and dashboard defaults mirror the storefront front-end:
    5% GST, free delivery above 500, 40 otherwise.
    """

    PROJECT_NAME: str = "FreshCart Storefront API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str = "sqlite:///./storefront.db"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5500",
        "http://127.0.0.1:5500",
    ]

    # Cart pricing
    CURRENCY_SYMBOL: str = "₹"
    TAX_RATE: float = 0.05
    DELIVERY_FEE: float = 40.0
    FREE_DELIVERY_THRESHOLD: float = 500.0

    # Dashboard defaults
    NEW_CUSTOMER_WINDOW_DAYS: int = 30
    RECENT_ORDERS_LIMIT: int = 10
    TOP_PRODUCTS_LIMIT: int = 5
    SALES_SERIES_DAYS: int = 30
    REPORT_TOP_PRODUCTS_LIMIT: int = 10

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
