"""Application configuration"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Budgetbook"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./budgetbook.db"

    # Calendar
    TIMEZONE: str = "UTC"
    FIRST_WEEKDAY: int = 0  # 0 = Monday ... 6 = Sunday

    # Merchants
    RECENT_TRANSACTIONS_LIMIT: int = 5
    FREQUENT_MERCHANT_VISITS: int = 5
    DEFAULT_MERCHANT_CATEGORY: str = "Other"

    # Transactions
    TRANSACTION_LIST_LIMIT: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()
