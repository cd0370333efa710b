"""
Application Settings
Load from environment variables
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Storage
    # ======================
    DATABASE_URL: str = "sqlite:///p2p_desk.db"

    # ======================
    # Application
    # ======================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    TIMEZONE: str = "America/Mexico_City"

    # ======================
    # Quota defaults
    # ======================
    DEFAULT_LIMIT_USD: Decimal = Decimal("16300")
    DEFAULT_EXCHANGE_RATE: Decimal = Decimal("20.50")

    # ======================
    # Advisor (Gemini)
    # ======================
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    ADVISOR_TIMEOUT_SECONDS: float = 15.0

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
