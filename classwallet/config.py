"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "ClassWallet"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    # The desktop client keeps its data in a local file by default.
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./classwallet.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Teacher session: a full school day of inactivity before expiry
    SESSION_TIMEOUT_HOURS: int = int(os.getenv("SESSION_TIMEOUT_HOURS", "8"))

    # Remote poll server
    ADMIN_SERVER_URL: str = os.getenv("ADMIN_SERVER_URL", "http://localhost:9590")
    POLL_TIMEOUT_SECONDS: float = float(os.getenv("POLL_TIMEOUT_SECONDS", "10"))


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
