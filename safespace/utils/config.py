"""
Configuration
Application settings: database location, logging, theme defaults and the
breathing exercise rhythm.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings, overridable through the environment or .env"""

    # Database
    database_url: str = "sqlite:///./safespace.db"

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/safespace.log"

    # Preferences
    default_dark_mode: bool = False

    # Breathing exercise (seconds per phase)
    breathing_seconds: int = 4

    # Application
    app_name: str = "SafeSpace"
    app_version: str = "1.0.0"
    debug: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """
    Return the settings instance.
    lru_cache keeps a single instance for the whole process.
    """
    return Settings()


settings = get_settings()
