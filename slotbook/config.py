import os
from typing import List

import pytz
from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = "INFO"

    # Storage: "firestore" for the real deployment, "memory" for local runs and tests
    STORAGE_BACKEND: str = "memory"

    # Firebase
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_DATABASE_ID: str = "(default)"
    GOOGLE_APPLICATION_CREDENTIALS: str = ""

    # Local reference clock for today/past/upcoming queries
    TIMEZONE: str = "UTC"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]  # In production, specify exact origins

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in ("firestore", "memory"):
            raise ValueError(f"Unknown storage backend: {value}")
        return value

    @field_validator("TIMEZONE")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        # Raises UnknownTimeZoneError early instead of on the first query
        pytz.timezone(value)
        return value

    @property
    def IS_PRODUCTION(self) -> bool:
        """Check if running in production"""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Singleton instance
settings = Settings()
