"""Configuration settings for Eventreel."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./eventreel.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    RESET_CODE_TTL_MINUTES: int = int(os.getenv("RESET_CODE_TTL_MINUTES", "15"))
    RESET_CODE_LENGTH: int = int(os.getenv("RESET_CODE_LENGTH", "6"))

    # Event limits
    MAX_INVITEES: int = int(os.getenv("MAX_INVITEES", "5"))
    MAX_UPLOADS: int = int(os.getenv("MAX_UPLOADS", "5"))

    # Email (Brevo transactional API)
    BREVO_API_KEY: str = os.getenv("BREVO_API_KEY", "")
    BREVO_URL: str = os.getenv("BREVO_URL", "https://api.brevo.com/v3")
    RESET_EMAIL_TEMPLATE_ID: int = int(os.getenv("RESET_EMAIL_TEMPLATE_ID", "2"))

    # Object storage
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "storage")
    STORAGE_URL: str = os.getenv("STORAGE_URL", "http://localhost:8000/storage")
    INVITEES_BUCKET: str = os.getenv("INVITEES_BUCKET", "invitee-uploads")
    COMPILED_BUCKET: str = os.getenv("COMPILED_BUCKET", "compiled-uploads")
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "1000"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def __init__(self) -> None:
        if not self.JWT_SECRET_KEY:
            self.JWT_SECRET_KEY = secrets.token_urlsafe(32)
            self._generated_secret = True
        else:
            self._generated_secret = False

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self._generated_secret:
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if not self.BREVO_API_KEY:
            errors.append("BREVO_API_KEY is not set - reset emails are only written to the log")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
