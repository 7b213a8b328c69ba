"""Configuration settings for Duet."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./duet.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", secrets.token_urlsafe(32))
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "480"))

    # Gate
    SHARED_PASSWORD: str = os.getenv("SHARED_PASSWORD", "")
    ALLOWED_EMAIL_1: str = os.getenv("ALLOWED_EMAIL_1", "")
    ALLOWED_EMAIL_2: str = os.getenv("ALLOWED_EMAIL_2", "")

    # Object storage
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "storage")
    STORAGE_BUCKET: str = os.getenv("STORAGE_BUCKET", "audio-recordings")
    STORAGE_PREFIX: str = os.getenv("STORAGE_PREFIX", "recordings")
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "25"))
    MAX_CAPTION_LENGTH: int = int(os.getenv("MAX_CAPTION_LENGTH", "100"))

    # Client
    API_URL: str = os.getenv("API_URL", "http://localhost:8000")
    PRESENCE_POLL_SECONDS: float = float(os.getenv("PRESENCE_POLL_SECONDS", "10"))
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @property
    def allowed_emails(self) -> list[str]:
        """Configured allow-list, unset entries dropped."""
        return [e for e in (self.ALLOWED_EMAIL_1, self.ALLOWED_EMAIL_2) if e]

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if not os.getenv("JWT_SECRET_KEY"):
            errors.append("JWT_SECRET_KEY is not set - using auto-generated key (not persistent across restarts)")
        if not self.SHARED_PASSWORD:
            errors.append("SHARED_PASSWORD is not set - nobody can unlock the app")
        if len(self.allowed_emails) < 2:
            errors.append("ALLOWED_EMAIL_1/ALLOWED_EMAIL_2 are not both set - partner presence needs exactly two users")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
