# ==================================================================================
# core/config.py — Application configuration (Pydantic v2 settings)
# ==================================================================================
import hashlib
import logging
import sys
from typing import List

from dotenv import load_dotenv
from pydantic import EmailStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Expose .env values (ADMIN_EMAIL, ...) to os.environ as well as to Settings
load_dotenv()


class Settings(BaseSettings):
    # ------------------------
    # DATABASE CONFIG
    # ------------------------
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_POOL_RECYCLE_SECONDS: int = 30
    DB_CONNECT_TIMEOUT_SECONDS: int = 2

    # ------------------------
    # SECURITY CONFIG
    # ------------------------
    SECRET_KEY: str
    REFRESH_SECRET_KEY: str | None = None
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    INVITE_TOKEN_EXPIRE_DAYS: int = 7

    # ------------------------
    # RATE LIMITING
    # ------------------------
    RATE_LIMIT_MAX_REQUESTS: int = 5000
    RATE_LIMIT_WINDOW_SECONDS: int = 300

    # ------------------------
    # SENDGRID EMAIL CONFIG
    # ------------------------
    SENDGRID_API_KEY: str | None = None
    MAIL_FROM: EmailStr | None = None

    # ------------------------
    # FRONTEND CONFIG
    # ------------------------
    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # ------------------------
    # ENVIRONMENT SETTINGS
    # ------------------------
    ENVIRONMENT: str = "development"  # 'development' | 'production'
    DEBUG: bool = True

    @property
    def IS_PRODUCTION(self) -> bool:
        """Convenience helper to check if running in production"""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def REFRESH_KEY(self) -> str:
        """Refresh tokens are signed with their own key so an access token can never be replayed as one."""
        if self.REFRESH_SECRET_KEY:
            return self.REFRESH_SECRET_KEY
        return hashlib.sha256(f"refresh:{self.SECRET_KEY}".encode()).hexdigest()

    # ------------------------
    # Pydantic v2 Settings
    # ------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# ------------------------
# Global Settings Loader
# ------------------------
try:
    settings = Settings()
    logger.info("Environment: %s, Debug: %s", settings.ENVIRONMENT, settings.DEBUG)
except ValidationError as e:
    logger.critical("Environment configuration error, missing or invalid settings:\n%s", e)
    sys.exit(1)
