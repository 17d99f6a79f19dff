"""Application settings using environment variables."""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the FastAPI backend."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "userapp"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_CHARSET: str = "utf8mb4"
    DATABASE_URL: Optional[str] = Field(None, description="Full SQLAlchemy URL, overrides the DB_* fields")

    RESEND_API_KEY: Optional[str] = None
    RESEND_FROM_EMAIL: str = "UserApp <onboarding@resend.dev>"
    EMAIL_SUBJECT: str = "Your access code - UserApp"

    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    MAX_UPLOAD_BYTES: int = 10 << 20

    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"
    CODE_ISSUE_ATTEMPTS: int = Field(3, ge=1)
    LOG_LEVEL: str = "INFO"

    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy URL, defaulting to MySQL through the pymysql driver."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?charset={self.DB_CHARSET}"
        )

    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def email_configured(self) -> bool:
        return bool(self.RESEND_API_KEY)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance to avoid re-parsing env."""
    return Settings()
