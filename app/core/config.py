"""
Application configuration settings.

Central configuration module using Pydantic BaseSettings with environment variable support.
Loads from .env file and environment variables.
"""
import json
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists (python-dotenv)
env_path = Path(".env")
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


def _parse_list(v):
    """Parse a JSON array or comma-separated string into a list of strings."""
    if isinstance(v, str):
        try:
            return json.loads(v)
        except json.JSONDecodeError:
            return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App settings
    APP_NAME: str = "Safety Audit Tracker"
    APP_ENV: str = Field(default="local", env="APP_ENV")
    DEBUG: bool = Field(default=False, env="DEBUG")

    # Database settings - generic connection string (highest priority)
    DATABASE_URL: Optional[str] = Field(
        default=None,
        env="DATABASE_URL",
        description="Database connection URL",
    )

    # Managed Postgres raw vars (PG*)
    PGUSER: Optional[str] = Field(default=None, env="PGUSER")
    PGPASSWORD: Optional[str] = Field(default=None, env="PGPASSWORD")
    PGHOST: Optional[str] = Field(default=None, env="PGHOST")
    PGPORT: Optional[str] = Field(default=None, env="PGPORT")
    PGDATABASE: Optional[str] = Field(default=None, env="PGDATABASE")

    # Local docker-compose Postgres settings (fallback for local dev)
    POSTGRES_USER: Optional[str] = Field(default=None, env="POSTGRES_USER")
    POSTGRES_PASSWORD: Optional[str] = Field(default=None, env="POSTGRES_PASSWORD")
    POSTGRES_HOST: Optional[str] = Field(default=None, env="POSTGRES_HOST")
    POSTGRES_PORT: str = Field(default="5432", env="POSTGRES_PORT")
    POSTGRES_DB: str = Field(default="safety_audits", env="POSTGRES_DB")

    @property
    def sqlalchemy_database_uri(self) -> str:
        """
        Build SQLAlchemy database URI with priority:
        1. DATABASE_URL
        2. PG* vars
        3. Local docker-compose Postgres (POSTGRES_*)
        4. SQLite (local development without Docker)
        """
        if self.DATABASE_URL:
            # Some hosts hand out postgres:// which SQLAlchemy no longer accepts
            if self.DATABASE_URL.startswith("postgres://"):
                return self.DATABASE_URL.replace("postgres://", "postgresql+psycopg2://", 1)
            return self.DATABASE_URL

        if self.PGUSER and self.PGHOST and self.PGDATABASE:
            password = quote_plus(self.PGPASSWORD or "")
            port = self.PGPORT or "5432"
            return f"postgresql+psycopg2://{self.PGUSER}:{password}@{self.PGHOST}:{port}/{self.PGDATABASE}"

        # Only use if POSTGRES_HOST env var is explicitly set AND credentials are present
        if os.getenv("POSTGRES_HOST") and self.POSTGRES_USER and self.POSTGRES_PASSWORD:
            password = quote_plus(self.POSTGRES_PASSWORD)
            return (
                f"postgresql+psycopg2://"
                f"{self.POSTGRES_USER}:{password}@"
                f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        return "sqlite:///./safety_audits.db"

    # CORS settings
    CORS_ORIGINS: Union[str, List[str]] = Field(
        default='["http://localhost:3000", "http://localhost:5173"]',
        env="CORS_ORIGINS",
    )

    @field_validator("CORS_ORIGINS")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from string or list."""
        return _parse_list(v)

    # Import upload settings
    MAX_UPLOAD_SIZE: int = Field(
        default=5 * 1024 * 1024, env="MAX_UPLOAD_SIZE", description="Max TSV import size in bytes (5MB default)"
    )

    # Listing
    DEFAULT_PAGE_SIZE: int = Field(default=50, env="DEFAULT_PAGE_SIZE")
    MAX_PAGE_SIZE: int = Field(default=500, env="MAX_PAGE_SIZE")

    # Reference data seeded at startup
    SEED_AREAS: Union[str, List[str]] = Field(
        default="[]",
        env="SEED_AREAS",
        description="Area names to make sure exist on startup (JSON array or comma-separated)",
    )

    @field_validator("SEED_AREAS")
    @classmethod
    def parse_seed_areas(cls, v):
        """Parse SEED_AREAS from string or list."""
        return _parse_list(v)

    # Shared password
    DEFAULT_PASSWORD: str = Field(
        default="admin",
        env="DEFAULT_PASSWORD",
        description="Password stored the first time the credential is read",
    )
    PASSWORD_SALT: str = Field(default="safety_audits_salt", env="PASSWORD_SALT")
    PASSWORD_MIN_LENGTH: int = Field(default=4, env="PASSWORD_MIN_LENGTH")
    PASSWORD_REQUIRE_COMPLEXITY: bool = Field(
        default=False,
        env="PASSWORD_REQUIRE_COMPLEXITY",
        description="Also require upper case, lower case, digit and symbol in new passwords",
    )

    # Photo storage (S3-compatible, MinIO client)
    PHOTO_STORAGE_ENDPOINT: str = Field(default="localhost:9000", env="PHOTO_STORAGE_ENDPOINT")
    PHOTO_STORAGE_ACCESS_KEY: str = Field(default="minioadmin", env="PHOTO_STORAGE_ACCESS_KEY")
    PHOTO_STORAGE_SECRET_KEY: str = Field(default="minioadmin", env="PHOTO_STORAGE_SECRET_KEY")
    PHOTO_STORAGE_BUCKET: str = Field(default="audit-photos", env="PHOTO_STORAGE_BUCKET")
    PHOTO_STORAGE_SECURE: bool = Field(default=False, env="PHOTO_STORAGE_SECURE")
    PHOTO_STORAGE_REGION: str = Field(default="us-east-1", env="PHOTO_STORAGE_REGION")
    PHOTO_PUBLIC_BASE_URL: Optional[str] = Field(
        default=None,
        env="PHOTO_PUBLIC_BASE_URL",
        description="Base URL for public photo reads; derived from the endpoint when unset",
    )
    PHOTO_UPLOAD_URL_TTL_SECONDS: int = Field(default=3600, env="PHOTO_UPLOAD_URL_TTL_SECONDS")

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        env="LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @property
    def photo_public_base_url(self) -> str:
        """Public base URL photos are read from, without a trailing slash."""
        if self.PHOTO_PUBLIC_BASE_URL:
            return self.PHOTO_PUBLIC_BASE_URL.rstrip("/")
        scheme = "https" if self.PHOTO_STORAGE_SECURE else "http"
        return f"{scheme}://{self.PHOTO_STORAGE_ENDPOINT}/{self.PHOTO_STORAGE_BUCKET}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

settings = get_settings()
