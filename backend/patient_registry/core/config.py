"""Application configuration management using Pydantic Settings.

This module provides centralized configuration for the Patient Registry backend,
supporting environment variables and .env files for different deployment environments.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the backend directory (parent of patient_registry/ directory)
BACKEND_DIR = Path(__file__).parent.parent.parent
ENV_FILE = BACKEND_DIR / ".env"

# Load environment variables from .env file
load_dotenv(ENV_FILE)


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    driver: str = Field(default="sqlite+aiosqlite", description="Database driver")
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    user: str = Field(default="registry", description="Database user")
    password: str = Field(default="", description="Database password")
    name: str = Field(
        default="patient_registry.db",
        description="Database name (file path for SQLite drivers)",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    pool_size: int = Field(default=10, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, le=100, description="Max pool overflow")
    create_all: bool = Field(
        default=True, description="Create missing tables on startup (development only)"
    )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured driver targets SQLite."""
        return self.driver.startswith("sqlite")

    @property
    def url(self) -> str:
        """Get database connection URL."""
        if self.is_sqlite:
            return f"{self.driver}:///{self.name}"
        return f"{self.driver}://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class LoggingSettings(BaseSettings):
    """Log output configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Minimum log level name")
    json_format: Optional[bool] = Field(
        default=None, description="JSON lines output; defaults to on in production"
    )
    file: Optional[str] = Field(default=None, description="Optional log file path")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="Patient Registry", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    workers: int = Field(default=4, ge=1, le=32, description="Number of workers")

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(default=True, description="Allow CORS credentials")

    # Seed a handful of demo patients at startup
    enable_demo_data: bool = Field(default=False, description="Seed demo patients on startup")

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings after initialization."""
        if self.environment == "production":
            if self.debug:
                raise ValueError("Debug mode must be disabled in production (DEBUG=false)")
            if self.database.create_all:
                raise ValueError(
                    "Schema bootstrap must be disabled in production (DB_CREATE_ALL=false); "
                    "run alembic migrations instead"
                )

        return self

    @property
    def json_logs(self) -> bool:
        """Whether logs render as JSON lines."""
        if self.logging.json_format is not None:
            return self.logging.json_format
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
