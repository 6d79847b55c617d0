# backend/skillswap/core/config.py
import logging
import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


_DEFAULT_SECRET_KEY = SecretStr("dev-only-skillswap-secret-change-me")

ENVIRONMENT_ALIASES = {
    "dev": "development",
    "local": "development",
    "stg": "staging",
    "stage": "staging",
    "prod": "production",
    "live": "production",
}


class Settings(BaseSettings):
    environment: Literal["development", "testing", "staging", "production"] = "development"
    log_level: str = Field(default="INFO", description="Root log level for the API process")

    # Database
    database_url: str = Field(
        default="sqlite:///./skillswap.db",
        description="SQLAlchemy URL for the primary database",
    )
    test_database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="SQLAlchemy URL used by the test-suite",
    )
    database_echo: bool = False

    # Auth (tokens are issued elsewhere; we only verify them)
    jwt_secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Shared secret for HS256 access tokens",
    )
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    # Distributed locks; empty URL disables the Redis mutex
    redis_url: str = Field(default="", description="Redis URL for booking/rating mutexes")
    lock_namespace: str = "skillswap"
    lock_ttl_seconds: int = 30

    # Session policy
    max_session_hours: int = Field(default=4, description="Longest bookable session")
    cancellation_notice_hours: int = Field(
        default=24,
        description="Below this notice only the teacher may cancel",
    )

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Comma-separated browser origins allowed by CORS
    cors_allowed_origins: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: Any) -> Any:
        if isinstance(value, str):
            normalized = value.strip().lower()
            return ENVIRONMENT_ALIASES.get(normalized, normalized)
        return value

    @field_validator("max_session_hours", "cancellation_notice_hours", "lock_ttl_seconds")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    @property
    def redis_enabled(self) -> bool:
        return bool(self.redis_url.strip())

    def get_database_url(self) -> str:
        """Resolve the database URL, switching to the test database under pytest."""
        if self.environment == "testing" or is_running_tests():
            return self.test_database_url
        return self.database_url


settings = Settings()

if settings.is_production and settings.jwt_secret_key == _DEFAULT_SECRET_KEY:
    logger.warning("JWT secret is the development default; set JWT_SECRET_KEY in production")
