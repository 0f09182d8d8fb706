"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for Stockroom happen here. No module should
call os.getenv() or os.environ.get() directly -- the Settings instance is
built once at startup and passed into each component's constructor.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. Only the
      application entry points (api/main.py lifespan, main.py) call it; the
      auth and items components receive the object explicitly.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

Security notes:
  SECRET_KEY absent: falls back to DEV_SECRET_KEY, a fixed placeholder. Tokens
       signed with it are forgeable by anyone who has read this file, so a
       warning is logged at startup. Never run production on the placeholder.

  SECRET_KEY present but shorter than 32 chars is rejected outright. HS256
       signing relies on key entropy -- a short key weakens every token.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or items/.
"""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("stockroom.config")

# Development-only signing key. Public by definition.
DEV_SECRET_KEY = "stockroom-dev-placeholder-secret-do-not-use-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite:///./stockroom.db"

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"  # nosec B104 -- container deployments bind all interfaces
    port: int = 8080
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://127.0.0.1",
    ]

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured"; the validator below
    # swaps in DEV_SECRET_KEY so callers never see "".
    secret_key: str = ""
    bcrypt_rounds: int = 10
    login_rate_limit: str = "10/minute"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        """Rewrite Heroku/Azure style postgres:// URLs for SQLAlchemy.

        SQLAlchemy 1.4+ only registers the postgresql:// dialect name.
        """
        value = value.strip()
        if value.startswith("postgres://"):
            return "postgresql://" + value[len("postgres://") :]
        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        return value

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Apply the SECRET_KEY policy.

        Missing key: use DEV_SECRET_KEY and warn. Explicit key: must be at
        least 32 characters.
        """
        self.secret_key = self.secret_key.strip()
        if not self.secret_key:
            self.secret_key = DEV_SECRET_KEY
            logger.warning("WARNING: SECRET_KEY is not set. Using the development placeholder key.")
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self

    @property
    def uses_dev_secret(self) -> bool:
        return self.secret_key == DEV_SECRET_KEY


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables, or build Settings(...)
    directly and hand it to the components.
    """
    return Settings()
