"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the E-Library API happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. db_host -> DB_HOST). The signing secret also answers to JWT_SECRET,
      the name existing deployments already export.

  @model_validator(mode="after"): dev mode (DEBUG=true) generates a signing
      key with a warning, production mode refuses to start without one.

Security notes:
  SECRET_KEY shorter than 32 chars is rejected outright. JWT signing relies
  on key entropy -- a short key weakens every issued token.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or catalog/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

logger = logging.getLogger("elibrary.config")

_DEFAULT_SQLITE_PATH = Path(__file__).resolve().parent.parent / "e_library.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces
    the signing-secret policy at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". The model_validator
    # below either generates a dev key or raises, so callers never see "".
    secret_key: str = Field(default="", validation_alias=AliasChoices("JWT_SECRET", "SECRET_KEY", "secret_key"))

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 5000
    cors_origins: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Database
    #
    # database_url wins when set. Otherwise a MySQL URL is assembled from
    # the discrete DB_* fields when DB_HOST is present, and a local SQLite
    # file is used as the last resort.
    # ------------------------------------------------------------------

    database_url: str = ""
    db_driver: str = "mysql+pymysql"
    db_host: str = ""
    db_port: int | None = None
    db_user: str = ""
    db_password: str = ""
    db_name: str = "e_library_db"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Session tokens live for one hour and are never renewed server-side.
    token_expire_seconds: int = 3600
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    login_rate_limit: str = "10/minute"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the signing-secret policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Tokens will not survive restart -- acceptable for local dev.

        Production mode (DEBUG=false or not set): refuse to start if the
            secret is missing. Without it no token can be issued or verified.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("WARNING: Using auto-generated JWT secret. Tokens will not persist across restarts.")
            else:
                raise ValueError(
                    "JWT_SECRET is required in production mode. "
                    "Set JWT_SECRET in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        return self

    def resolved_database_url(self) -> str:
        """Return the SQLAlchemy URL the application should connect to."""
        if self.database_url:
            return self.database_url
        if self.db_host:
            return URL.create(
                self.db_driver,
                username=self.db_user or None,
                password=self.db_password or None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            ).render_as_string(hide_password=False)
        return f"sqlite:///{_DEFAULT_SQLITE_PATH}"


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
