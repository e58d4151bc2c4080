"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the catalog happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. db_host -> DB_HOST). Type coercion and validation are built in.

  @model_validator(mode="after"): Resolves the effective database URL once
      all fields are loaded. DATABASE_URL wins; otherwise the URL is assembled
      from the individual DB_* fields.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
auth/, or catalog/.
"""

import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

logger = logging.getLogger("catalog.config")

# Heroku-style URLs use the bare "postgres" scheme, which SQLAlchemy 1.4+
# no longer accepts. Both spellings are pinned to the psycopg2 driver.
_PG_SCHEMES = ("postgres://", "postgresql://")
_PG_DRIVER_SCHEME = "postgresql+psycopg2://"


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
    # Server
    # ------------------------------------------------------------------

    port: int = 8080
    log_level: str = "INFO"
    static_dir: str = "public"

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured" -- the DB_* fields
    # below are used instead.
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "catalogdb"
    db_user: str = "cataloguser"
    db_password: str = "catalogpass"

    # Bounded pool so concurrent requests cannot exhaust the server's
    # max_connections. Ignored for SQLite.
    db_pool_size: int = 5
    db_max_overflow: int = 5

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Resolved by the validator below; never read from the environment.
    database_dsn: str = Field(default="", exclude=True)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def resolve_database_dsn(self) -> "Settings":
        """Pick the connection string the engine will be created with.

        DATABASE_URL takes precedence. A postgres:// or postgresql:// scheme is
        rewritten to postgresql+psycopg2:// so the driver is explicit. Any
        other scheme (sqlite:// in tests) is used as-is.
        """
        if self.database_url:
            url = self.database_url
            for scheme in _PG_SCHEMES:
                if url.startswith(scheme):
                    url = _PG_DRIVER_SCHEME + url[len(scheme) :]
                    break
            self.database_dsn = url
        else:
            self.database_dsn = URL.create(
                "postgresql+psycopg2",
                username=self.db_user,
                password=self.db_password,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            ).render_as_string(hide_password=False)
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
