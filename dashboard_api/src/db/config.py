from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


def _to_async_url(url: str) -> str:
    """
    Normalize a MySQL URL to the aiomysql driver. URLs that already name an
    explicit driver for another backend are returned unchanged.
    """
    if re.match(r"^mysql(\+\w+)?://", url):
        return re.sub(r"^mysql(\+\w+)?://", "mysql+aiomysql://", url)
    return url


def _build_url(user: str, password: str, host: str, port: int, database: str) -> str:
    # URL.create escapes special characters in the password
    url = URL.create(
        "mysql+aiomysql",
        username=user,
        password=password or None,
        host=host,
        port=port,
        database=database,
    )
    return url.render_as_string(hide_password=False)


class Settings(BaseSettings):
    """
    Database settings for the two stores.

    Reads from environment variables (or .env via pydantic-settings):
      - DB_*  the primary store (sociétés, addresses, users, counters)
      - DB2_* the secondary store holding the legal_unit table
    A full DB_URL / DB2_URL wins over the individual parts.
    """

    # Primary store
    DB_URL: Optional[str] = Field(default=None, description="Full primary store URL")
    DB_HOST: str = Field(default="localhost")
    DB_PORT: int = Field(default=3306)
    DB_USER: str = Field(default="root")
    DB_PASSWORD: str = Field(default="")
    DB_NAME: str = Field(default="dashboard")
    DB_POOL_SIZE: int = Field(default=10, ge=1, description="Max pooled connections")

    # Secondary store (legal units)
    DB2_URL: Optional[str] = Field(default=None, description="Full secondary store URL")
    DB2_HOST: str = Field(default="localhost")
    DB2_PORT: int = Field(default=3306)
    DB2_USER: str = Field(default="root")
    DB2_PASSWORD: str = Field(default="")
    DB2_NAME: str = Field(default="legal_unit_db")
    DB2_POOL_SIZE: int = Field(default=5, ge=1)

    # Shared engine options
    DB_POOL_RECYCLE: int = Field(
        default=60, description="Seconds after which an idle connection is recycled"
    )
    DB_CONNECT_TIMEOUT: float = Field(
        default=5.0, description="Seconds allowed for the startup liveness check of each store"
    )
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def primary_url(self) -> str:
        """Async SQLAlchemy URL of the primary store."""
        if self.DB_URL:
            return _to_async_url(self.DB_URL)
        return _build_url(self.DB_USER, self.DB_PASSWORD, self.DB_HOST, self.DB_PORT, self.DB_NAME)

    @property
    def secondary_url(self) -> str:
        """Async SQLAlchemy URL of the legal unit store."""
        if self.DB2_URL:
            return _to_async_url(self.DB2_URL)
        return _build_url(self.DB2_USER, self.DB2_PASSWORD, self.DB2_HOST, self.DB2_PORT, self.DB2_NAME)

    def describe(self) -> dict:
        """Connection targets without secrets, for diagnostics."""
        return {
            "db1": {
                "host": self.DB_HOST,
                "port": self.DB_PORT,
                "database": self.DB_NAME,
                "user": self.DB_USER,
                "passwordSet": bool(self.DB_PASSWORD),
            },
            "db2": {
                "host": self.DB2_HOST,
                "port": self.DB2_PORT,
                "database": self.DB2_NAME,
                "user": self.DB2_USER,
                "passwordSet": bool(self.DB2_PASSWORD),
            },
        }


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a freshly loaded settings object."""
    return Settings()
