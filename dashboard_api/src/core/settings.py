from __future__ import annotations

import json
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the FastAPI service.

    This is separate from src.db.config.Settings, which focuses on the two database stores.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="Dashboard API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Admin dashboard backend listing client companies (sociétés) with "
            "search, date filtering, sorting, pagination and aggregate statistics."
        )
    )
    APP_VERSION: str = Field(default="1.0.0")

    # CORS
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Comma-separated list or JSON array of allowed origins.",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Tokens
    JWT_SECRET_KEY: str = Field(default="your-secret-key", description="HMAC secret used to sign tokens")
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=24 * 60, ge=1)

    # The single dashboard account
    ADMIN_ID: str = Field(default="1")
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_EMAIL: str = Field(default="admin@example.com")
    ADMIN_PASSWORD: str = Field(default="admin123", description="Hashed once at startup")
    ADMIN_PASSWORD_HASH: Optional[str] = Field(
        default=None,
        description="bcrypt hash of the admin password. Takes precedence over ADMIN_PASSWORD.",
    )

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3001)
    LOG_LEVEL: str = Field(default="INFO")
    SHUTDOWN_GRACE_SECONDS: int = Field(
        default=10, description="Seconds uvicorn waits for in-flight requests on shutdown"
    )

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str) and v.strip().startswith("["):
            return json.loads(v) or ["*"]
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    Note:
      A new instance is built on each call so tests can adjust the environment
      between requests.
    """
    return AppSettings()
