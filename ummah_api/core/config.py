"""Application configuration using Pydantic Settings.

This project loads configuration from environment variables.

Optionally, you may point `ENV_FILE` at a local env file (for development).
On Netlify the variables are injected by the platform, so `ENV_FILE` should
stay unset there.
"""

import os
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Query parameters understood by libpq/SQLAlchemy engines but rejected by asyncpg.connect()
_STRIPPED_QUERY_PARAMS = frozenset(
    {
        "sslmode",
        "channel_binding",
        "pool_size",
        "max_overflow",
        "pool_timeout",
        "pool_recycle",
        "pool_pre_ping",
    }
)


def normalize_async_url(url: str) -> str:
    """
    Convert a plain PostgreSQL URL into an asyncpg SQLAlchemy URL.

    - `postgres://` and `postgresql://` (with or without a driver suffix)
      become `postgresql+asyncpg://`
    - libpq-only and engine-only query options are dropped; TLS is configured
      from NODE_ENV instead of `sslmode`

    Args:
        url: Connection string as provided by the environment

    Returns:
        URL usable with `create_async_engine`
    """
    parts = urlsplit(url.strip())
    scheme = parts.scheme
    if scheme in ("postgres", "postgresql") or scheme.startswith("postgresql+"):
        scheme = "postgresql+asyncpg"

    query = [(k, v) for k, v in parse_qsl(parts.query) if k not in _STRIPPED_QUERY_PARAMS]
    return urlunsplit((scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class Settings(BaseSettings):
    """
    Application settings with type validation.

    Every field is optional: a missing connection string is not an error,
    it switches the storage layer into demo mode.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="", extra="ignore"
    )

    # Application
    app_name: str = "ummah-social-api"
    app_log_level: str = "INFO"

    # Deployment mode, named after the variable the Netlify build already sets
    node_env: str = "development"

    # Observability
    observability_enabled: bool = True
    observability_structured_logs: bool = True
    observability_request_id_header: str = "X-Request-ID"

    # Metrics token for protecting /metrics endpoint
    metrics_token: str | None = None

    # Database - checked in this order, first non-empty wins
    database_url: str | None = None
    postgres_url: str | None = None

    # Connection pool
    db_pool_size: int = Field(default=20, ge=1)
    # Maximum connection age; SQLAlchemy pools have no idle timeout
    db_pool_recycle_seconds: int = Field(default=30, ge=1)
    db_connect_timeout_seconds: float = Field(default=2.0, gt=0)

    @field_validator("database_url", "postgres_url", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty or whitespace-only values as unset."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def connection_string(self) -> str | None:
        """The configured connection string, or None when running in demo mode."""
        return self.database_url or self.postgres_url

    @property
    def async_url(self) -> str | None:
        url = self.connection_string
        return normalize_async_url(url) if url else None

    @property
    def is_production(self) -> bool:
        return self.node_env.strip().lower() == "production"


settings = Settings()
