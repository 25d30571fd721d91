"""
Database connection provisioning.

Inspects the configured connection string once at startup. When present, an
async SQLAlchemy engine (asyncpg driver) is created and wrapped in the query
client used by the storage layer. When absent, nothing is created and the
storage layer runs in demo mode.

There is no retry or reconnection logic here: creating the engine does not
open a connection, and query failures are handled per call by the storage
layer.
"""

import logging
import ssl
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ummah_api.core.config import Settings
from ummah_api.repos.client import QueryClient, SqlAlchemyQueryClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatabaseConnection:
    """Outputs of the provisioner, handed to the storage layer."""

    engine: AsyncEngine | None
    client: QueryClient | None

    @property
    def has_connection(self) -> bool:
        return self.client is not None


def _ssl_context(settings: Settings) -> ssl.SSLContext | bool:
    """
    Build the TLS argument for asyncpg.

    Production deployments talk to managed Postgres over TLS but do not
    verify the server certificate; other environments connect in plain text.
    """
    if not settings.is_production:
        return False

    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def create_engine_for(settings: Settings) -> AsyncEngine:
    """
    Create the pooled async engine for the configured database.

    Pool configuration:
    - bounded pool (`db_pool_size`) with no overflow
    - connections recycled once older than `db_pool_recycle_seconds`
    - `db_connect_timeout_seconds` passed to asyncpg as the connect timeout

    Returns:
        Configured async SQLAlchemy engine
    """
    url = settings.async_url
    if not url:
        raise RuntimeError("DATABASE_URL or POSTGRES_URL is required")

    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_recycle=settings.db_pool_recycle_seconds,
        pool_pre_ping=True,
        echo=False,
        connect_args={
            "ssl": _ssl_context(settings),
            "timeout": settings.db_connect_timeout_seconds,
            "server_settings": {"timezone": "UTC"},
        },
    )


def provision_database(settings: Settings) -> DatabaseConnection:
    """
    Provision the database connection for this process.

    Args:
        settings: Application settings

    Returns:
        DatabaseConnection; `has_connection` is False when no connection
        string is configured
    """
    if not settings.connection_string:
        logger.warning("Running in demo mode - no DATABASE_URL or POSTGRES_URL found")
        return DatabaseConnection(engine=None, client=None)

    logger.info("PostgreSQL connecting", extra={"tls": settings.is_production})
    engine = create_engine_for(settings)
    sessionmaker = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    return DatabaseConnection(engine=engine, client=SqlAlchemyQueryClient(sessionmaker))


async def dispose_database(connection: DatabaseConnection) -> None:
    """Dispose the engine's pool, if one was created."""
    if connection.engine is not None:
        await connection.engine.dispose()
