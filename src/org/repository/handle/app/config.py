"""
Configuration Module for the Handle Registry

This module defines the configuration system for the handle registry service, using Pydantic
for settings validation and dependency injection through AppKeys.

The Settings class is loaded from environment variables with defaults suitable for development
environments. All application components access settings and shared resources through typed
AppKeys to maintain clean dependency injection.

Key configuration areas include:
- Service networking and debugging
- Database connection
- Handle namespace and dissemination URLs
- Monitoring and error reporting
"""

from typing import Final, Optional
import logging
from pydantic import (
    AliasChoices,
    Field,
    PostgresDsn,
)
from pydantic_settings import BaseSettings
from aiohttp import web
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    AsyncSession,
)

from org.repository.handle.app.metrics import MetricsClient
from org.repository.handle.resolve.registry import HandleRegistry


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings for the handle registry.

    Environment variables are automatically mapped to settings fields. The handle properties
    also accept their dotted property names (``handle.prefix``, ``handle.item.url.prefix``)
    as aliases.
    """

    debug: bool = False
    """
    Enable debug mode for verbose logging.
    Set with DEBUG=true environment variable.
    """

    http_port: int = Field(alias="port", default=5100)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    pg_dsn: PostgresDsn = Field(
        "postgresql+asyncpg://postgres:password@db/handles",
        validation_alias=AliasChoices("pg_dsn", "database_url"),
    )  # type: ignore
    """
    PostgreSQL connection string for database access.
    Set with PG_DSN or DATABASE_URL environment variables.
    """

    handle_prefix: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("handle_prefix", "handle.prefix"),
    )
    """
    The site's registered handle prefix, e.g. 123456789. Required for minting.
    Set with HANDLE_PREFIX environment variable.
    """

    handle_item_url_prefix: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "handle_item_url_prefix", "handle.item.url.prefix"
        ),
    )
    """
    Base URL items are disseminated from, e.g. http://example.org/handle.
    Required for resolving item handles to URLs.
    Set with HANDLE_ITEM_URL_PREFIX environment variable.
    """

    metrics_backend: str = "none"
    """
    Metrics backend, either 'telegraf' or 'none'.
    Set with METRICS_BACKEND environment variable.
    """

    statsd_host: str = Field(alias="TELEGRAF_HOST", default="telegraf")
    """
    StatsD/Telegraf host for metrics collection.
    Set with TELEGRAF_HOST environment variable.
    """

    statsd_port: int = Field(alias="TELEGRAF_PORT", default=8125)
    """
    StatsD/Telegraf port for metrics collection.
    Set with TELEGRAF_PORT environment variable.
    """


SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

DatabaseAppKey: Final = web.AppKey("database", AsyncEngine)
"""AppKey for accessing the SQLAlchemy async database engine"""

DatabaseSessionMakerAppKey: Final = web.AppKey(
    "database_session_maker", async_sessionmaker[AsyncSession]
)
"""AppKey for accessing the SQLAlchemy async session factory"""

MetricsClientAppKey: Final = web.AppKey("metrics_client", MetricsClient)
"""AppKey for accessing the metrics client"""

HandleRegistryAppKey: Final = web.AppKey("handle_registry", HandleRegistry)
"""AppKey for accessing the handle registry service"""
