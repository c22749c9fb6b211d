"""Database configuration and connection management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlparse, urlunparse

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from rent_tracker.core.config import settings
from rent_tracker.core.logger import get_logger
from rent_tracker.models.base import Base

logger = get_logger()


def _sanitize_database_url(database_url: str) -> str:
    """Remove credentials from DATABASE_URL for safe logging."""
    try:
        parsed = urlparse(database_url)
        if parsed.hostname:
            safe_netloc = parsed.hostname
            if parsed.port:
                safe_netloc = f"{safe_netloc}:{parsed.port}"
        else:
            safe_netloc = ""
        return urlunparse((parsed.scheme, safe_netloc, parsed.path, "", "", ""))
    except ValueError:
        return "configured"


def get_async_database_url(database_url: str) -> str:
    """Normalize DATABASE_URL to an async driver URL."""
    if database_url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return database_url
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    logger.error(
        "Invalid DATABASE_URL format", url=_sanitize_database_url(database_url)
    )
    raise ValueError(
        "DATABASE_URL must start with postgresql://, postgresql+asyncpg:// or sqlite://"
    )


# Shared engine; connection pooling is left to the driver
engine: AsyncEngine = create_async_engine(
    get_async_database_url(settings.DATABASE_URL),
    **settings.get_database_settings(),
)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@asynccontextmanager
async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Context manager for request-scoped database sessions"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create database tables and indexes"""
    try:
        async with (bind or engine).begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error("Failed to create database tables", error=str(e))
        raise


async def close_database_connections() -> None:
    """Close all database connections"""
    await engine.dispose()
    logger.info("Database connections closed")


class DatabaseManager:
    """Database connection manager with health checks."""

    @staticmethod
    async def health_check(
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> dict[str, Any]:
        """Check database connectivity"""
        try:
            async with (session_factory or AsyncSessionLocal)() as session:
                await session.execute(text("SELECT 1"))
                return {
                    "status": "healthy",
                    "message": "Database connection successful",
                    "details": {
                        "database_url": _sanitize_database_url(settings.DATABASE_URL),
                    },
                }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "message": f"Database connection failed: {e!s}",
                "details": {"error": str(e)},
            }
