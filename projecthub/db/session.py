"""
Async engine and session factory, created on first use.

Postgres gets a sized connection pool. SQLite URLs (local runs, tests) get
the driver's own pool, and an in-memory database is pinned to a single
shared connection so every session sees the same tables.
"""

import logging
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from projecthub.config import settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def engine_options(database_url: str) -> dict[str, Any]:
    url = make_url(database_url)
    options: dict[str, Any] = {"echo": settings.debug}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options

    options.update(
        pool_size=5,
        max_overflow=10,
        # waiting for a pooled connection counts against the store timeout
        pool_timeout=settings.store_timeout_seconds,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_use_lifo=True,
        pool_reset_on_return="rollback",
    )
    return options


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        url = make_url(settings.database_url)
        logger.info(
            "Creating %s engine for %s",
            url.get_backend_name(),
            url.render_as_string(hide_password=True),
        )
        _engine = create_async_engine(
            settings.database_url, **engine_options(settings.database_url)
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def get_db():
    """One session per request; FastAPI closes it when the response is sent."""
    async with get_session_factory()() as session:
        yield session


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database engine disposed")
