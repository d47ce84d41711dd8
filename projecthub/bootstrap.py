"""
Startup helpers: schema creation and the startup banner.

Deployments that manage the schema with alembic turn
``AUTO_CREATE_TABLES`` off; local and demo runs let the app create the
tables on first start.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from projecthub.config import settings
from projecthub.db.base import Base
import projecthub.models  # noqa: F401  register models with metadata

logger = logging.getLogger(__name__)

ENDPOINTS = (
    "GET  /health - Health check",
    "POST /api/auth/register - User registration",
    "POST /api/auth/login - User login",
    "GET  /api/projects - Get user projects",
    "POST /api/projects - Create project",
    "PUT  /api/projects/{id} - Update project",
    "DEL  /api/projects/{id} - Delete project",
    "GET  /api/analytics/stats - Analytics data",
    "WS   /ws - Project update notifications",
)


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


def log_startup_banner() -> None:
    logger.info(
        "=== %s v%s ===\n"
        "  environment:  %s\n"
        "  port:         %s\n"
        "  database:     %s\n"
        "  JWT secret:   %s\n"
        "  endpoints:\n    %s",
        settings.app_name,
        settings.version,
        settings.environment,
        settings.port,
        settings.database_url.split("@")[-1],
        "using default" if settings.uses_default_secret else "configured",
        "\n    ".join(ENDPOINTS),
    )
    if settings.uses_default_secret:
        logger.warning("SECRET_KEY is not set; tokens are signed with the default key.")
