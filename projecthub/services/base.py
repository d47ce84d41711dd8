import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from projecthub.config import settings
from projecthub.services.errors import ServiceUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreService:
    """Base for services that talk to the database through one session.

    Every round trip goes through ``_store`` so a stalled database fails the
    request with ``ServiceUnavailable`` instead of hanging it.
    """

    def __init__(self, db: AsyncSession, timeout: float | None = None):
        self.db = db
        self.timeout = timeout if timeout is not None else settings.store_timeout_seconds

    async def _store(self, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Store operation timed out after %ss", self.timeout)
            raise ServiceUnavailable()
