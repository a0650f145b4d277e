"""User lookup used to resolve ``createdBy`` / ``updatedBy`` on content entries."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from headless_cms.models.user import User

logger = logging.getLogger(__name__)


class UserLookup(Protocol):
    async def find_by_id(self, user_id: Any) -> User | None: ...


class SqlUserLookup:
    """UserLookup backed by the ``users`` table; caches hits for one request."""

    def __init__(self, db: AsyncSession, lock: asyncio.Lock | None = None) -> None:
        self.db = db
        self.lock = lock or asyncio.Lock()
        self._cache: dict[int, User | None] = {}

    async def find_by_id(self, user_id: Any) -> User | None:
        if user_id is None:
            return None
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed user id %r", user_id)
            return None

        if user_id not in self._cache:
            async with self.lock:
                result = await self.db.execute(select(User).where(User.id == user_id))
                self._cache[user_id] = result.scalars().first()
        return self._cache[user_id]
