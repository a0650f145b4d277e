"""GraphQL context: carries the DB session, user lookup and resolved values into resolvers."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

from headless_cms.graphql.value_broker import ResolvedValues

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from headless_cms.models.user import User
    from headless_cms.services.user_service import UserLookup


class HeadlessContext(BaseContext):
    """Context passed to every headless GraphQL resolver; one per operation."""

    def __init__(
        self,
        db: AsyncSession,
        user_lookup: UserLookup,
        user: User | None = None,
        db_lock: asyncio.Lock | None = None,
        resolved_value_timeout: float | None = None,
    ) -> None:
        super().__init__()
        self.db = db
        self.db_lock = db_lock or asyncio.Lock()
        self.user_lookup = user_lookup
        self.user = user
        self.headless_manage = False
        self.resolved_values: ResolvedValues | None = None
        self._resolved_value_timeout = resolved_value_timeout

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Exclusive use of the operation's session; sibling resolvers run concurrently."""
        async with self.db_lock:
            yield self.db

    def open_resolved_values(self) -> ResolvedValues:
        """Create the operation's resolved-value store on first use."""
        if self.resolved_values is None:
            self.resolved_values = ResolvedValues(timeout=self._resolved_value_timeout)
        return self.resolved_values

    def close(self, cancelled: bool = False) -> None:
        """Discard per-operation state and release pending resolved-value waiters."""
        if self.resolved_values is None:
            return
        if cancelled:
            self.resolved_values.cancel()
        else:
            self.resolved_values.close()
