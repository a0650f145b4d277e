"""
Resolved values shared between field resolvers of one GraphQL operation.

Every read-projection field resolver publishes its result under
``"<modelId>:<entryId>:<fieldId>"``. Another resolver of the same operation
can read that value without recomputing it, and can wait for it when the
runtime has not resolved the sibling field yet:

    value = await info.context.resolved_values.wait_for(
        resolved_value_key("product", entry["id"], "title")
    )
    if value is UNAVAILABLE:
        ...

A ``ResolvedValues`` instance lives exactly as long as one operation. It is
bound to the event loop running that operation; ``set`` and ``get`` never
yield, so they are atomic with respect to other resolvers on that loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any

logger = logging.getLogger(__name__)


class ValueUnavailable:
    """Outcome of a lookup that did not produce a value."""

    __slots__ = ("reason",)

    def __init__(self, reason: str) -> None:
        self.reason = reason

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"<{self.reason.upper()}>"


# The key was not set before the wait timed out or the operation ended
UNAVAILABLE = ValueUnavailable("unavailable")
# The operation was cancelled while waiting
CANCELLED = ValueUnavailable("cancelled")


def resolved_value_key(model_id: str, entry_id: Any, field_id: str) -> str:
    return f"{model_id}:{entry_id}:{field_id}"


class ResolvedValues:
    """Per-operation keyed store with publish/subscribe waits."""

    def __init__(self, timeout: float | None = None) -> None:
        self._values: dict[str, Any] = {}
        self._waiters: dict[str, list[asyncio.Future]] = defaultdict(list)
        self._timeout = timeout
        self._outcome: ValueUnavailable | None = None

    @property
    def closed(self) -> bool:
        return self._outcome is not None

    def set(self, key: str, value: Any) -> None:
        """Publish ``value`` under ``key`` and wake everyone waiting for it."""
        if self.closed:
            logger.debug("Ignoring resolved value %s published after the operation ended", key)
            return
        self._values[key] = value
        for waiter in self._waiters.pop(key, []):
            if not waiter.done():
                waiter.set_result(value)

    def get(self, key: str) -> Any:
        """Return the value for ``key`` without waiting, or UNAVAILABLE."""
        if self.closed:
            return self._outcome
        return self._values.get(key, UNAVAILABLE)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    async def wait_for(self, key: str, timeout: float | None = None) -> Any:
        """
        Return the value for ``key``, waiting until a sibling resolver sets it.

        The wait is bounded by ``timeout`` (or the store's default timeout)
        and by the operation itself: UNAVAILABLE is returned when the wait
        times out or the operation completes first, CANCELLED when the
        operation is cancelled.
        """
        if self.closed:
            return self._outcome
        if key in self._values:
            return self._values[key]

        waiter = asyncio.get_running_loop().create_future()
        self._waiters[key].append(waiter)
        try:
            return await asyncio.wait_for(waiter, timeout if timeout is not None else self._timeout)
        except asyncio.TimeoutError:
            logger.debug("Timed out waiting for resolved value %s", key)
            return UNAVAILABLE
        finally:
            pending = self._waiters.get(key)
            if pending and waiter in pending:
                pending.remove(waiter)
                if not pending:
                    del self._waiters[key]

    def close(self) -> None:
        """End of operation: drop all values and release waiters with UNAVAILABLE."""
        self._finish(UNAVAILABLE)

    def cancel(self) -> None:
        """Operation cancelled: drop all values and release waiters with CANCELLED."""
        self._finish(CANCELLED)

    def _finish(self, outcome: ValueUnavailable) -> None:
        if self.closed:
            return
        self._outcome = outcome
        self._values.clear()
        waiters, self._waiters = self._waiters, defaultdict(list)
        for pending in waiters.values():
            for waiter in pending:
                if not waiter.done():
                    waiter.set_result(outcome)
