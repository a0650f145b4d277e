"""
Tests for resolved values shared between resolvers of one operation
"""

import asyncio

import pytest

from headless_cms.graphql.context import HeadlessContext
from headless_cms.graphql.value_broker import (
    CANCELLED,
    UNAVAILABLE,
    ResolvedValues,
    resolved_value_key,
)


class TestResolvedValueKey:
    def test_key_format(self):
        assert resolved_value_key("product", 7, "title") == "product:7:title"


class TestGetAndSet:
    def test_get_after_set(self):
        values = ResolvedValues()
        values.set("product:1:title", "Lamp")
        assert values.get("product:1:title") == "Lamp"
        assert "product:1:title" in values

    def test_get_missing_key_does_not_block(self):
        values = ResolvedValues()
        assert values.get("product:1:title") is UNAVAILABLE

    def test_overwrite_allowed(self):
        values = ResolvedValues()
        values.set("k", 1)
        values.set("k", 2)
        assert values.get("k") == 2

    def test_none_is_a_value(self):
        values = ResolvedValues()
        values.set("k", None)
        assert values.get("k") is None

    def test_unavailable_is_falsy(self):
        assert not UNAVAILABLE
        assert not CANCELLED
        assert repr(UNAVAILABLE) == "<UNAVAILABLE>"


class TestWaitFor:
    @pytest.mark.asyncio
    async def test_value_set_before_wait(self):
        values = ResolvedValues()
        values.set("k", "v")
        assert await values.wait_for("k") == "v"

    @pytest.mark.asyncio
    async def test_waiter_registered_before_set_observes_value(self):
        values = ResolvedValues()
        waiter = asyncio.ensure_future(values.wait_for("k", timeout=1))
        await asyncio.sleep(0)
        assert not waiter.done()

        values.set("k", "published")
        assert await waiter == "published"

    @pytest.mark.asyncio
    async def test_many_waiters_same_key(self):
        values = ResolvedValues()
        waiters = [asyncio.ensure_future(values.wait_for("k", timeout=1)) for _ in range(3)]
        await asyncio.sleep(0)
        values.set("k", 42)
        assert await asyncio.gather(*waiters) == [42, 42, 42]

    @pytest.mark.asyncio
    async def test_timeout_returns_unavailable(self):
        values = ResolvedValues()
        assert await values.wait_for("never", timeout=0.01) is UNAVAILABLE

    @pytest.mark.asyncio
    async def test_default_timeout_applies(self):
        values = ResolvedValues(timeout=0.01)
        assert await values.wait_for("never") is UNAVAILABLE

    @pytest.mark.asyncio
    async def test_close_releases_waiters_with_unavailable(self):
        values = ResolvedValues()
        waiter = asyncio.ensure_future(values.wait_for("k"))
        await asyncio.sleep(0)
        values.close()
        assert await waiter is UNAVAILABLE

    @pytest.mark.asyncio
    async def test_cancel_releases_waiters_with_cancelled(self):
        values = ResolvedValues()
        waiter = asyncio.ensure_future(values.wait_for("k"))
        await asyncio.sleep(0)
        values.cancel()
        assert await waiter is CANCELLED

    @pytest.mark.asyncio
    async def test_concurrent_sets_of_different_keys(self):
        values = ResolvedValues()

        async def publish(index):
            await asyncio.sleep(0)
            values.set(f"product:{index}:title", f"title-{index}")

        await asyncio.gather(*(publish(i) for i in range(20)))
        assert all(values.get(f"product:{i}:title") == f"title-{i}" for i in range(20))


class TestLifecycle:
    def test_values_discarded_on_close(self):
        values = ResolvedValues()
        values.set("k", "v")
        values.close()
        assert values.closed
        assert "k" not in values
        assert values.get("k") is UNAVAILABLE

    def test_set_after_close_is_ignored(self):
        values = ResolvedValues()
        values.close()
        values.set("k", "v")
        assert "k" not in values

    def test_cancel_after_close_keeps_first_outcome(self):
        values = ResolvedValues()
        values.close()
        values.cancel()
        assert values.get("k") is UNAVAILABLE

    @pytest.mark.asyncio
    async def test_wait_after_cancel(self):
        values = ResolvedValues()
        values.cancel()
        assert await values.wait_for("k") is CANCELLED


class TestContextResolvedValues:
    def test_opened_once_per_context(self):
        context = HeadlessContext(db=None, user_lookup=None, resolved_value_timeout=2.0)
        assert context.resolved_values is None
        first = context.open_resolved_values()
        assert context.open_resolved_values() is first

    def test_close_context_closes_store(self):
        context = HeadlessContext(db=None, user_lookup=None)
        values = context.open_resolved_values()
        context.close(cancelled=True)
        assert values.get("k") is CANCELLED

    def test_contexts_do_not_share_stores(self):
        first = HeadlessContext(db=None, user_lookup=None).open_resolved_values()
        second = HeadlessContext(db=None, user_lookup=None).open_resolved_values()
        first.set("k", 1)
        assert second.get("k") is UNAVAILABLE
