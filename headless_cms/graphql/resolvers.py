"""
Resolvers shared by every generated headless type.

``id``, ``createdBy`` and ``updatedBy`` resolve the same way for every model
and both render modes, so one resolver set is bound everywhere.
"""

from __future__ import annotations

import inspect
import logging
from types import MappingProxyType
from typing import Any

from headless_cms.graphql.value_broker import resolved_value_key
from headless_cms.plugins.base import Resolver

logger = logging.getLogger(__name__)


def resolve_id(entry, info) -> str | None:
    value = entry.get("id")
    return str(value) if value is not None else None


async def resolve_created_by(entry, info):
    return await info.context.user_lookup.find_by_id(entry.get("createdBy"))


async def resolve_updated_by(entry, info):
    return await info.context.user_lookup.find_by_id(entry.get("updatedBy"))


COMMON_FIELD_RESOLVERS: MappingProxyType[str, Resolver] = MappingProxyType(
    {
        "id": resolve_id,
        "createdBy": resolve_created_by,
        "updatedBy": resolve_updated_by,
    }
)


def identity_resolver(field_id: str) -> Resolver:
    """Resolve a field to the stored value of the same name."""

    def resolve(entry, info, **kwargs):
        return entry.get(field_id)

    return resolve


def publishing_resolver(model_id: str, field_id: str, resolver: Resolver) -> Resolver:
    """
    Wrap a read-projection resolver so its result is published as a resolved
    value of the current operation before it is returned.
    """

    async def resolve(entry, info, **kwargs) -> Any:
        value = resolver(entry, info, **kwargs)
        if inspect.isawaitable(value):
            value = await value

        resolved_values = info.context.resolved_values
        if resolved_values is not None:
            resolved_values.set(resolved_value_key(model_id, entry.get("id"), field_id), value)
        return value

    return resolve


# ── Root entry points ─────────────────────────────────────────────────────────


def resolve_headless_manage(root, info) -> dict:
    info.context.headless_manage = True
    return {}


def resolve_headless_manage_mutation(root, info) -> dict:
    info.context.headless_manage = True
    return {}


def resolve_headless_read(root, info) -> dict:
    # Resolved values are shared by all field resolvers of this operation
    info.context.open_resolved_values()
    return {}
