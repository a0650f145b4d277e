"""
Content entry persistence used by the headless CRUD resolvers.

Entries of every model share one table; field values are stored as a JSON
document. Resolvers work on flat records (see ``entry_to_record``) where
system fields use their GraphQL names next to the stored field values.

Filtering and sorting are evaluated in Python over a model's entries.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from headless_cms.exceptions import ContentEntryNotFoundError, ValidationError
from headless_cms.models.content_model import ContentEntry

logger = logging.getLogger(__name__)

SYSTEM_FIELDS = ("id", "createdBy", "updatedBy", "createdOn", "updatedOn", "savedOn")

# Longest suffixes first so "_not_in" is not read as "_in"
FILTER_OPERATORS = ("not_contains", "not_in", "contains", "not", "in", "gte", "gt", "lte", "lt")

DEFAULT_SORT: tuple[tuple[str, bool], ...] = (("createdOn", True), ("id", True))


def entry_to_record(entry: ContentEntry) -> dict[str, Any]:
    """Flatten an entry into the record shape GraphQL resolvers receive."""
    record = dict(entry.values or {})
    record.update(
        id=entry.id,
        createdBy=entry.created_by,
        updatedBy=entry.updated_by,
        createdOn=entry.created_on,
        updatedOn=entry.updated_on,
        savedOn=entry.saved_on,
    )
    return record


def parse_filter_key(key: str) -> tuple[str, str]:
    """Split a filter input key into (field id, operator): ``price_gte`` -> ("price", "gte")."""
    for operator in FILTER_OPERATORS:
        suffix = f"_{operator}"
        if key.endswith(suffix) and len(key) > len(suffix):
            return key[: -len(suffix)], operator
    return key, "eq"


def _normalize(field_id: str, value: Any) -> Any:
    if field_id == "id":
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return None if value is None else str(value)
    return jsonable_encoder(value)


def _compare(operator: str, actual: Any, expected: Any) -> bool:
    if operator == "eq":
        return actual == expected
    if operator == "not":
        return actual != expected
    if operator == "in":
        return actual in (expected or [])
    if operator == "not_in":
        return actual not in (expected or [])
    if operator in ("contains", "not_contains"):
        contained = isinstance(actual, str) and str(expected).lower() in actual.lower()
        return contained if operator == "contains" else not contained
    if actual is None or expected is None:
        return False
    try:
        if operator == "gt":
            return actual > expected
        if operator == "gte":
            return actual >= expected
        if operator == "lt":
            return actual < expected
        if operator == "lte":
            return actual <= expected
    except TypeError:
        return False
    raise ValidationError(f"Unsupported filter operator '{operator}'")


def matches_filter(record: Mapping[str, Any], where: Mapping[str, Any] | None) -> bool:
    """True when ``record`` satisfies every condition of a filter input."""
    for key, expected in (where or {}).items():
        field_id, operator = parse_filter_key(key)
        actual = _normalize(field_id, record.get(field_id))
        if not _compare(operator, actual, _normalize(field_id, expected)):
            return False
    return True


def parse_sort(sort: Sequence[str] | Mapping[str, int] | None) -> tuple[tuple[str, bool], ...]:
    """
    Normalize a sort argument into ((field id, descending), ...).

    Accepts sorter tokens (``["title_ASC", "createdOn_DESC"]``) or a JSON
    object (``{"title": 1, "createdOn": -1}``).
    """
    if not sort:
        return DEFAULT_SORT

    if isinstance(sort, Mapping):
        parsed = []
        for field_id, direction in sort.items():
            if isinstance(direction, bool) or direction not in (1, -1):
                raise ValidationError(f"Invalid sort direction for '{field_id}': {direction!r}", field="sort")
            parsed.append((field_id, direction < 0))
        return tuple(parsed)

    parsed = []
    for token in sort:
        field_id, _, direction = str(token).rpartition("_")
        if not field_id or direction not in ("ASC", "DESC"):
            raise ValidationError(f"Invalid sort token '{token}'", field="sort")
        parsed.append((field_id, direction == "DESC"))
    return tuple(parsed)


def sort_records(records: list[dict[str, Any]], sort: Sequence[tuple[str, bool]]) -> list[dict[str, Any]]:
    # Stable sorts applied from the least significant key
    for field_id, descending in reversed(sort):

        def key(record: dict[str, Any], field_id: str = field_id) -> tuple[bool, Any]:
            value = _normalize(field_id, record.get(field_id))
            return (value is None, value if value is not None else 0)

        records.sort(key=key, reverse=descending)
    return records


async def get_entry(db: AsyncSession, model_id: str, entry_id: Any) -> ContentEntry | None:
    try:
        entry_id = int(entry_id)
    except (TypeError, ValueError):
        return None
    result = await db.execute(
        select(ContentEntry).where(ContentEntry.model_id == model_id, ContentEntry.id == entry_id)
    )
    return result.scalars().first()


async def list_entries(
    db: AsyncSession,
    model_id: str,
    where: Mapping[str, Any] | None = None,
    sort: Sequence[str] | Mapping[str, int] | None = None,
    page: int = 1,
    per_page: int = 10,
) -> tuple[list[dict[str, Any]], int]:
    """
    Return one page of matching records and the total number of matches.
    """
    result = await db.execute(
        select(ContentEntry).where(ContentEntry.model_id == model_id).order_by(ContentEntry.id)
    )
    records = [entry_to_record(entry) for entry in result.scalars().all()]
    records = [record for record in records if matches_filter(record, where)]
    sort_records(records, parse_sort(sort))

    page = max(page, 1)
    per_page = max(per_page, 1)
    start = (page - 1) * per_page
    return records[start : start + per_page], len(records)


def total_pages(total_count: int, per_page: int) -> int:
    return math.ceil(total_count / per_page) if per_page else 0


async def create_entry(
    db: AsyncSession,
    model_id: str,
    data: Mapping[str, Any] | None,
    user_id: int | None = None,
) -> ContentEntry:
    """
    Creates a new content entry.

    Raises:
        RuntimeError: If the entry cannot be stored.
    """
    now = datetime.now(timezone.utc)
    entry = ContentEntry(
        model_id=model_id,
        values=jsonable_encoder(dict(data or {})),
        created_by=user_id,
        updated_by=user_id,
        created_on=now,
        updated_on=now,
        saved_on=now,
    )
    db.add(entry)

    try:
        await db.commit()
        await db.refresh(entry)
    except Exception as e:
        await db.rollback()
        logger.error("Error creating entry of model %s: %s", model_id, e)
        raise RuntimeError(f"Failed to create entry: {str(e)}") from e

    logger.info("Entry created successfully: %s:%s", model_id, entry.id)
    return entry


async def update_entry(
    db: AsyncSession,
    model_id: str,
    entry_id: Any,
    data: Mapping[str, Any] | None,
    user_id: int | None = None,
) -> ContentEntry:
    """
    Merge ``data`` into an existing entry's values.

    Raises:
        ContentEntryNotFoundError: If no entry with ``entry_id`` exists for the model.
    """
    entry = await get_entry(db, model_id, entry_id)
    if entry is None:
        raise ContentEntryNotFoundError(model_id, entry_id)

    # Assign a new dict so the JSON column is flagged as modified
    entry.values = {**(entry.values or {}), **jsonable_encoder(dict(data or {}))}
    entry.updated_by = user_id
    entry.saved_on = datetime.now(timezone.utc)

    try:
        await db.commit()
        await db.refresh(entry)
    except Exception as e:
        await db.rollback()
        logger.error("Error updating entry %s:%s: %s", model_id, entry_id, e)
        raise RuntimeError(f"Failed to update entry: {str(e)}") from e

    return entry


async def delete_entry(db: AsyncSession, model_id: str, entry_id: Any) -> None:
    """
    Raises:
        ContentEntryNotFoundError: If no entry with ``entry_id`` exists for the model.
    """
    entry = await get_entry(db, model_id, entry_id)
    if entry is None:
        raise ContentEntryNotFoundError(model_id, entry_id)

    await db.delete(entry)
    await db.commit()
    logger.info("Entry deleted: %s:%s", model_id, entry_id)
