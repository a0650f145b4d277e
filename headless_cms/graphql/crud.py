"""
CRUD resolvers for generated headless queries and mutations.

Errors raised by the entry service are returned inside the response wrapper
(``{data: null, error: {...}}``) instead of failing the whole operation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from headless_cms.config import settings
from headless_cms.exceptions import CMSException, ContentEntryNotFoundError
from headless_cms.graphql.sdl import PLACEHOLDER_FIELD
from headless_cms.graphql.types import DeleteResponse, ListMeta, error_from_exception
from headless_cms.plugins.base import Resolver
from headless_cms.schemas.content_model import ContentModel
from headless_cms.services import content_entry_service

logger = logging.getLogger(__name__)


def _clean(values: Mapping[str, Any] | None) -> dict[str, Any]:
    return {key: value for key, value in (values or {}).items() if key != PLACEHOLDER_FIELD}


def _error_response(exc: CMSException, **extra: Any) -> dict[str, Any]:
    logger.info("Headless request failed: %s", exc.message)
    return {"data": None, **extra, "error": error_from_exception(exc)}


def _current_user_id(info) -> int | None:
    user = info.context.user
    return user.id if user is not None else None


class EntryCrudResolvers:
    """Resolver factory backed by ``content_entry_service``."""

    def __init__(self, default_per_page: int | None = None, max_per_page: int | None = None) -> None:
        self.default_per_page = default_per_page or settings.default_per_page
        self.max_per_page = max_per_page or settings.max_per_page

    def get(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver:
        model_id = model.model_id

        async def resolve(root, info, id=None, where=None, sort=None):
            try:
                async with info.context.session() as db:
                    if id is not None:
                        entry = await content_entry_service.get_entry(db, model_id, id)
                        record = content_entry_service.entry_to_record(entry) if entry else None
                    else:
                        records, _ = await content_entry_service.list_entries(
                            db, model_id, where=_clean(where), sort=sort, page=1, per_page=1
                        )
                        record = records[0] if records else None
                if record is None:
                    raise ContentEntryNotFoundError(model_id, id)
            except CMSException as exc:
                return _error_response(exc)
            return {"data": record, "error": None}

        return resolve

    def list(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver:
        model_id = model.model_id

        async def resolve(root, info, page=None, perPage=None, where=None, sort=None):
            page = max(page or 1, 1)
            per_page = min(max(perPage or self.default_per_page, 1), self.max_per_page)
            try:
                async with info.context.session() as db:
                    records, total_count = await content_entry_service.list_entries(
                        db, model_id, where=_clean(where), sort=sort, page=page, per_page=per_page
                    )
            except CMSException as exc:
                return _error_response(exc, meta=None)

            total_pages = content_entry_service.total_pages(total_count, per_page)
            meta = ListMeta(
                total_count=total_count,
                total_pages=total_pages,
                page=page,
                per_page=per_page,
                previous_page=page - 1 if page > 1 else None,
                next_page=page + 1 if page < total_pages else None,
            )
            return {"data": records, "meta": meta, "error": None}

        return resolve

    def create(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver:
        model_id = model.model_id

        async def resolve(root, info, data=None):
            async with info.context.session() as db:
                entry = await content_entry_service.create_entry(db, model_id, _clean(data), _current_user_id(info))
            return {"data": content_entry_service.entry_to_record(entry), "error": None}

        return resolve

    def update(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver:
        model_id = model.model_id

        async def resolve(root, info, id, data=None):
            try:
                async with info.context.session() as db:
                    entry = await content_entry_service.update_entry(
                        db, model_id, id, _clean(data), _current_user_id(info)
                    )
            except CMSException as exc:
                return _error_response(exc)
            return {"data": content_entry_service.entry_to_record(entry), "error": None}

        return resolve

    def delete(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver:
        model_id = model.model_id

        async def resolve(root, info, id):
            try:
                async with info.context.session() as db:
                    await content_entry_service.delete_entry(db, model_id, id)
            except CMSException as exc:
                logger.info("Headless request failed: %s", exc.message)
                return DeleteResponse(data=None, error=error_from_exception(exc))
            return DeleteResponse(data=True)

        return resolve
