"""
Content model loading and registration.

The schema composer only ever sees immutable ``ContentModel`` records; this
module turns stored ``cms_content_models`` rows into those records.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from headless_cms.exceptions import ContentModelNotFoundError, ValidationError
from headless_cms.models.content_model import CmsContentModel
from headless_cms.schemas.content_model import ContentModel

logger = logging.getLogger(__name__)


def to_content_model(row: CmsContentModel) -> ContentModel:
    return ContentModel(
        model_id=row.model_id,
        name=row.name,
        description=row.description,
        fields=tuple(row.fields or ()),
    )


async def load_content_models(db: AsyncSession) -> list[ContentModel]:
    """
    Load every non-deleted content model, in creation order.

    Raises:
        pydantic.ValidationError: If a stored model or field record is malformed.
    """
    result = await db.execute(
        select(CmsContentModel).where(CmsContentModel.deleted.is_(False)).order_by(CmsContentModel.id)
    )
    models = [to_content_model(row) for row in result.scalars().all()]
    logger.info("Loaded %d content models", len(models))
    return models


async def save_content_model(
    db: AsyncSession,
    model_id: str,
    fields: Sequence[dict[str, Any]],
    name: str | None = None,
    description: str | None = None,
) -> CmsContentModel:
    """
    Store a content model definition.

    The headless schema must be regenerated before the model is queryable.
    """
    # Validate the definition before storing it
    model = ContentModel(model_id=model_id, name=name, description=description, fields=tuple(fields))

    stored_fields = [field.model_dump(by_alias=True) for field in model.fields]
    row = await get_content_model_row(db, model.model_id)
    if row is not None and not row.deleted:
        raise ValidationError(f"Content model '{model_id}' already exists", field="modelId")

    if row is None:
        row = CmsContentModel(model_id=model.model_id)
        db.add(row)
    # A deleted model with the same id is replaced
    row.name = model.name or model.model_id
    row.description = model.description
    row.fields = stored_fields
    row.deleted = False
    await db.commit()
    await db.refresh(row)
    logger.info("Content model saved: %s", model_id)
    return row


async def get_content_model_row(db: AsyncSession, model_id: str) -> CmsContentModel | None:
    result = await db.execute(select(CmsContentModel).where(CmsContentModel.model_id == model_id))
    return result.scalars().first()


async def delete_content_model(db: AsyncSession, model_id: str) -> None:
    """
    Mark a content model as deleted. Its entries are kept.

    Raises:
        ContentModelNotFoundError: If no live model with ``model_id`` exists.
    """
    row = await get_content_model_row(db, model_id)
    if row is None or row.deleted:
        raise ContentModelNotFoundError(model_id)

    row.deleted = True
    await db.commit()
    logger.info("Content model deleted: %s", model_id)
