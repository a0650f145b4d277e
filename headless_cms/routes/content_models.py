"""
Content Model Routes

Registering or deleting a content model regenerates the headless schema.
The candidate model set is composed before anything is stored, so a model
that would break schema generation is rejected and the current schema stays
published.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from headless_cms.database import get_db
from headless_cms.exceptions import ContentModelNotFoundError, ValidationError
from headless_cms.graphql.schema import compose_headless_schema
from headless_cms.schemas.content_model import ContentModel
from headless_cms.services import content_model_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Content Models"])


@router.get("", response_model=list[ContentModel], response_model_by_alias=True)
async def list_content_models(db: AsyncSession = Depends(get_db)) -> list[ContentModel]:
    return await content_model_service.load_content_models(db)


@router.get("/{model_id}", response_model=ContentModel, response_model_by_alias=True)
async def get_content_model(model_id: str, db: AsyncSession = Depends(get_db)) -> ContentModel:
    row = await content_model_service.get_content_model_row(db, model_id)
    if row is None or row.deleted:
        raise ContentModelNotFoundError(model_id)
    return content_model_service.to_content_model(row)


@router.post("", response_model=ContentModel, response_model_by_alias=True, status_code=status.HTTP_201_CREATED)
async def create_content_model(
    model: ContentModel,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> ContentModel:
    """
    Register a content model and publish the regenerated schema.

    Raises:
        ValidationError: A model with the same id exists.
        SchemaCompositionError: The model set including ``model`` cannot be composed.
    """
    models = await content_model_service.load_content_models(db)
    if any(existing.model_id == model.model_id for existing in models):
        raise ValidationError(f"Content model '{model.model_id}' already exists", field="modelId")

    schema = compose_headless_schema(
        [*models, model],
        request.app.state.field_types,
        request.app.state.model_fields,
    )
    row = await content_model_service.save_content_model(
        db,
        model.model_id,
        [field.model_dump(by_alias=True) for field in model.fields],
        name=model.name,
        description=model.description,
    )
    request.app.state.headless_schema = schema
    logger.info("Headless schema regenerated after adding model %s", model.model_id)
    return content_model_service.to_content_model(row)


@router.delete("/{model_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content_model(model_id: str, request: Request, db: AsyncSession = Depends(get_db)) -> None:
    models = await content_model_service.load_content_models(db)
    if not any(existing.model_id == model_id for existing in models):
        raise ContentModelNotFoundError(model_id)

    # Models referencing the deleted one make the remaining set fail to compose
    schema = compose_headless_schema(
        [existing for existing in models if existing.model_id != model_id],
        request.app.state.field_types,
        request.app.state.model_fields,
    )
    await content_model_service.delete_content_model(db, model_id)
    request.app.state.headless_schema = schema
    logger.info("Headless schema regenerated after deleting model %s", model_id)
