"""
Reference to an entry of another content model.

Settings: ``{"modelId": "<target model id>"}``. The field resolves to the
referenced entry, typed as the target model's manage or read type; inputs and
filters take the referenced entry's ID.
"""

from __future__ import annotations

from headless_cms.exceptions import SchemaCompositionError
from headless_cms.graphql.naming import create_manage_type_name, create_read_type_name, create_type_name
from headless_cms.graphql.sdl import FieldDef
from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant
from headless_cms.plugins.field_types.common import list_filters, scalar_input_field
from headless_cms.services import content_entry_service

_filters = list_filters("ID", ("eq", "in"))


def _target_model_id(model, field) -> str:
    target = field.settings.get("modelId")
    if not target:
        raise SchemaCompositionError(
            f"Reference field '{field.field_id}' of model '{model.model_id}' has no target modelId",
            details={"model_id": model.model_id, "field_id": field.field_id},
        )
    return target


def create_manage_type_field(model, field) -> FieldDef:
    type_name = create_type_name(_target_model_id(model, field))
    return FieldDef(field.field_id, create_manage_type_name(type_name), description=field.label)


def create_read_type_field(model, field) -> FieldDef:
    type_name = create_type_name(_target_model_id(model, field))
    return FieldDef(field.field_id, create_read_type_name(type_name), description=field.label)


def create_resolver(models, model, field):
    target_id = _target_model_id(model, field)
    if not any(candidate.model_id == target_id for candidate in models):
        raise SchemaCompositionError(
            f"Reference field '{field.field_id}' of model '{model.model_id}' targets unknown model '{target_id}'",
            details={"model_id": model.model_id, "field_id": field.field_id, "target": target_id},
        )
    field_id = field.field_id

    async def resolve(entry, info, **kwargs):
        ref_id = entry.get(field_id)
        if ref_id is None:
            return None
        async with info.context.session() as db:
            referenced = await content_entry_service.get_entry(db, target_id, ref_id)
        return content_entry_service.entry_to_record(referenced) if referenced else None

    return resolve


plugin = FieldTypePlugin(
    field_type="ref",
    description="Reference to an entry of another model",
    manage=FieldTypeVariant(
        create_type_field=create_manage_type_field,
        create_input_field=scalar_input_field("ID"),
        create_list_filters=_filters,
        create_resolver=create_resolver,
    ),
    read=FieldTypeVariant(
        create_type_field=create_read_type_field,
        create_list_filters=_filters,
        create_resolver=create_resolver,
    ),
)
