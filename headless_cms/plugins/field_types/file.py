"""
File field type.

Stores file metadata (``src``, ``name``, ``size``, ``type``). Each model gets
its own ``<Mode><Type>File`` object type (and, for manage, a matching input
type), emitted once per model however many file fields it has. File fields are
neither filterable nor sortable.
"""

from __future__ import annotations

from headless_cms.graphql.naming import create_manage_type_name, create_read_type_name, create_type_name
from headless_cms.graphql.sdl import FieldDef, InputTypeDef, InputValueDef, ObjectTypeDef
from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant
from headless_cms.plugins.field_types.common import value_resolver

_FILE_FIELDS = (("src", "String"), ("name", "String"), ("size", "Int"), ("type", "String"))


def _manage_file_type(model) -> str:
    return create_manage_type_name(create_type_name(model.model_id)) + "File"


def _read_file_type(model) -> str:
    return create_read_type_name(create_type_name(model.model_id)) + "File"


def create_manage_types(model, models):
    file_type = _manage_file_type(model)
    return [
        ObjectTypeDef(file_type, tuple(FieldDef(name, type_) for name, type_ in _FILE_FIELDS)),
        InputTypeDef(f"{file_type}Input", tuple(InputValueDef(name, type_) for name, type_ in _FILE_FIELDS)),
    ]


def create_read_types(model, models):
    return [ObjectTypeDef(_read_file_type(model), tuple(FieldDef(name, type_) for name, type_ in _FILE_FIELDS))]


plugin = FieldTypePlugin(
    field_type="file",
    description="Uploaded file",
    manage=FieldTypeVariant(
        create_type_field=lambda model, field: FieldDef(field.field_id, _manage_file_type(model), description=field.label),
        create_input_field=lambda model, field: InputValueDef(field.field_id, f"{_manage_file_type(model)}Input"),
        create_types=create_manage_types,
    ),
    read=FieldTypeVariant(
        create_type_field=lambda model, field: FieldDef(field.field_id, _read_file_type(model), description=field.label),
        create_types=create_read_types,
        create_resolver=value_resolver,
    ),
)
