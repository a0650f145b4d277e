"""Building blocks shared by the built-in field-type plugins."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from headless_cms.graphql.sdl import FieldDef, InputValueDef
from headless_cms.schemas.content_model import ContentModel, ContentModelField

EQUALITY_OPERATORS = ("eq", "not", "in", "not_in")
TEXT_OPERATORS = (*EQUALITY_OPERATORS, "contains", "not_contains")
RANGE_OPERATORS = ("lt", "lte", "gt", "gte")


def scalar_type_field(graphql_type: str) -> Callable[[ContentModel, ContentModelField], FieldDef]:
    def create_type_field(model: ContentModel, field: ContentModelField) -> FieldDef:
        return FieldDef(field.field_id, graphql_type, description=field.label)

    return create_type_field


def scalar_input_field(graphql_type: str) -> Callable[[ContentModel, ContentModelField], InputValueDef]:
    def create_input_field(model: ContentModel, field: ContentModelField) -> InputValueDef:
        return InputValueDef(field.field_id, graphql_type)

    return create_input_field


def list_filters(graphql_type: str, operators: Sequence[str]) -> Callable[[ContentModelField], list[InputValueDef]]:
    """Filter input fields named ``<fieldId>`` (equality) or ``<fieldId>_<operator>``."""

    def create_list_filters(field: ContentModelField) -> list[InputValueDef]:
        filters = []
        for operator in operators:
            name = field.field_id if operator == "eq" else f"{field.field_id}_{operator}"
            value_type = f"[{graphql_type}]" if operator in ("in", "not_in") else graphql_type
            filters.append(InputValueDef(name, value_type))
        return filters

    return create_list_filters


def value_resolver(models, model: ContentModel, field: ContentModelField):
    field_id = field.field_id

    def resolve(entry, info, **kwargs):
        return entry.get(field_id)

    return resolve
