"""
Headless schema publication and execution.

The schema units produced by the composer are printed as one SDL document,
stitched onto the Strawberry base schema with graphql-core ``extend_schema``
and validated. Resolvers are attached to the extended schema afterwards.
Nothing is published unless the whole document extends and validates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from graphql import (
    ExecutionResult,
    GraphQLError,
    GraphQLObjectType,
    GraphQLSchema,
    extend_schema,
    graphql,
    parse,
    validate_schema,
)
from sqlalchemy.ext.asyncio import AsyncSession

from headless_cms.exceptions import SchemaCompositionError
from headless_cms.graphql.composer import (
    MANAGE_MUTATION,
    MANAGE_QUERY,
    READ_QUERY,
    CrudResolverFactory,
    SchemaComposer,
    SchemaUnit,
)
from headless_cms.graphql.context import HeadlessContext
from headless_cms.graphql.crud import EntryCrudResolvers
from headless_cms.graphql.resolvers import (
    resolve_headless_manage,
    resolve_headless_manage_mutation,
    resolve_headless_read,
)
from headless_cms.graphql.sdl import FieldDef, ObjectTypeDef, print_definitions
from headless_cms.graphql.types import base_schema
from headless_cms.plugins.base import Resolver
from headless_cms.plugins.registry import FieldTypePluginRegistry, ModelFieldPluginIndex
from headless_cms.schemas.content_model import ContentModel
from headless_cms.services.content_model_service import load_content_models

logger = logging.getLogger(__name__)

HEADLESS_ROOT_TYPES = (MANAGE_QUERY, MANAGE_MUTATION, READ_QUERY)

BASE_DEFINITIONS = (
    ObjectTypeDef(
        "Query",
        (FieldDef("headlessManage", MANAGE_QUERY), FieldDef("headlessRead", READ_QUERY)),
        extend=True,
    ),
    ObjectTypeDef("Mutation", (FieldDef("headlessManage", MANAGE_MUTATION),)),
)

_SCHEMA_EXTENSION = "extend schema {\n  mutation: Mutation\n}"

BASE_RESOLVERS: Mapping[str, Mapping[str, Resolver]] = {
    "Query": {"headlessManage": resolve_headless_manage, "headlessRead": resolve_headless_read},
    "Mutation": {"headlessManage": resolve_headless_manage_mutation},
}


def headless_type_defs(units: Iterable[SchemaUnit]) -> str:
    """
    The SDL document that extends the base schema with ``units``.

    Root fields the units add to the headless root types are declared on the
    root types themselves; a root type without any gets the placeholder field.
    """
    root_fields: dict[str, list[FieldDef]] = {name: [] for name in HEADLESS_ROOT_TYPES}
    unit_definitions = []
    for unit in units:
        for definition in unit.definitions:
            if isinstance(definition, ObjectTypeDef) and definition.extend and definition.name in root_fields:
                root_fields[definition.name].extend(definition.fields)
            else:
                unit_definitions.append(definition)

    definitions = [ObjectTypeDef(name, tuple(fields)) for name, fields in root_fields.items()]
    definitions.extend(BASE_DEFINITIONS)
    definitions.extend(unit_definitions)
    return f"{print_definitions(definitions)}\n\n{_SCHEMA_EXTENSION}\n"


def bind_resolvers(schema: GraphQLSchema, resolvers: Mapping[str, Mapping[str, Resolver]]) -> None:
    for type_name, field_resolvers in resolvers.items():
        graphql_type = schema.get_type(type_name)
        if not isinstance(graphql_type, GraphQLObjectType):
            raise SchemaCompositionError(
                f"Resolvers given for unknown object type '{type_name}'",
                details={"type": type_name},
            )
        for field_name, resolver in field_resolvers.items():
            field = graphql_type.fields.get(field_name)
            if field is None:
                raise SchemaCompositionError(
                    f"Resolver given for unknown field '{type_name}.{field_name}'",
                    details={"type": type_name, "field": field_name},
                )
            field.resolve = resolver


def build_headless_schema(units: Sequence[SchemaUnit]) -> GraphQLSchema:
    """
    Publish schema units onto the base schema.

    Raises:
        SchemaCompositionError: If the document does not extend or the result is invalid.
    """
    type_defs = headless_type_defs(units)
    try:
        schema = extend_schema(base_schema._schema, parse(type_defs))
    except (GraphQLError, TypeError) as exc:
        logger.error("Failed to extend headless schema: %s", exc)
        raise SchemaCompositionError(
            f"Generated schema could not be published: {exc}",
            details={"units": [unit.name for unit in units]},
        ) from exc

    errors = validate_schema(schema)
    if errors:
        messages = [error.message for error in errors]
        logger.error("Generated headless schema is invalid: %s", "; ".join(messages))
        raise SchemaCompositionError("Generated schema is invalid", details={"errors": messages})

    bind_resolvers(schema, BASE_RESOLVERS)
    for unit in units:
        bind_resolvers(schema, unit.resolvers)

    logger.info("Headless schema published with %d units", len(units))
    return schema


async def generate_headless_schema(
    db: AsyncSession,
    field_types: FieldTypePluginRegistry,
    model_fields: ModelFieldPluginIndex,
    crud: CrudResolverFactory | None = None,
) -> GraphQLSchema:
    """Load content models and build the complete headless schema from them."""
    models = await load_content_models(db)
    return compose_headless_schema(models, field_types, model_fields, crud)


def compose_headless_schema(
    models: Sequence[ContentModel],
    field_types: FieldTypePluginRegistry,
    model_fields: ModelFieldPluginIndex,
    crud: CrudResolverFactory | None = None,
) -> GraphQLSchema:
    composer = SchemaComposer(field_types, model_fields, crud or EntryCrudResolvers())
    return build_headless_schema(composer.compose(models))


async def execute_operation(
    schema: GraphQLSchema,
    source: str,
    context: HeadlessContext,
    variables: dict[str, Any] | None = None,
    operation_name: str | None = None,
    timeout: float | None = None,
) -> ExecutionResult:
    """
    Execute one GraphQL operation against the headless schema.

    The operation is bounded by ``timeout``. Per-operation state of
    ``context`` is released when it completes, times out or is cancelled.
    """
    try:
        return await asyncio.wait_for(
            graphql(
                schema,
                source,
                context_value=context,
                variable_values=variables,
                operation_name=operation_name,
            ),
            timeout,
        )
    except asyncio.TimeoutError:
        context.close(cancelled=True)
        logger.warning("Headless operation timed out after %ss", timeout, extra={"operation_name": operation_name})
        return ExecutionResult(data=None, errors=[GraphQLError("Operation timed out")])
    except asyncio.CancelledError:
        context.close(cancelled=True)
        raise
    finally:
        context.close()
