"""
Schema composer.

Builds two schema units per content model:

manage  ``Manage<Type>`` with input, filter and response types; queries on
        ``HeadlessManageQuery`` and mutations on ``HeadlessManageMutation``.
read    ``Read<Type>`` with filter, sorter and response types; queries on
        ``HeadlessReadQuery``. Field results are published as resolved values.

Composition is a single synchronous pass; units come out in model order
(manage before read). Any name collision stops composition before anything is
published.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Protocol

from headless_cms.exceptions import DuplicateTypeNameError
from headless_cms.graphql.naming import create_type_name, pluralize
from headless_cms.graphql.renderer import RenderedModel, SchemaRenderer
from headless_cms.graphql.sdl import (
    ArgumentDef,
    EnumTypeDef,
    FieldDef,
    InputTypeDef,
    ObjectTypeDef,
    TypeDefinition,
    print_definitions,
)
from headless_cms.plugins.base import RenderMode, Resolver
from headless_cms.plugins.registry import FieldTypePluginRegistry, ModelFieldPluginIndex
from headless_cms.schemas.content_model import ContentModel

logger = logging.getLogger(__name__)

MANAGE_QUERY = "HeadlessManageQuery"
MANAGE_MUTATION = "HeadlessManageMutation"
READ_QUERY = "HeadlessReadQuery"

# Declared by the base schema; generated types may not reuse them
RESERVED_TYPE_NAMES = frozenset(
    {
        "Query",
        "Mutation",
        MANAGE_QUERY,
        MANAGE_MUTATION,
        READ_QUERY,
        "User",
        "Error",
        "ListMeta",
        "DeleteResponse",
        "DateTime",
        "JSON",
    }
)


class CrudResolverFactory(Protocol):
    """Creates the root query and mutation resolvers of one model."""

    def get(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver: ...

    def list(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver: ...

    def create(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver: ...

    def update(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver: ...

    def delete(self, models: Sequence[ContentModel], model: ContentModel) -> Resolver: ...


@dataclass(frozen=True)
class SchemaUnit:
    """Type definitions and resolvers of one model in one render mode."""

    name: str
    model_id: str
    mode: RenderMode
    definitions: tuple[TypeDefinition, ...]
    resolvers: Mapping[str, Mapping[str, Resolver]]

    @property
    def type_defs(self) -> str:
        return print_definitions(self.definitions)

    def declared_type_names(self) -> list[str]:
        return [
            definition.name
            for definition in self.definitions
            if not (isinstance(definition, ObjectTypeDef) and definition.extend)
        ]

    def root_fields(self) -> list[tuple[str, str]]:
        """(parent type, field name) of every field added to a shared root type."""
        return [
            (definition.name, field.name)
            for definition in self.definitions
            if isinstance(definition, ObjectTypeDef) and definition.extend
            for field in definition.fields
        ]


def _frozen(resolvers: dict[str, dict[str, Resolver]]) -> Mapping[str, Mapping[str, Resolver]]:
    return MappingProxyType({type_name: MappingProxyType(fields) for type_name, fields in resolvers.items()})


class SchemaComposer:
    """Composes schema units for a set of content models."""

    def __init__(
        self,
        field_types: FieldTypePluginRegistry,
        model_fields: ModelFieldPluginIndex,
        crud: CrudResolverFactory,
    ) -> None:
        field_types.freeze()
        self.field_types = field_types
        self.model_fields = model_fields
        self.crud = crud

    def compose(self, models: Sequence[ContentModel]) -> list[SchemaUnit]:
        """
        Build the manage and read units of every model.

        Raises:
            SchemaCompositionError: (or a subclass) on any invalid model,
                missing plugin or name collision.
        """
        models = tuple(models)
        self._check_type_names(models)

        renderer = SchemaRenderer(self.field_types, self.model_fields, models)
        units: list[SchemaUnit] = []
        for model in models:
            for mode in (RenderMode.MANAGE, RenderMode.READ):
                rendered = renderer.render(model, mode)
                if mode is RenderMode.MANAGE:
                    unit = self._manage_unit(models, rendered)
                else:
                    unit = self._read_unit(models, rendered)
                logger.info("Schema unit generated: %s (%d definitions)", unit.name, len(unit.definitions))
                units.append(unit)

        self._check_collisions(units)
        logger.info("Headless schema composed: %d models, %d units", len(models), len(units))
        return units

    # ── Unit construction ─────────────────────────────────────────────────────

    def _manage_unit(self, models: tuple[ContentModel, ...], rendered: RenderedModel) -> SchemaUnit:
        model = rendered.model
        type_name = create_type_name(model.model_id)
        plural = pluralize(type_name)
        object_type = rendered.type_name

        definitions: list[TypeDefinition] = [
            *rendered.definitions,
            ObjectTypeDef(object_type, rendered.fields, description=model.description),
            InputTypeDef(f"{object_type}Input", rendered.input_fields),
            InputTypeDef(f"{object_type}FilterInput", rendered.filter_fields),
            *self._response_types(object_type),
            ObjectTypeDef(
                MANAGE_QUERY,
                (
                    FieldDef(f"get{type_name}", f"{object_type}Response", (ArgumentDef("id", "ID"),)),
                    FieldDef(
                        f"list{plural}",
                        f"{object_type}ListResponse",
                        (
                            ArgumentDef("page", "Int"),
                            ArgumentDef("perPage", "Int"),
                            ArgumentDef("sort", "JSON"),
                            ArgumentDef("where", f"{object_type}FilterInput"),
                        ),
                    ),
                ),
                extend=True,
            ),
            ObjectTypeDef(
                MANAGE_MUTATION,
                (
                    FieldDef(
                        f"create{type_name}",
                        f"{object_type}Response",
                        (ArgumentDef("data", f"{object_type}Input!"),),
                    ),
                    FieldDef(
                        f"update{type_name}",
                        f"{object_type}Response",
                        (ArgumentDef("id", "ID!"), ArgumentDef("data", f"{object_type}Input!")),
                    ),
                    FieldDef(f"delete{type_name}", "DeleteResponse", (ArgumentDef("id", "ID!"),)),
                ),
                extend=True,
            ),
        ]

        resolvers = {
            object_type: dict(rendered.resolvers),
            MANAGE_QUERY: {
                f"get{type_name}": self.crud.get(models, model),
                f"list{plural}": self.crud.list(models, model),
            },
            MANAGE_MUTATION: {
                f"create{type_name}": self.crud.create(models, model),
                f"update{type_name}": self.crud.update(models, model),
                f"delete{type_name}": self.crud.delete(models, model),
            },
        }
        return self._unit(rendered, definitions, resolvers)

    def _read_unit(self, models: tuple[ContentModel, ...], rendered: RenderedModel) -> SchemaUnit:
        model = rendered.model
        type_name = create_type_name(model.model_id)
        plural = pluralize(type_name)
        object_type = rendered.type_name
        sorter = f"{object_type}Sorter"

        definitions: list[TypeDefinition] = [
            *rendered.definitions,
            ObjectTypeDef(object_type, rendered.fields, description=model.description),
            InputTypeDef(f"{object_type}FilterInput", rendered.filter_fields),
            EnumTypeDef(sorter, rendered.sort_tokens),
            *self._response_types(object_type),
            ObjectTypeDef(
                READ_QUERY,
                (
                    FieldDef(
                        f"get{type_name}",
                        f"{object_type}Response",
                        (ArgumentDef("where", f"{object_type}FilterInput"), ArgumentDef("sort", f"[{sorter}]")),
                    ),
                    FieldDef(
                        f"list{plural}",
                        f"{object_type}ListResponse",
                        (
                            ArgumentDef("page", "Int"),
                            ArgumentDef("perPage", "Int"),
                            ArgumentDef("where", f"{object_type}FilterInput"),
                            ArgumentDef("sort", f"[{sorter}]"),
                        ),
                    ),
                ),
                extend=True,
            ),
        ]

        resolvers = {
            object_type: dict(rendered.resolvers),
            READ_QUERY: {
                f"get{type_name}": self.crud.get(models, model),
                f"list{plural}": self.crud.list(models, model),
            },
        }
        return self._unit(rendered, definitions, resolvers)

    @staticmethod
    def _response_types(object_type: str) -> tuple[ObjectTypeDef, ObjectTypeDef]:
        return (
            ObjectTypeDef(
                f"{object_type}Response",
                (FieldDef("data", object_type), FieldDef("error", "Error")),
            ),
            ObjectTypeDef(
                f"{object_type}ListResponse",
                (FieldDef("data", f"[{object_type}]"), FieldDef("meta", "ListMeta"), FieldDef("error", "Error")),
            ),
        )

    @staticmethod
    def _unit(
        rendered: RenderedModel,
        definitions: list[TypeDefinition],
        resolvers: dict[str, dict[str, Resolver]],
    ) -> SchemaUnit:
        return SchemaUnit(
            name=f"graphql-schema-{rendered.model.model_id}-{rendered.mode.value}",
            model_id=rendered.model.model_id,
            mode=rendered.mode,
            definitions=tuple(definitions),
            resolvers=_frozen(resolvers),
        )

    # ── Collision checks ──────────────────────────────────────────────────────

    @staticmethod
    def _check_type_names(models: tuple[ContentModel, ...]) -> None:
        """Model ids must map to distinct type names."""
        owners: dict[str, list[str]] = defaultdict(list)
        for model in models:
            owners[create_type_name(model.model_id)].append(model.model_id)
        for type_name, model_ids in owners.items():
            if len(model_ids) > 1:
                raise DuplicateTypeNameError(type_name, model_ids)

    @staticmethod
    def _check_collisions(units: list[SchemaUnit]) -> None:
        type_owners: dict[str, list[str]] = defaultdict(list)
        field_owners: dict[tuple[str, str], list[str]] = defaultdict(list)

        for unit in units:
            for name in unit.declared_type_names():
                type_owners[name].append(unit.name)
            for parent, field_name in unit.root_fields():
                field_owners[(parent, field_name)].append(unit.name)

        for name, owners in type_owners.items():
            if name in RESERVED_TYPE_NAMES:
                raise DuplicateTypeNameError(name, ["base schema", *owners])
            if len(owners) > 1:
                raise DuplicateTypeNameError(name, owners)

        for (parent, field_name), owners in field_owners.items():
            if len(owners) > 1:
                raise DuplicateTypeNameError(f"{parent}.{field_name}", owners)
