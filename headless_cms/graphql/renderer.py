"""
Schema fragment renderer.

Turns one content model into the GraphQL declarations and resolvers of one
render mode by asking the field-type plugins (and, in read mode, the
model-field plugins) for their fragments. The composer wraps the result into
the surrounding object, input, filter and response types.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from headless_cms.exceptions import (
    DuplicateFieldError,
    MissingPluginCapabilityError,
    SchemaCompositionError,
    UnknownFieldTypeError,
)
from headless_cms.graphql.naming import create_manage_type_name, create_read_type_name, create_type_name
from headless_cms.graphql.resolvers import COMMON_FIELD_RESOLVERS, identity_resolver, publishing_resolver
from headless_cms.graphql.sdl import FieldDef, InputValueDef, TypeDefinition
from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant, RenderMode, Resolver
from headless_cms.plugins.registry import FieldTypePluginRegistry, ModelFieldPluginIndex
from headless_cms.schemas.content_model import ContentModel, ContentModelField

COMMON_FIELDS = (
    FieldDef("id", "ID"),
    FieldDef("createdBy", "User"),
    FieldDef("updatedBy", "User"),
    FieldDef("createdOn", "DateTime"),
    FieldDef("updatedOn", "DateTime"),
    FieldDef("savedOn", "DateTime"),
)

ID_FILTERS = (
    InputValueDef("id", "ID"),
    InputValueDef("id_not", "ID"),
    InputValueDef("id_in", "[ID]"),
    InputValueDef("id_not_in", "[ID]"),
)

BASE_SORTERS = ("createdOn_ASC", "createdOn_DESC", "updatedOn_ASC", "updatedOn_DESC")

_RESERVED_FIELD_IDS = frozenset(field.name for field in COMMON_FIELDS)


@dataclass(frozen=True)
class RenderedModel:
    """Fragments of one model in one render mode, in declaration order."""

    model: ContentModel
    mode: RenderMode
    type_name: str
    fields: tuple[FieldDef, ...]
    input_fields: tuple[InputValueDef, ...]
    filter_fields: tuple[InputValueDef, ...]
    sort_tokens: tuple[str, ...]
    definitions: tuple[TypeDefinition, ...]
    resolvers: Mapping[str, Resolver]


class SchemaRenderer:
    """Renders content models with the plugins of a frozen registry."""

    def __init__(
        self,
        field_types: FieldTypePluginRegistry,
        model_fields: ModelFieldPluginIndex,
        models: Sequence[ContentModel],
    ) -> None:
        self.field_types = field_types
        self.model_fields = model_fields
        self.models = tuple(models)

    def type_name(self, model: ContentModel, mode: RenderMode) -> str:
        type_name = create_type_name(model.model_id)
        if mode is RenderMode.MANAGE:
            return create_manage_type_name(type_name)
        return create_read_type_name(type_name)

    def render(self, model: ContentModel, mode: RenderMode) -> RenderedModel:
        """
        Render ``model`` for ``mode``.

        Raises:
            UnknownFieldTypeError: a field's type has no registered plugin.
            MissingPluginCapabilityError: a plugin has no variant for ``mode``.
            DuplicateFieldError: a field id repeats or shadows a common field.
        """
        fields: list[FieldDef] = list(COMMON_FIELDS)
        input_fields: list[InputValueDef] = []
        filter_fields: list[InputValueDef] = list(ID_FILTERS)
        sort_tokens: list[str] = list(BASE_SORTERS)
        definitions: list[TypeDefinition] = []
        resolvers: dict[str, Resolver] = dict(COMMON_FIELD_RESOLVERS)

        seen_field_ids: set[str] = set()
        # Auxiliary types are emitted once per plugin and render pass
        rendered_plugins: set[str] = set()

        for field in model.fields:
            self._claim_field_id(model, field.field_id, seen_field_ids)
            plugin = self._plugin_for(model, field)
            variant = self._variant_for(model, plugin, mode)

            fields.append(self._checked(model, field.field_id, variant.create_type_field(model, field)))

            if mode is RenderMode.MANAGE:
                input_fields.append(variant.create_input_field(model, field))

            if variant.create_list_filters is not None:
                filter_fields.extend(variant.create_list_filters(field))

            if plugin.is_sortable:
                sort_tokens.extend((f"{field.field_id}_ASC", f"{field.field_id}_DESC"))

            if variant.create_types is not None and plugin.field_type not in rendered_plugins:
                rendered_plugins.add(plugin.field_type)
                definitions.extend(variant.create_types(model, self.models))

            resolvers[field.field_id] = self._field_resolver(model, field, variant, mode)

        if mode is RenderMode.READ:
            for model_field in self.model_fields.by_model(model.model_id):
                self._claim_field_id(model, model_field.field_id, seen_field_ids)
                read = model_field.read
                fields.append(self._checked(model, model_field.field_id, read.create_type_field(model)))
                if read.create_types is not None:
                    definitions.extend(read.create_types(model, self.models))
                # Merged as provided; these fields consume resolved values rather than publish them
                resolvers[model_field.field_id] = read.create_resolver(self.models, model)

        return RenderedModel(
            model=model,
            mode=mode,
            type_name=self.type_name(model, mode),
            fields=tuple(fields),
            input_fields=tuple(input_fields),
            filter_fields=tuple(filter_fields),
            sort_tokens=tuple(sort_tokens),
            definitions=tuple(definitions),
            resolvers=MappingProxyType(resolvers),
        )

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _plugin_for(self, model: ContentModel, field: ContentModelField) -> FieldTypePlugin:
        plugin = self.field_types.get(field.type)
        if plugin is None:
            raise UnknownFieldTypeError(field.type, model_id=model.model_id, field_id=field.field_id)
        return plugin

    @staticmethod
    def _variant_for(model: ContentModel, plugin: FieldTypePlugin, mode: RenderMode) -> FieldTypeVariant:
        variant = plugin.variant(mode)
        if variant is None:
            raise MissingPluginCapabilityError(
                plugin.field_type, mode.value, f"{mode.value} variant", model_id=model.model_id
            )
        return variant

    @staticmethod
    def _claim_field_id(model: ContentModel, field_id: str, seen: set[str]) -> None:
        if field_id in seen or field_id in _RESERVED_FIELD_IDS:
            raise DuplicateFieldError(model.model_id, field_id)
        seen.add(field_id)

    @staticmethod
    def _checked(model: ContentModel, field_id: str, declaration: FieldDef) -> FieldDef:
        if declaration.name != field_id:
            raise SchemaCompositionError(
                f"Field '{field_id}' of model '{model.model_id}' was declared as '{declaration.name}'",
                details={"model_id": model.model_id, "field_id": field_id, "declared": declaration.name},
            )
        return declaration

    def _field_resolver(
        self,
        model: ContentModel,
        field: ContentModelField,
        variant: FieldTypeVariant,
        mode: RenderMode,
    ) -> Resolver:
        if mode is RenderMode.MANAGE:
            if variant.create_resolver is None:
                return identity_resolver(field.field_id)
            return variant.create_resolver(self.models, model, field)
        resolver = variant.create_resolver(self.models, model, field)
        return publishing_resolver(model.model_id, field.field_id, resolver)
