"""
Plugin contracts for headless schema generation.

FieldTypePlugin:   generates schema fragments and resolvers for one field type
                   tag, once for each render mode ("manage" and "read").
ModelFieldPlugin:  contributes an extra field to one content model's read
                   projection; the field is not part of the stored model.

Capabilities are plain optional callables. ``None`` means the plugin does not
provide the capability; whether that is allowed depends on the render mode
(see ``REQUIRED_CAPABILITIES``).
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from headless_cms.graphql.sdl import FieldDef, InputValueDef, TypeDefinition
    from headless_cms.schemas.content_model import ContentModel, ContentModelField

# graphql-core resolver signature: resolver(source, info, **arguments)
Resolver = Callable[..., Any]


class RenderMode(str, enum.Enum):
    MANAGE = "manage"
    READ = "read"


@dataclass(frozen=True)
class FieldTypeVariant:
    """
    Schema generation capabilities of a field type for one render mode.

    Attributes:
        create_type_field:   (model, field) -> FieldDef for the object type.
        create_input_field:  (model, field) -> InputValueDef for the mutation input.
        create_list_filters: (field) -> filter InputValueDefs; absent means not filterable.
        create_types:        (model, models) -> auxiliary declarations, rendered once per pass.
        create_resolver:     (models, model, field) -> resolver for the field.
    """

    create_type_field: Callable[[ContentModel, ContentModelField], FieldDef] | None = None
    create_input_field: Callable[[ContentModel, ContentModelField], InputValueDef] | None = None
    create_list_filters: Callable[[ContentModelField], Sequence[InputValueDef]] | None = None
    create_types: Callable[[ContentModel, Sequence[ContentModel]], Sequence[TypeDefinition]] | None = None
    create_resolver: Callable[[Sequence[ContentModel], ContentModel, ContentModelField], Resolver] | None = None


REQUIRED_CAPABILITIES: dict[RenderMode, tuple[str, ...]] = {
    RenderMode.MANAGE: ("create_type_field", "create_input_field"),
    RenderMode.READ: ("create_type_field", "create_resolver"),
}

CAPABILITIES = tuple(f.name for f in fields(FieldTypeVariant))


@dataclass(frozen=True)
class FieldTypePlugin:
    """A field type: its tag, sortability and one variant per render mode."""

    field_type: str
    manage: FieldTypeVariant | None = None
    read: FieldTypeVariant | None = None
    is_sortable: bool = False
    description: str = ""

    def variant(self, mode: RenderMode) -> FieldTypeVariant | None:
        return self.manage if mode is RenderMode.MANAGE else self.read

    def missing_capabilities(self) -> list[tuple[RenderMode, str]]:
        """Required capabilities absent from the variants this plugin provides."""
        missing = []
        for mode, required in REQUIRED_CAPABILITIES.items():
            variant = self.variant(mode)
            if variant is None:
                continue
            missing.extend((mode, name) for name in required if getattr(variant, name) is None)
        return missing


@dataclass(frozen=True)
class ModelFieldVariant:
    """
    Read-projection capabilities of a model-field plugin.

    Attributes:
        create_type_field: (model) -> FieldDef appended to the read object type.
        create_resolver:   (models, model) -> resolver for the field.
        create_types:      (model, models) -> auxiliary declarations.
    """

    create_type_field: Callable[[ContentModel], FieldDef]
    create_resolver: Callable[[Sequence[ContentModel], ContentModel], Resolver]
    create_types: Callable[[ContentModel, Sequence[ContentModel]], Sequence[TypeDefinition]] | None = None


@dataclass(frozen=True)
class ModelFieldPlugin:
    """A supplemental read-projection field for the model ``model_id``."""

    model_id: str
    field_id: str
    read: ModelFieldVariant
