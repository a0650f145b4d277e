"""
Content model records handed to the schema composer.

Records are frozen: a generated schema is only valid for the exact model set
it was composed from. Field names accept both the stored camelCase keys
(``fieldId``, ``modelId``) and their snake_case attribute names.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContentModelField(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field_id: str = Field(..., alias="fieldId", min_length=1, description="Field identifier, unique within its model.")
    type: str = Field(..., min_length=1, description="Field type tag resolved against the field-type registry.")
    label: str | None = Field(None, description="Human-readable label.")
    settings: dict[str, Any] = Field(default_factory=dict, description="Type-specific settings.")


class ContentModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, protected_namespaces=())

    model_id: str = Field(..., alias="modelId", min_length=1, description="Unique model identifier.")
    name: str | None = Field(None, description="Human-readable model name.")
    description: str | None = Field(None, description="Rendered as the GraphQL type description.")
    fields: tuple[ContentModelField, ...] = Field(default_factory=tuple)
