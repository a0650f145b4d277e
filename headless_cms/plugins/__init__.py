"""
Schema generation plugins.

Public API:
    FieldTypePlugin, FieldTypeVariant:   field-type plugin contract
    ModelFieldPlugin, ModelFieldVariant: per-model supplemental read field
    FieldTypePluginRegistry:             field-type plugins by tag
    ModelFieldPluginIndex:               model-field plugins by model id
"""

from .base import FieldTypePlugin, FieldTypeVariant, ModelFieldPlugin, ModelFieldVariant, RenderMode
from .registry import FieldTypePluginRegistry, ModelFieldPluginIndex

__all__ = [
    "FieldTypePlugin",
    "FieldTypeVariant",
    "ModelFieldPlugin",
    "ModelFieldVariant",
    "RenderMode",
    "FieldTypePluginRegistry",
    "ModelFieldPluginIndex",
]
