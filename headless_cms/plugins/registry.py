"""
Plugin registries used by the schema composer.

FieldTypePluginRegistry: field-type plugins indexed by type tag.
ModelFieldPluginIndex:   model-field plugins grouped by model id.

Both are built once at startup from the installed plugins and handed to the
composer. They are frozen once composition starts; a changed plugin set means
building new registries and composing again.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import TYPE_CHECKING

from headless_cms.exceptions import DuplicateFieldTypeError, MissingPluginCapabilityError, UnknownFieldTypeError

if TYPE_CHECKING:
    from headless_cms.plugins.base import FieldTypePlugin, ModelFieldPlugin

logger = logging.getLogger(__name__)


class FieldTypePluginRegistry:
    """Field-type plugins keyed by ``field_type``."""

    def __init__(self, plugins: Iterable[FieldTypePlugin] = ()) -> None:
        self._plugins: dict[str, FieldTypePlugin] = {}
        self._frozen = False
        for plugin in plugins:
            self.register(plugin)

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, plugin: FieldTypePlugin) -> None:
        """
        Register a field-type plugin.

        Raises:
            DuplicateFieldTypeError: another plugin already owns the tag.
            MissingPluginCapabilityError: a provided variant lacks a required capability.
        """
        if self._frozen:
            raise RuntimeError("Field type registry is frozen; build a new registry instead")
        if plugin.field_type in self._plugins:
            raise DuplicateFieldTypeError(plugin.field_type)
        for mode, capability in plugin.missing_capabilities():
            raise MissingPluginCapabilityError(plugin.field_type, mode.value, capability)

        self._plugins[plugin.field_type] = plugin
        logger.info("Field type plugin registered: %s", plugin.field_type)

    def freeze(self) -> None:
        self._frozen = True

    # ── Lookup ────────────────────────────────────────────────────────────────

    def lookup(self, field_type: str) -> FieldTypePlugin:
        """Return the plugin for ``field_type`` or raise UnknownFieldTypeError."""
        try:
            return self._plugins[field_type]
        except KeyError:
            raise UnknownFieldTypeError(field_type) from None

    def get(self, field_type: str) -> FieldTypePlugin | None:
        return self._plugins.get(field_type)

    def all_plugins(self) -> list[FieldTypePlugin]:
        """Return all registered plugins in registration order."""
        return list(self._plugins.values())

    def __contains__(self, field_type: object) -> bool:
        return field_type in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)


class ModelFieldPluginIndex:
    """Model-field plugins grouped by ``model_id``, in registration order."""

    def __init__(self, plugins: Iterable[ModelFieldPlugin] = ()) -> None:
        grouped: dict[str, list[ModelFieldPlugin]] = defaultdict(list)
        for plugin in plugins:
            grouped[plugin.model_id].append(plugin)
        self._by_model = {model_id: tuple(items) for model_id, items in grouped.items()}

    def by_model(self, model_id: str) -> tuple[ModelFieldPlugin, ...]:
        return self._by_model.get(model_id, ())

    def __len__(self) -> int:
        return sum(len(items) for items in self._by_model.values())
