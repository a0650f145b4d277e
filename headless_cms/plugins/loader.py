"""
Plugin loader.

Reads the plugin configuration file (``settings.plugins_config_file``)
and builds the registries handed to the schema composer at startup.

Config format::

    {"field_types": {"long-text": {"enabled": false}}}

Field types missing from the file are enabled.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from headless_cms.config import settings
from headless_cms.plugins.base import FieldTypePlugin, ModelFieldPlugin
from headless_cms.plugins.registry import FieldTypePluginRegistry, ModelFieldPluginIndex

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG: dict[str, dict[str, Any]] = {"field_types": {}}


def _config_file() -> Path:
    return Path(settings.plugins_config_file)


# ── Config I/O ────────────────────────────────────────────────────────────────


def load_plugins_config() -> dict[str, dict[str, Any]]:
    """
    Load plugin configuration from disk.

    Returns defaults if the file does not exist or cannot be parsed.
    """
    config_file = _config_file()
    if config_file.exists():
        try:
            return json.loads(config_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read plugins config: %s", exc)
    return copy.deepcopy(_DEFAULT_CONFIG)


def is_field_type_enabled(config: dict[str, dict[str, Any]], field_type: str) -> bool:
    return bool(config.get("field_types", {}).get(field_type, {}).get("enabled", True))


# ── Startup initialisation ────────────────────────────────────────────────────


def initialize_plugins(
    extra_field_types: Iterable[FieldTypePlugin] = (),
    model_field_plugins: Iterable[ModelFieldPlugin] = (),
    config: dict[str, dict[str, Any]] | None = None,
) -> tuple[FieldTypePluginRegistry, ModelFieldPluginIndex]:
    """
    Build the field-type registry and model-field index.

    Built-in field types come first, minus those disabled in the config;
    ``extra_field_types`` are registered after them and may not reuse a tag.
    """
    # Deferred import: built-in plugins import the graphql package
    from headless_cms.plugins.field_types import BUILTIN_FIELD_TYPES

    if config is None:
        config = load_plugins_config()

    field_types = FieldTypePluginRegistry()
    for plugin in (*BUILTIN_FIELD_TYPES, *extra_field_types):
        if not is_field_type_enabled(config, plugin.field_type):
            logger.info("Field type plugin disabled by config: %s", plugin.field_type)
            continue
        field_types.register(plugin)

    model_fields = ModelFieldPluginIndex(model_field_plugins)
    logger.info(
        "Plugin initialisation complete: %d field types, %d model fields",
        len(field_types),
        len(model_fields),
    )
    return field_types, model_fields
