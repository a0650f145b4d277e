"""
Date/time field type.

Values are stored as ISO 8601 strings and resolved back to ``datetime`` for
the ``DateTime`` scalar. ISO strings of one timezone compare in time order,
which the range filters rely on.
"""

from __future__ import annotations

import logging
from datetime import datetime

from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant
from headless_cms.plugins.field_types.common import (
    RANGE_OPERATORS,
    list_filters,
    scalar_input_field,
    scalar_type_field,
)

logger = logging.getLogger(__name__)

_filters = list_filters("DateTime", ("eq", "not", *RANGE_OPERATORS))


def create_resolver(models, model, field):
    field_id = field.field_id

    def resolve(entry, info, **kwargs):
        value = entry.get(field_id)
        if not isinstance(value, str):
            return value
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.warning("Stored value of %s.%s is not an ISO date: %r", model.model_id, field_id, value)
            return None

    return resolve


plugin = FieldTypePlugin(
    field_type="datetime",
    description="Date and time",
    is_sortable=True,
    manage=FieldTypeVariant(
        create_type_field=scalar_type_field("DateTime"),
        create_input_field=scalar_input_field("DateTime"),
        create_list_filters=_filters,
        create_resolver=create_resolver,
    ),
    read=FieldTypeVariant(
        create_type_field=scalar_type_field("DateTime"),
        create_list_filters=_filters,
        create_resolver=create_resolver,
    ),
)
