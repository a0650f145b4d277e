from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant
from headless_cms.plugins.field_types.common import (
    EQUALITY_OPERATORS,
    RANGE_OPERATORS,
    list_filters,
    scalar_input_field,
    scalar_type_field,
    value_resolver,
)

_filters = list_filters("Float", (*EQUALITY_OPERATORS, *RANGE_OPERATORS))

plugin = FieldTypePlugin(
    field_type="number",
    description="Integer or decimal number",
    is_sortable=True,
    manage=FieldTypeVariant(
        create_type_field=scalar_type_field("Float"),
        create_input_field=scalar_input_field("Float"),
        create_list_filters=_filters,
    ),
    read=FieldTypeVariant(
        create_type_field=scalar_type_field("Float"),
        create_list_filters=_filters,
        create_resolver=value_resolver,
    ),
)
