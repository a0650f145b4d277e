from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant
from headless_cms.plugins.field_types.common import (
    TEXT_OPERATORS,
    list_filters,
    scalar_input_field,
    scalar_type_field,
    value_resolver,
)

plugin = FieldTypePlugin(
    field_type="text",
    description="Single line of text",
    is_sortable=True,
    manage=FieldTypeVariant(
        create_type_field=scalar_type_field("String"),
        create_input_field=scalar_input_field("String"),
        create_list_filters=list_filters("String", TEXT_OPERATORS),
    ),
    read=FieldTypeVariant(
        create_type_field=scalar_type_field("String"),
        create_list_filters=list_filters("String", TEXT_OPERATORS),
        create_resolver=value_resolver,
    ),
)
