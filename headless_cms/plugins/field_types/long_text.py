from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant
from headless_cms.plugins.field_types.common import list_filters, scalar_input_field, scalar_type_field, value_resolver

# Long text is searchable but neither sortable nor matched exactly
_filters = list_filters("String", ("contains", "not_contains"))

plugin = FieldTypePlugin(
    field_type="long-text",
    description="Multi-line text",
    manage=FieldTypeVariant(
        create_type_field=scalar_type_field("String"),
        create_input_field=scalar_input_field("String"),
        create_list_filters=_filters,
    ),
    read=FieldTypeVariant(
        create_type_field=scalar_type_field("String"),
        create_list_filters=_filters,
        create_resolver=value_resolver,
    ),
)
