from headless_cms.plugins.base import FieldTypePlugin, FieldTypeVariant
from headless_cms.plugins.field_types.common import list_filters, scalar_input_field, scalar_type_field, value_resolver

_filters = list_filters("Boolean", ("eq", "not"))

plugin = FieldTypePlugin(
    field_type="boolean",
    description="True / false switch",
    manage=FieldTypeVariant(
        create_type_field=scalar_type_field("Boolean"),
        create_input_field=scalar_input_field("Boolean"),
        create_list_filters=_filters,
    ),
    read=FieldTypeVariant(
        create_type_field=scalar_type_field("Boolean"),
        create_list_filters=_filters,
        create_resolver=value_resolver,
    ),
)
