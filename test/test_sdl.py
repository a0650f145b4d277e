"""
Tests for printing structured type definitions as SDL
"""

from graphql import ObjectTypeExtensionNode, parse, print_ast

from headless_cms.graphql.sdl import (
    PLACEHOLDER_FIELD,
    ArgumentDef,
    EnumTypeDef,
    FieldDef,
    InputTypeDef,
    InputValueDef,
    ObjectTypeDef,
    definition_node,
    print_definition,
    print_definitions,
)


class TestPrintDefinition:
    def test_object_type(self):
        sdl = print_definition(ObjectTypeDef("ReadProduct", (FieldDef("id", "ID"), FieldDef("title", "String"))))
        assert sdl == "type ReadProduct {\n  id: ID\n  title: String\n}"

    def test_extend_type_with_arguments(self):
        definition = ObjectTypeDef(
            "HeadlessManageQuery",
            (FieldDef("getProduct", "ManageProductResponse", (ArgumentDef("id", "ID"),)),),
            extend=True,
        )
        assert print_definition(definition) == (
            "extend type HeadlessManageQuery {\n  getProduct(id: ID): ManageProductResponse\n}"
        )

    def test_multiple_arguments_inline(self):
        field = FieldDef("listProducts", "R", (ArgumentDef("page", "Int"), ArgumentDef("perPage", "Int")))
        assert "listProducts(page: Int, perPage: Int): R" in print_definition(ObjectTypeDef("Q", (field,)))

    def test_input_type(self):
        sdl = print_definition(InputTypeDef("ManageProductInput", (InputValueDef("title", "String"),)))
        assert sdl == "input ManageProductInput {\n  title: String\n}"

    def test_enum_type(self):
        sdl = print_definition(EnumTypeDef("ReadProductSorter", ("title_ASC", "title_DESC")))
        assert sdl == "enum ReadProductSorter {\n  title_ASC\n  title_DESC\n}"

    def test_empty_types_get_placeholder(self):
        assert f"  {PLACEHOLDER_FIELD}: String" in print_definition(ObjectTypeDef("Empty", ()))
        assert f"  {PLACEHOLDER_FIELD}: String" in print_definition(InputTypeDef("EmptyInput", ()))

    def test_descriptions_are_escaped(self):
        definition = ObjectTypeDef(
            "ReadProduct",
            (FieldDef("title", "String", description='The "title"'),),
            description="Products\nfor sale",
        )
        sdl = print_definition(definition)
        assert sdl.startswith('"Products\\nfor sale"\ntype ReadProduct {')
        assert '  "The \\"title\\""' in sdl
        # Output must be valid SDL
        parse(sdl)


class TestPrintDefinitions:
    def test_matches_graphql_core_printer(self):
        definitions = [
            ObjectTypeDef("ReadProduct", (FieldDef("title", "String", description="Shown in lists"),), "A product"),
            InputTypeDef("ReadProductFilterInput", (InputValueDef("id_in", "[ID]"),)),
            EnumTypeDef("ReadProductSorter", ("title_ASC",)),
            ObjectTypeDef("HeadlessReadQuery", (FieldDef("listProducts", "[ReadProduct!]!"),), extend=True),
        ]
        sdl = print_definitions(definitions)
        assert sdl == print_ast(parse(sdl))
        assert isinstance(definition_node(definitions[-1]), ObjectTypeExtensionNode)

    def test_joined_in_order(self):
        sdl = print_definitions([ObjectTypeDef("A", ()), EnumTypeDef("B", ("X",))])
        assert sdl.index("type A") < sdl.index("enum B")
        assert "\n\n" in sdl

    def test_empty_sequence(self):
        assert print_definitions([]) == ""
