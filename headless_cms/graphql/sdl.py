"""
Structured representation of generated GraphQL type definitions.

Field-type plugins and the schema composer build these declarations as data;
``print_definitions`` turns them into graphql-core AST nodes and prints them
with ``print_ast``. Keeping the declarations structured lets the composer
check names (duplicate types, duplicate root fields) before anything is
printed or parsed.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

from graphql import (
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumValueDefinitionNode,
    FieldDefinitionNode,
    InputObjectTypeDefinitionNode,
    InputValueDefinitionNode,
    NameNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    StringValueNode,
    TypeDefinitionNode,
    parse_type,
    print_ast,
)

# Object and input types must declare at least one field
PLACEHOLDER_FIELD = "_empty"


@dataclass(frozen=True)
class ArgumentDef:
    name: str
    type: str


@dataclass(frozen=True)
class FieldDef:
    name: str
    type: str
    args: tuple[ArgumentDef, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class InputValueDef:
    name: str
    type: str
    description: str | None = None


@dataclass(frozen=True)
class ObjectTypeDef:
    name: str
    fields: tuple[FieldDef, ...]
    description: str | None = None
    extend: bool = False


@dataclass(frozen=True)
class InputTypeDef:
    name: str
    fields: tuple[InputValueDef, ...]
    description: str | None = None


@dataclass(frozen=True)
class EnumTypeDef:
    name: str
    values: tuple[str, ...]
    description: str | None = None


TypeDefinition = Union[ObjectTypeDef, InputTypeDef, EnumTypeDef]


def _name(value: str) -> NameNode:
    return NameNode(value=value)


def _description(description: str | None) -> StringValueNode | None:
    return StringValueNode(value=description, block=False) if description else None


def _input_value_node(value: InputValueDef | ArgumentDef) -> InputValueDefinitionNode:
    return InputValueDefinitionNode(
        name=_name(value.name),
        type=parse_type(value.type),
        description=_description(getattr(value, "description", None)),
        directives=(),
    )


def _field_node(field: FieldDef) -> FieldDefinitionNode:
    return FieldDefinitionNode(
        name=_name(field.name),
        type=parse_type(field.type),
        arguments=tuple(_input_value_node(arg) for arg in field.args),
        description=_description(field.description),
        directives=(),
    )


def definition_node(definition: TypeDefinition) -> TypeDefinitionNode | ObjectTypeExtensionNode:
    """The graphql-core AST node of one declaration."""
    if isinstance(definition, ObjectTypeDef):
        fields = tuple(_field_node(field) for field in definition.fields or (FieldDef(PLACEHOLDER_FIELD, "String"),))
        if definition.extend:
            return ObjectTypeExtensionNode(name=_name(definition.name), fields=fields, interfaces=(), directives=())
        return ObjectTypeDefinitionNode(
            name=_name(definition.name),
            fields=fields,
            description=_description(definition.description),
            interfaces=(),
            directives=(),
        )
    if isinstance(definition, InputTypeDef):
        values = definition.fields or (InputValueDef(PLACEHOLDER_FIELD, "String"),)
        return InputObjectTypeDefinitionNode(
            name=_name(definition.name),
            fields=tuple(_input_value_node(value) for value in values),
            description=_description(definition.description),
            directives=(),
        )
    if isinstance(definition, EnumTypeDef):
        return EnumTypeDefinitionNode(
            name=_name(definition.name),
            values=tuple(EnumValueDefinitionNode(name=_name(value), directives=()) for value in definition.values),
            description=_description(definition.description),
            directives=(),
        )
    raise TypeError(f"Unsupported definition: {definition!r}")


def print_definition(definition: TypeDefinition) -> str:
    """Render one declaration as SDL."""
    return print_ast(definition_node(definition))


def print_definitions(definitions: Iterable[TypeDefinition]) -> str:
    """Render declarations as one SDL document, in the given order."""
    return print_ast(DocumentNode(definitions=tuple(definition_node(definition) for definition in definitions)))
