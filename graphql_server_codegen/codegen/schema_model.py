# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Declaration-ordered model of a merged GraphQL schema document.

The merged document is a textual concatenation of fragments, so the same
type may be declared (or extended) several times. Declarations of the same
name and kind are folded into the first one; anything that cannot be folded
without choosing between two meanings is rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from graphql import GraphQLSyntaxError, parse, print_ast
from graphql.language import ast

from ..exceptions import CodegenError, SchemaParseError

logger = logging.getLogger(__name__)

SCALAR = "scalar"
OBJECT = "object"
INTERFACE = "interface"
UNION = "union"
ENUM = "enum"
INPUT = "input"

NAMED = "named"
LIST = "list"
NON_NULL = "non_null"

BUILTIN_SCALAR_NAMES = ("ID", "String", "Int", "Float", "Boolean")

DEFAULT_ROOT_TYPES = {
    "query": "Query",
    "mutation": "Mutation",
    "subscription": "Subscription",
}

_KIND_BY_NODE = {
    ast.ScalarTypeDefinitionNode: SCALAR,
    ast.ScalarTypeExtensionNode: SCALAR,
    ast.ObjectTypeDefinitionNode: OBJECT,
    ast.ObjectTypeExtensionNode: OBJECT,
    ast.InterfaceTypeDefinitionNode: INTERFACE,
    ast.InterfaceTypeExtensionNode: INTERFACE,
    ast.UnionTypeDefinitionNode: UNION,
    ast.UnionTypeExtensionNode: UNION,
    ast.EnumTypeDefinitionNode: ENUM,
    ast.EnumTypeExtensionNode: ENUM,
    ast.InputObjectTypeDefinitionNode: INPUT,
    ast.InputObjectTypeExtensionNode: INPUT,
}


@dataclass(frozen=True)
class TypeRef:
    """A (possibly wrapped) reference to a named type."""

    kind: str
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = None

    @classmethod
    def from_node(cls, node: ast.TypeNode) -> "TypeRef":
        if isinstance(node, ast.NonNullTypeNode):
            return cls(NON_NULL, of_type=cls.from_node(node.type))
        if isinstance(node, ast.ListTypeNode):
            return cls(LIST, of_type=cls.from_node(node.type))
        return cls(NAMED, name=node.name.value)

    @property
    def named_type(self) -> str:
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        return ref.name

    @property
    def nullable(self) -> bool:
        return self.kind != NON_NULL

    def __str__(self) -> str:
        if self.kind == NON_NULL:
            return f"{self.of_type}!"
        if self.kind == LIST:
            return f"[{self.of_type}]"
        return self.name


@dataclass
class InputValue:
    name: str
    type: TypeRef
    has_default: bool = False
    description: Optional[str] = None

    @property
    def required(self) -> bool:
        # Defaults are filled in by the executor before the resolver runs.
        return not self.type.nullable or self.has_default


@dataclass
class FieldDef:
    name: str
    type: TypeRef
    arguments: List[InputValue] = field(default_factory=list)
    description: Optional[str] = None


@dataclass
class EnumValue:
    name: str
    description: Optional[str] = None


@dataclass
class TypeDef:
    kind: str
    name: str
    description: Optional[str] = None
    fields: List[FieldDef] = field(default_factory=list)
    input_fields: List[InputValue] = field(default_factory=list)
    values: List[EnumValue] = field(default_factory=list)
    members: List[str] = field(default_factory=list)
    interfaces: List[str] = field(default_factory=list)


@dataclass
class SchemaModel:
    types: List[TypeDef] = field(default_factory=list)
    root_types: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[TypeDef]:
        for type_def in self.types:
            if type_def.name == name:
                return type_def
        return None

    def of_kind(self, kind: str) -> Iterator[TypeDef]:
        return (type_def for type_def in self.types if type_def.kind == kind)

    @property
    def root_type_names(self) -> Set[str]:
        return set(self.root_types.values())


def _description(node) -> Optional[str]:
    description = getattr(node, "description", None)
    if description is None:
        return None
    return description.value


def _input_value(node: ast.InputValueDefinitionNode) -> InputValue:
    return InputValue(
        name=node.name.value,
        type=TypeRef.from_node(node.type),
        has_default=node.default_value is not None,
        description=_description(node),
    )


class _SchemaModelBuilder:
    def __init__(self) -> None:
        self.types: Dict[str, TypeDef] = {}
        self.root_types: Dict[str, str] = {}

    def add_type(self, node) -> None:
        kind = _KIND_BY_NODE[type(node)]
        name = node.name.value
        type_def = self.types.get(name)
        if type_def is None:
            type_def = TypeDef(kind=kind, name=name)
            self.types[name] = type_def
        elif type_def.kind != kind:
            raise CodegenError(
                f"Type '{name}' is declared as both {type_def.kind} and {kind}"
            )

        if type_def.description is None:
            type_def.description = _description(node)

        if kind in (OBJECT, INTERFACE):
            for field_node in node.fields or ():
                self._merge_field(type_def, field_node)
            for interface in node.interfaces or ():
                if interface.name.value not in type_def.interfaces:
                    type_def.interfaces.append(interface.name.value)
        elif kind == INPUT:
            for field_node in node.fields or ():
                self._merge_input_field(type_def, field_node)
        elif kind == ENUM:
            known = {value.name for value in type_def.values}
            for value_node in node.values or ():
                if value_node.name.value not in known:
                    known.add(value_node.name.value)
                    type_def.values.append(EnumValue(value_node.name.value, _description(value_node)))
        elif kind == UNION:
            for member in node.types or ():
                if member.name.value not in type_def.members:
                    type_def.members.append(member.name.value)

    def _merge_field(self, type_def: TypeDef, node: ast.FieldDefinitionNode) -> None:
        name = node.name.value
        new_field = FieldDef(
            name=name,
            type=TypeRef.from_node(node.type),
            arguments=[_input_value(arg) for arg in node.arguments or ()],
            description=_description(node),
        )
        existing = next((f for f in type_def.fields if f.name == name), None)
        if existing is None:
            type_def.fields.append(new_field)
            return
        if str(existing.type) != str(new_field.type):
            raise CodegenError(
                f"Field '{type_def.name}.{name}' is declared with conflicting types "
                f"'{existing.type}' and '{new_field.type}'"
            )
        known_args = {arg.name: arg for arg in existing.arguments}
        for arg in new_field.arguments:
            previous = known_args.get(arg.name)
            if previous is None:
                existing.arguments.append(arg)
            elif str(previous.type) != str(arg.type):
                raise CodegenError(
                    f"Argument '{type_def.name}.{name}({arg.name})' is declared with conflicting types "
                    f"'{previous.type}' and '{arg.type}'"
                )

    def _merge_input_field(self, type_def: TypeDef, node: ast.InputValueDefinitionNode) -> None:
        value = _input_value(node)
        existing = next((f for f in type_def.input_fields if f.name == value.name), None)
        if existing is None:
            type_def.input_fields.append(value)
        elif str(existing.type) != str(value.type):
            raise CodegenError(
                f"Input field '{type_def.name}.{value.name}' is declared with conflicting types "
                f"'{existing.type}' and '{value.type}'"
            )

    def add_schema(self, node) -> None:
        for operation_type in node.operation_types or ():
            operation = operation_type.operation.value
            type_name = operation_type.type.name.value
            previous = self.root_types.get(operation)
            if previous is not None and previous != type_name:
                raise CodegenError(
                    f"Root {operation} type is declared as both '{previous}' and '{type_name}'"
                )
            self.root_types[operation] = type_name

    def build(self) -> SchemaModel:
        types = list(self.types.values())
        root_types = dict(self.root_types)
        if not root_types:
            for operation, type_name in DEFAULT_ROOT_TYPES.items():
                candidate = self.types.get(type_name)
                if candidate is not None and candidate.kind == OBJECT:
                    root_types[operation] = type_name
        model = SchemaModel(types=types, root_types=root_types)
        _check_references(model)
        return model


def _referenced_names(type_def: TypeDef) -> Iterator[str]:
    for field_def in type_def.fields:
        yield field_def.type.named_type
        for arg in field_def.arguments:
            yield arg.type.named_type
    for input_field in type_def.input_fields:
        yield input_field.type.named_type
    yield from type_def.members
    yield from type_def.interfaces


def _check_references(model: SchemaModel) -> None:
    declared = {type_def.name for type_def in model.types}
    declared.update(BUILTIN_SCALAR_NAMES)
    for type_def in model.types:
        for name in _referenced_names(type_def):
            if name not in declared:
                raise CodegenError(f"Type '{type_def.name}' references unknown type '{name}'")
    for operation, type_name in model.root_types.items():
        if type_name not in declared:
            raise CodegenError(f"Root {operation} type '{type_name}' is not declared")


def parse_schema_document(document: str) -> ast.DocumentNode:
    """Parse ``document`` as GraphQL SDL.

    Raises:
        SchemaParseError: If the document is not syntactically valid.
    """
    try:
        return parse(document)
    except GraphQLSyntaxError as exc:
        raise SchemaParseError(f"Invalid GraphQL schema: {exc}", source_error=exc) from exc


def build_schema_model(document: str) -> SchemaModel:
    """Build a :class:`SchemaModel` from a merged schema document.

    Raises:
        SchemaParseError: If the document is not syntactically valid.
        CodegenError: For executable definitions, conflicting declarations
            or references to undeclared types.
    """
    if not document.strip():
        logger.debug("Schema document is empty")
        return SchemaModel()

    builder = _SchemaModelBuilder()
    for definition in parse_schema_document(document).definitions:
        if type(definition) in _KIND_BY_NODE:
            builder.add_type(definition)
        elif isinstance(definition, (ast.SchemaDefinitionNode, ast.SchemaExtensionNode)):
            builder.add_schema(definition)
        elif isinstance(definition, ast.DirectiveDefinitionNode):
            logger.debug("Skipping directive definition @%s", definition.name.value)
        else:
            raise CodegenError(
                "Unsupported definition in schema document: "
                f"{print_ast(definition).splitlines()[0]}"
            )
    return builder.build()
