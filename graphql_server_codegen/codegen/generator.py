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

"""Generate Python type definitions and resolver signatures from a merged schema."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..artifacts import (
    RESOLVER_TYPES_FILENAME,
    RESOLVER_TYPES_IDENTIFIER,
    SCHEMA_TYPES_FILENAME,
    SCHEMA_TYPES_IDENTIFIER,
    GeneratedArtifact,
)
from ..config import CodegenConfig
from ..exceptions import CodegenError
from ..file_io.template_renderer import TemplateRenderer
from ..patterns import PatternSet
from ..schema_loader import aggregate_schema
from ..utils.logging_utils import component_logger
from .schema_model import ENUM, INPUT, INTERFACE, OBJECT, SCALAR, UNION, InputValue, SchemaModel, build_schema_model
from .type_mapping import (
    RESERVED_NAMES,
    PythonTypeMapper,
    enum_member_name,
    needs_functional_syntax,
    python_identifier,
)

logger = logging.getLogger(__name__)

SCHEMA_TYPES_TEMPLATE = "schema_types.py.jinja2"
RESOLVER_TYPES_TEMPLATE = "resolver_types.py.jinja2"

ConfigLike = Union[CodegenConfig, Mapping[str, Any], None]


@dataclass
class TypedDictField:
    name: str
    annotation: str
    description: Optional[str] = None


@dataclass
class TypedDictDecl:
    """A ``TypedDict`` declaration as the templates render it."""

    name: str
    fields: List[TypedDictField] = field(default_factory=list)
    description: Optional[str] = None
    total: bool = True
    closed: bool = False
    extra_items: Optional[str] = None
    kind: str = "typeddict"

    @property
    def functional(self) -> bool:
        return needs_functional_syntax([f.name for f in self.fields])

    @property
    def options(self) -> List[str]:
        options = []
        if not self.total:
            options.append("total=False")
        if self.closed:
            options.append("closed=True")
        if self.extra_items is not None:
            options.append(f"extra_items={self.extra_items}")
        return options


def _format_import(module: str, names: List[str], line_length: int = 88) -> str:
    line = f"from {module} import {', '.join(names)}"
    if len(line) <= line_length:
        return line
    body = "\n".join(f"    {name}," for name in names)
    return f"from {module} import (\n{body}\n)"


def _import_groups(*groups: Dict[str, List[str]]) -> List[List[str]]:
    """Render ``{module: names}`` groups as import lines, skipping empty ones."""

    result = []
    for group in groups:
        lines = [_format_import(module, names) for module, names in group.items() if names]
        if lines:
            result.append(lines)
    return result


def _scalar_import_group(mapper: PythonTypeMapper) -> List[List[str]]:
    lines = [f"import {module}" for module in sorted(mapper.module_imports)]
    lines.extend(
        _format_import(module, sorted(names)) for module, names in sorted(mapper.from_imports.items())
    )
    return [lines] if lines else []


def _input_field(value: InputValue, mapper: PythonTypeMapper, typing_extensions: set) -> TypedDictField:
    annotation = mapper.annotation(value.type)
    if not value.required:
        typing_extensions.add("NotRequired")
        annotation = f"NotRequired[{annotation}]"
    return TypedDictField(value.name, annotation, value.description)


class _NameAllocator:
    """Hands out module-level names, suffixing a counter on collision."""

    def __init__(self, taken) -> None:
        self._taken = set(taken)

    def claim(self, name: str) -> str:
        candidate = name
        counter = 2
        while candidate in self._taken:
            candidate = f"{name}{counter}"
            counter += 1
        self._taken.add(candidate)
        return candidate


def _build_type_declarations(model: SchemaModel, config: CodegenConfig):
    mapper = PythonTypeMapper(model, config.scalars, quote_schema_types=True)
    typing_extensions = set()
    declarations: List[Any] = []
    declared: Dict[str, str] = {}
    has_enum = False

    for type_def in model.types:
        name = python_identifier(type_def.name)
        if name in declared:
            raise CodegenError(
                f"Types '{declared[name]}' and '{type_def.name}' both map to the Python name '{name}'"
            )
        declared[name] = type_def.name

        if type_def.kind == SCALAR:
            declarations.append({
                "kind": "scalar",
                "name": name,
                "annotation": mapper.scalar_type(type_def.name),
                "description": type_def.description,
            })
        elif type_def.kind == ENUM:
            has_enum = True
            members = []
            member_names: Dict[str, str] = {}
            for value in type_def.values:
                member = enum_member_name(value.name)
                if member in member_names:
                    raise CodegenError(
                        f"Enum values '{member_names[member]}' and '{value.name}' of '{type_def.name}' "
                        f"both map to the member name '{member}'"
                    )
                member_names[member] = value.name
                members.append({"name": member, "value": value.name, "description": value.description})
            declarations.append({
                "kind": "enum",
                "name": name,
                "description": type_def.description,
                "members": members,
            })
        elif type_def.kind == UNION:
            if not type_def.members:
                raise CodegenError(f"Union '{type_def.name}' declares no member types")
            mapper.typing_names.add("Union")
            members = ", ".join(mapper.named(member) for member in type_def.members)
            declarations.append({
                "kind": "union",
                "name": name,
                "description": type_def.description,
                "annotation": f"Union[{members}]",
            })
        elif type_def.kind in (OBJECT, INTERFACE):
            typing_extensions.add("TypedDict")
            decl = TypedDictDecl(name=name, description=type_def.description)
            for field_def in type_def.fields:
                annotation = mapper.annotation(field_def.type)
                if field_def.type.nullable:
                    typing_extensions.add("NotRequired")
                    annotation = f"NotRequired[{annotation}]"
                decl.fields.append(TypedDictField(field_def.name, annotation, field_def.description))
            declarations.append(decl)
        elif type_def.kind == INPUT:
            typing_extensions.add("TypedDict")
            decl = TypedDictDecl(name=name, description=type_def.description)
            for value in type_def.input_fields:
                decl.fields.append(_input_field(value, mapper, typing_extensions))
            declarations.append(decl)
        else:
            raise CodegenError(f"Unsupported type kind '{type_def.kind}' for '{type_def.name}'")

    stdlib = {
        "enum": ["Enum"] if has_enum else [],
        "typing": sorted(mapper.typing_names),
    }
    import_groups = _import_groups(stdlib, {"typing_extensions": sorted(typing_extensions)})
    import_groups.extend(_scalar_import_group(mapper))
    return {
        "declarations": declarations,
        "import_groups": import_groups,
    }


def _pascal(name: str) -> str:
    return name[:1].upper() + name[1:]


def _build_resolver_declarations(model: SchemaModel, config: CodegenConfig):
    mapper = PythonTypeMapper(model, config.scalars)
    typing_extensions = {"TypedDict"}
    root_types = model.root_type_names
    names = _NameAllocator(
        {python_identifier(type_def.name) for type_def in model.types} | RESERVED_NAMES
    )
    objects = []

    for type_def in model.of_kind(OBJECT):
        parent = "Any" if type_def.name in root_types else mapper.named(type_def.name)
        fields = []
        for field_def in type_def.fields:
            stem = f"{_pascal(type_def.name)}{_pascal(field_def.name)}"
            args = None
            if field_def.arguments:
                typing_extensions.add("Unpack")
                args = TypedDictDecl(name=names.claim(f"{stem}Args"))
                if config.use_index_signature:
                    args.extra_items = "Any"
                else:
                    args.closed = True
                for value in field_def.arguments:
                    args.fields.append(_input_field(value, mapper, typing_extensions))
            fields.append({
                "name": field_def.name,
                "description": field_def.description,
                "args": args,
                "resolver_name": names.claim(f"{stem}Resolver"),
                "returns": mapper.annotation(field_def.type),
            })

        resolver_map = TypedDictDecl(name=names.claim(f"{_pascal(type_def.name)}Resolvers"), total=False)
        resolver_map.fields = [TypedDictField(f["name"], f["resolver_name"]) for f in fields]
        objects.append({
            "name": type_def.name,
            "parent": parent,
            "fields": fields,
            "resolver_map": resolver_map,
        })

    resolvers = TypedDictDecl(
        name="Resolvers",
        total=False,
        fields=[TypedDictField(obj["name"], obj["resolver_map"].name) for obj in objects],
    )

    typing_names = {"Any", "Awaitable", "Protocol", "TypeVar", "Union"} | mapper.typing_names
    third_party = {
        "graphql": ["GraphQLResolveInfo"],
        "typing_extensions": sorted(typing_extensions),
    }
    import_groups = _import_groups({"typing": sorted(typing_names)}, third_party)
    import_groups.extend(_scalar_import_group(mapper))
    import_groups.extend(_import_groups({config.types_module: list(mapper.schema_names)}))
    return {
        "objects": objects,
        "resolvers": resolvers,
        "import_groups": import_groups,
    }


def _coerce_config(config: ConfigLike) -> CodegenConfig:
    return CodegenConfig.from_dict(config)


def render_types(
    document: str,
    config: ConfigLike = None,
    renderer: Optional[TemplateRenderer] = None,
) -> str:
    """Render the schema type declarations module for ``document``.

    Raises:
        SchemaParseError: If the document is not valid GraphQL.
        CodegenError: If a declaration cannot be mapped.
    """
    model = build_schema_model(document)
    context = _build_type_declarations(model, _coerce_config(config))
    return (renderer or TemplateRenderer()).render_template(SCHEMA_TYPES_TEMPLATE, **context)


def render_resolver_types(
    document: str,
    config: ConfigLike = None,
    renderer: Optional[TemplateRenderer] = None,
) -> str:
    """Render the resolver signature module for ``document``.

    Raises:
        SchemaParseError: If the document is not valid GraphQL.
        CodegenError: If a declaration cannot be mapped.
    """
    model = build_schema_model(document)
    context = _build_resolver_declarations(model, _coerce_config(config))
    return (renderer or TemplateRenderer()).render_template(RESOLVER_TYPES_TEMPLATE, **context)


def generate_types(
    patterns: PatternSet,
    config: ConfigLike,
    root: Union[str, os.PathLike],
    logger: Optional[logging.Logger] = None,
) -> GeneratedArtifact:
    """Aggregate the schema under ``root`` and generate its type declarations."""

    log = component_logger(logger, __name__)
    log.debug("Generating %s", SCHEMA_TYPES_FILENAME)
    document = aggregate_schema(patterns, root, logger=log)
    return GeneratedArtifact(
        name="schema types",
        identifier=SCHEMA_TYPES_IDENTIFIER,
        filename=SCHEMA_TYPES_FILENAME,
        contents=render_types(document, config),
    )


def generate_resolver_types(
    patterns: PatternSet,
    config: ConfigLike,
    root: Union[str, os.PathLike],
    logger: Optional[logging.Logger] = None,
) -> GeneratedArtifact:
    """Aggregate the schema under ``root`` and generate resolver signatures."""

    log = component_logger(logger, __name__)
    log.debug("Generating %s", RESOLVER_TYPES_FILENAME)
    document = aggregate_schema(patterns, root, logger=log)
    return GeneratedArtifact(
        name="resolver types",
        identifier=RESOLVER_TYPES_IDENTIFIER,
        filename=RESOLVER_TYPES_FILENAME,
        contents=render_resolver_types(document, config),
    )
