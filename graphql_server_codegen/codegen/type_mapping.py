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

"""Mapping from GraphQL type references to Python annotation strings."""

from __future__ import annotations

import builtins
import keyword
import re
from typing import Dict, List, Mapping, Optional, Set, Tuple

from ..exceptions import CodegenError
from .schema_model import LIST, NON_NULL, SchemaModel, TypeRef

BUILTIN_SCALARS: Dict[str, str] = {
    "ID": "str",
    "String": "str",
    "Int": "int",
    "Float": "float",
    "Boolean": "bool",
}

DEFAULT_SCALAR_TYPE = "Any"

# Names bound by the generated modules themselves.
RESERVED_NAMES = frozenset(
    {
        "Any",
        "Awaitable",
        "Enum",
        "GraphQLResolveInfo",
        "List",
        "MaybeAwaitable",
        "NotRequired",
        "Optional",
        "Protocol",
        "Resolvers",
        "T",
        "TypeVar",
        "TypedDict",
        "Union",
        "Unpack",
    }
)

BUILTIN_NAMES = frozenset(dir(builtins))

# Member names the enum machinery rejects.
_ENUM_RESERVED_MEMBERS = frozenset({"mro"})

# "module.Name" or "module:Name"
_SCALAR_EXPRESSION = re.compile(
    r"(?P<module>[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)(?::(?P<name>[A-Za-z_]\w*))?"
)

ImportSource = Tuple[str, Optional[str]]


def python_identifier(name: str) -> str:
    """Return a module-level Python name for a GraphQL type."""

    if keyword.iskeyword(name) or name in RESERVED_NAMES or name in BUILTIN_NAMES:
        return f"{name}_"
    return name


def _is_sunder(name: str) -> bool:
    return len(name) > 2 and name[0] == name[-1] == "_" and name[1] != "_" and name[-2] != "_"


def enum_member_name(name: str) -> str:
    """Return the ``Enum`` member name for a GraphQL enum value.

    Raises:
        CodegenError: For names starting with ``__``, which class bodies mangle.
    """
    if name.startswith("__"):
        raise CodegenError(f"Enum value '{name}' cannot be used as a Python enum member")
    if keyword.iskeyword(name) or name in _ENUM_RESERVED_MEMBERS or _is_sunder(name):
        return f"{name}_"
    return name


def needs_functional_syntax(keys: List[str]) -> bool:
    """True if any key cannot be written as a class-body annotation."""

    # Class bodies mangle "__name" and reject keywords.
    return any(keyword.iskeyword(key) or key.startswith("__") for key in keys)


def parse_scalar_type(scalar: str, expression: str) -> Tuple[str, Optional[ImportSource]]:
    """Split a configured scalar type into its annotation and import source.

    ``module:Name`` imports ``Name`` from ``module``; ``package.module.Name``
    imports ``package.module``; a bare name must be a builtin or ``Any``.

    Raises:
        CodegenError: If ``expression`` has none of these forms.
    """
    match = _SCALAR_EXPRESSION.fullmatch(expression.strip())
    if match is None:
        raise CodegenError(
            f"Unsupported Python type '{expression}' for scalar '{scalar}'; "
            "use a builtin, 'module.Name' or 'module:Name'"
        )

    module, name = match.group("module"), match.group("name")
    if name is not None:
        return name, (module, name)
    if "." in module:
        return module, (module.rsplit(".", 1)[0], None)
    if module != DEFAULT_SCALAR_TYPE and module not in BUILTIN_NAMES:
        raise CodegenError(
            f"Python type '{expression}' for scalar '{scalar}' is not a builtin; "
            "write it as 'module.Name' or 'module:Name'"
        )
    return module, None


class PythonTypeMapper:
    """Render :class:`TypeRef` values as Python annotations.

    Records which ``typing`` names, schema types and configured scalar
    modules were used so the caller can emit exactly the imports a generated
    module needs. With ``quote_schema_types`` references to schema types are
    written as forward references.
    """

    def __init__(
        self,
        model: SchemaModel,
        scalars: Optional[Mapping[str, str]] = None,
        quote_schema_types: bool = False,
    ):
        self.model = model
        self.scalars = dict(scalars or {})
        self.quote_schema_types = quote_schema_types
        self.typing_names: Set[str] = set()
        self.schema_names: List[str] = []
        self.module_imports: Set[str] = set()
        self.from_imports: Dict[str, Set[str]] = {}
        self._bound_names = {python_identifier(type_def.name) for type_def in model.types}

    def _python_type(self, scalar: str, expression: str) -> str:
        annotation, source = parse_scalar_type(scalar, expression)
        if annotation == DEFAULT_SCALAR_TYPE:
            self.typing_names.add(DEFAULT_SCALAR_TYPE)
        if source is None:
            return annotation

        module, name = source
        bound = name if name is not None else module.split(".")[0]
        if bound in self._bound_names or bound in RESERVED_NAMES:
            raise CodegenError(
                f"Python type '{expression}' for scalar '{scalar}' would shadow the generated name '{bound}'"
            )
        if name is None:
            self.module_imports.add(module)
        else:
            self.from_imports.setdefault(module, set()).add(name)
        return annotation

    def scalar_type(self, name: str) -> str:
        """Python type a declared custom scalar is aliased to."""

        return self._python_type(name, self.scalars.get(name, DEFAULT_SCALAR_TYPE))

    def named(self, name: str) -> str:
        if name in BUILTIN_SCALARS:
            return self._python_type(name, self.scalars.get(name, BUILTIN_SCALARS[name]))
        identifier = python_identifier(name)
        if identifier not in self.schema_names:
            self.schema_names.append(identifier)
        return repr(identifier) if self.quote_schema_types else identifier

    def annotation(self, ref: TypeRef) -> str:
        if ref.kind == NON_NULL:
            return self._non_null(ref.of_type)
        self.typing_names.add("Optional")
        return f"Optional[{self._non_null(ref)}]"

    def _non_null(self, ref: TypeRef) -> str:
        if ref.kind == LIST:
            self.typing_names.add("List")
            return f"List[{self.annotation(ref.of_type)}]"
        return self.named(ref.name)
