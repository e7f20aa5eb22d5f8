"""Type and resolver signature generation tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from graphql_server_codegen.codegen import (
    build_schema_model,
    generate_resolver_types,
    generate_types,
    render_resolver_types,
    render_types,
)
from graphql_server_codegen.config import CodegenConfig
from graphql_server_codegen.exceptions import CodegenError, SchemaParseError

SDL = '''
"""A user account."""
type User {
  id: ID!
  name: String
  friends(first: Int = 10, after: String): [User!]!
}

enum Role {
  ADMIN
  MEMBER
}

scalar DateTime

union SearchResult = User

input UserFilter {
  role: Role!
  createdAfter: DateTime
}

type Query {
  user(id: ID!): User
  search(filter: UserFilter): [SearchResult!]!
  now: DateTime!
}
'''


def _compiles(source: str, filename: str) -> None:
    compile(source, filename, "exec")


def test_schema_types_cover_every_declaration() -> None:
    source = render_types(SDL)

    assert "class User(TypedDict):" in source
    assert '    """A user account."""' in source
    assert "    id: str" in source
    assert "    name: NotRequired[Optional[str]]" in source
    assert "    friends: List['User']" in source
    assert "class Role(str, Enum):" in source
    assert "    ADMIN = 'ADMIN'" in source
    assert "DateTime = Any" in source
    assert "SearchResult = Union['User']" in source
    assert "class UserFilter(TypedDict):" in source
    assert "    role: 'Role'" in source
    assert "    createdAfter: NotRequired[Optional['DateTime']]" in source
    assert "class Query(TypedDict):" in source
    _compiles(source, "graphql_schema_types.py")


def test_schema_types_imports() -> None:
    source = render_types(SDL)

    assert "from enum import Enum" in source
    assert "from typing import Any, List, Optional, Union" in source
    assert "from typing_extensions import NotRequired, TypedDict" in source


def test_declarations_follow_document_order() -> None:
    source = render_types(SDL)

    positions = [source.index(marker) for marker in (
        "class User(", "class Role(", "DateTime =", "SearchResult =", "class UserFilter(", "class Query(",
    )]
    assert positions == sorted(positions)


def test_configured_scalar_type() -> None:
    source = render_types(SDL, {"scalars": {"DateTime": "str"}})

    assert "DateTime = str" in source


def test_resolver_signatures() -> None:
    source = render_resolver_types(SDL)

    assert "class UserFriendsArgs(TypedDict, extra_items=Any):" in source
    assert "    first: Optional[int]" in source
    assert "    after: NotRequired[Optional[str]]" in source
    assert "class UserFriendsResolver(Protocol):" in source
    assert "        parent: User," in source
    assert "        **kwargs: Unpack[UserFriendsArgs]," in source
    assert "    ) -> MaybeAwaitable[List[User]]: ..." in source
    assert "class UserResolvers(TypedDict, total=False):" in source
    assert "    friends: UserFriendsResolver" in source
    assert "        parent: Any," in source
    assert "    ) -> MaybeAwaitable[Optional[User]]: ..." in source
    assert "class Resolvers(TypedDict, total=False):" in source
    assert "    User: UserResolvers" in source
    assert "    Query: QueryResolvers" in source
    assert "from graphql import GraphQLResolveInfo" in source
    _compiles(source, "graphql_resolver_types.py")


def test_field_without_arguments_takes_no_kwargs() -> None:
    source = render_resolver_types("type Query { now: String! }")

    start = source.index("class QueryNowResolver(Protocol):")
    body = source[start:source.index("]: ...", start)]
    assert "kwargs" not in body
    assert "QueryNowArgs" not in source


def test_index_signature_admits_extra_keys_by_default() -> None:
    source = render_resolver_types("type Query { field(arg: Int): String }")

    assert "class QueryFieldArgs(TypedDict, extra_items=Any):" in source
    assert "    arg: NotRequired[Optional[int]]" in source


def test_index_signature_disabled_closes_argument_type() -> None:
    source = render_resolver_types(
        "type Query { field(arg: Int): String }",
        CodegenConfig(use_index_signature=False),
    )

    start = source.index("class QueryFieldArgs(TypedDict, closed=True):")
    body = source[start:source.index("class QueryFieldResolver", start)]
    assert body.count(": ") == 1
    assert "    arg: NotRequired[Optional[int]]" in body
    assert "extra_items" not in source


def test_types_module_is_configurable() -> None:
    source = render_resolver_types(SDL, {"typesModule": "app.schema_types"})

    assert "from app.schema_types import " in source


def test_generation_is_deterministic() -> None:
    assert render_types(SDL) == render_types(SDL)
    assert render_resolver_types(SDL) == render_resolver_types(SDL)


def test_keyword_names_use_functional_syntax() -> None:
    source = render_types("input Range { from: Int!, to: Int! }\nenum Flag { None SET }")

    assert "Range = TypedDict(" in source
    assert "        'from': int," in source
    assert "    None_ = 'None'" in source
    _compiles(source, "graphql_schema_types.py")


def test_repeated_declarations_are_merged() -> None:
    document = "type Query { x: Int }\ntype Query { y: String }\nextend type Query { z: Boolean }"

    source = render_types(document)

    assert source.count("class Query(TypedDict):") == 1
    assert "    x: NotRequired[Optional[int]]" in source
    assert "    y: NotRequired[Optional[str]]" in source
    assert "    z: NotRequired[Optional[bool]]" in source


def test_root_types_from_schema_definition() -> None:
    model = build_schema_model("schema { query: Root }\ntype Root { x: Int }")

    assert model.root_types == {"query": "Root"}


def test_empty_document_generates_empty_modules() -> None:
    types = render_types("  \n")
    resolvers = render_resolver_types("")

    assert "class " not in types
    assert "class Resolvers(TypedDict, total=False):\n    pass\n" in resolvers
    _compiles(types, "graphql_schema_types.py")
    _compiles(resolvers, "graphql_resolver_types.py")


def test_syntax_error_raises_parse_error() -> None:
    with pytest.raises(SchemaParseError) as excinfo:
        render_types("type Query {")

    assert excinfo.value.source_error is not None


@pytest.mark.parametrize(
    "document",
    [
        "query { x }",
        "type Query { x: Missing }",
        "type A { x: Int }\ninput A { y: Int }",
        "type Query { x: Int }\ntype Query { x: String }",
        "union Empty\ntype Query { x: Int }",
        "type str_ { x: Int }\ntype str { y: Int }",
        "enum Mode { mro mro_ }",
        "enum Mode { __hidden }",
    ],
)
def test_unmappable_documents_raise_codegen_error(document: str) -> None:
    with pytest.raises(CodegenError):
        render_types(document)


def test_generate_from_files(tmp_path: Path, write_file) -> None:
    write_file("server/query.graphql", "type Query { hello: String }")

    types = generate_types("./server/**/*.graphql", {}, tmp_path)
    resolvers = generate_resolver_types("./server/**/*.graphql", None, tmp_path)

    assert types.identifier == "#schema-types"
    assert "class Query(TypedDict):" in types.contents
    assert resolvers.identifier == "#resolver-types"
    assert "class QueryHelloResolver(Protocol):" in resolvers.contents


def test_scalar_module_attribute_is_imported() -> None:
    source = render_types(SDL, {"scalars": {"DateTime": "datetime.datetime"}})

    assert "import datetime" in source
    assert "DateTime = datetime.datetime" in source


def test_scalar_from_import_form() -> None:
    source = render_types(SDL, {"scalars": {"DateTime": "decimal:Decimal"}})

    assert "from decimal import Decimal" in source
    assert "DateTime = Decimal" in source


def test_builtin_scalar_override_is_imported_by_resolvers() -> None:
    source = render_resolver_types("type Query { user(id: ID!): String }", {"scalars": {"ID": "uuid.UUID"}})

    assert "import uuid" in source
    assert "    id: uuid.UUID" in source


@pytest.mark.parametrize(
    "scalars",
    [
        {"DateTime": "Decimal"},
        {"DateTime": "List[int]"},
        {"DateTime": "decimal:Role"},
        {"DateTime": "User.thing"},
    ],
)
def test_unusable_scalar_types_raise_codegen_error(scalars) -> None:
    with pytest.raises(CodegenError):
        render_types(SDL, {"scalars": scalars})
