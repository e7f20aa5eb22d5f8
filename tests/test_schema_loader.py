"""Schema aggregation tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from graphql_server_codegen.exceptions import SchemaReadError
from graphql_server_codegen.schema_loader import (
    SCHEMA_EXPORT_NAME,
    aggregate_schema,
    create_schema_module,
    read_schema_files,
    render_schema_module,
)


def test_aggregate_concatenates_in_path_order(tmp_path: Path, write_file) -> None:
    write_file("b.graphql", "type Query { y: String }")
    write_file("a.graphql", "type Query { x: Int }")

    document = aggregate_schema(["b.graphql", "a.graphql"], tmp_path)

    assert document == "type Query { x: Int }\ntype Query { y: String }"


def test_aggregate_is_independent_of_pattern_order(tmp_path: Path, write_file) -> None:
    write_file("server/users.graphql", "type User { id: ID! }")
    write_file("server/query.graphql", "type Query { me: User }")

    forward = aggregate_schema(["./server/query.graphql", "./server/users.graphql"], tmp_path)
    backward = aggregate_schema(["./server/users.graphql", "./server/query.graphql"], tmp_path)

    assert forward == backward


def test_aggregate_without_matches_warns(tmp_path: Path, caplog) -> None:
    caplog.set_level(logging.WARNING)

    assert aggregate_schema("./server/**/*.graphql", tmp_path) == ""
    assert "No schema files matched" in caplog.text


def test_read_missing_file_raises(tmp_path: Path) -> None:
    missing = (tmp_path / "gone.graphql").as_posix()

    with pytest.raises(SchemaReadError) as excinfo:
        read_schema_files([missing])

    assert excinfo.value.path == missing


def test_read_undecodable_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "binary.graphql"
    path.write_bytes(b"\xff\xfe\x00type")

    with pytest.raises(SchemaReadError):
        read_schema_files([path.as_posix()])


def test_schema_module_exports_document() -> None:
    document = '"""Quoted \\ description"""\ntype Query { x: Int }\n'

    source = render_schema_module(document)
    namespace: dict = {}
    exec(compile(source, "graphql_schema.py", "exec"), namespace)

    assert namespace[SCHEMA_EXPORT_NAME] == document
    assert namespace["__all__"] == [SCHEMA_EXPORT_NAME]


def test_create_schema_module_reads_sources(tmp_path: Path, write_file) -> None:
    write_file("server/schema.graphql", "type Query { hello: String }")

    source = create_schema_module("./server/**/*.graphql", tmp_path)

    assert "type_defs = 'type Query { hello: String }'" in source
