"""Command line interface tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from graphql_server_codegen import cli


@pytest.fixture(autouse=True)
def _keep_test_logging(monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_split_stream_logging", lambda **kwargs: None)


def test_build_writes_artifacts(tmp_path: Path, write_file) -> None:
    write_file("server/schema.graphql", "type Query { hello: String }")

    assert cli.main(["--root", str(tmp_path), "build"]) == 0

    out_dir = tmp_path / ".graphql"
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "graphql_resolver_types.py",
        "graphql_schema.py",
        "graphql_schema_types.py",
    ]


def test_build_reads_default_options_file(tmp_path: Path, write_file) -> None:
    write_file("graphql/query.graphql", "type Query { hello: String }")
    write_file("graphql_server.yaml", "schema: ./graphql/*.graphql\n")

    assert cli.main(["--root", str(tmp_path), "--out-dir", "generated", "build"]) == 0
    assert "hello" in (tmp_path / "generated" / "graphql_schema.py").read_text(encoding="utf-8")


def test_invalid_options_exit_with_error(tmp_path: Path, write_file) -> None:
    config = write_file("custom.yaml", "codegen:\n  useIndexSignature: maybe\n")

    assert cli.main(["--root", str(tmp_path), "--config", str(config), "build"]) == 1


def test_broken_schema_exits_with_error(tmp_path: Path, write_file) -> None:
    write_file("server/schema.graphql", "type Query {")

    assert cli.main(["--root", str(tmp_path), "build"]) == 1
    assert not (tmp_path / ".graphql").exists()


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.main([])
