"""Pattern resolution and matching tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from graphql_server_codegen.exceptions import PatternResolutionError, SchemaReadError
from graphql_server_codegen.patterns import (
    absolute_patterns,
    compile_pattern,
    expand_braces,
    matches,
    normalize_patterns,
    resolve,
)
from graphql_server_codegen.utils.paths import resolve_against, to_posix


@pytest.fixture
def schema_tree(write_file) -> None:
    write_file("server/a.graphql", "type Query { a: Int }")
    write_file("server/nested/deep/b.graphql", "type Query { b: Int }")
    write_file("server/.cache/c.graphql", "type Query { c: Int }")
    write_file("server/.d.graphql", "type Query { d: Int }")
    write_file("server/notes.txt", "not a schema")
    write_file("other/e.graphql", "type Query { e: Int }")


def test_matches_accepts_single_pattern_or_list() -> None:
    assert matches("/p/server/a.graphql", "/p/server/*.graphql")
    assert matches("/p/server/a.graphql", ["/p/other/*.graphql", "/p/server/*.graphql"])
    assert not matches("/p/server/a.graphql", ["/p/other/*.graphql"])


def test_star_does_not_cross_directories() -> None:
    assert not matches("/p/server/nested/a.graphql", "/p/server/*.graphql")


def test_globstar_matches_zero_or_more_directories() -> None:
    pattern = "/p/server/**/*.graphql"
    assert matches("/p/server/a.graphql", pattern)
    assert matches("/p/server/x/y/z/a.graphql", pattern)
    assert not matches("/p/serverless/a.graphql", pattern)


def test_trailing_globstar_matches_everything_below() -> None:
    assert matches("/p/server/x/a.graphql", "/p/server/**")
    assert not matches("/p/other/a.graphql", "/p/server/**")


def test_wildcards_skip_dotfiles() -> None:
    assert not matches("/p/server/.hidden.graphql", "/p/server/*.graphql")
    assert not matches("/p/server/.cache/a.graphql", "/p/server/**/*.graphql")
    assert matches("/p/server/.cache/a.graphql", "/p/server/.cache/*.graphql")


def test_question_mark_and_character_classes() -> None:
    assert matches("/p/a1.graphql", "/p/a?.graphql")
    assert not matches("/p/a12.graphql", "/p/a?.graphql")
    assert matches("/p/b.graphql", "/p/[abc].graphql")
    assert not matches("/p/d.graphql", "/p/[abc].graphql")
    assert matches("/p/d.graphql", "/p/[!abc].graphql")


def test_brace_alternatives() -> None:
    pattern = "/p/*.{graphql,gql}"
    assert matches("/p/a.graphql", pattern)
    assert matches("/p/a.gql", pattern)
    assert not matches("/p/a.txt", pattern)


def test_expand_braces_handles_nesting() -> None:
    assert expand_braces("a{b,c{d,e}}f") == ["abf", "acdf", "acef"]
    assert expand_braces("x{a}") == ["x{a}"]


def test_separators_are_normalized() -> None:
    assert to_posix("C:\\project\\server\\a.graphql") == "C:/project/server/a.graphql"
    assert matches("C:\\project\\server\\a.graphql", "C:/project/server/*.graphql")


@pytest.mark.parametrize("pattern", ["/p/{a,b.graphql", "/p/a}.graphql", "/p/[ab.graphql"])
def test_malformed_patterns_are_rejected(pattern: str) -> None:
    with pytest.raises(PatternResolutionError):
        compile_pattern(pattern)


@pytest.mark.parametrize("patterns", [None, [], [""], ["  "], [42]])
def test_invalid_pattern_sets_are_rejected(patterns) -> None:
    with pytest.raises(PatternResolutionError):
        normalize_patterns(patterns)


def test_normalize_wraps_single_pattern() -> None:
    assert normalize_patterns("a.graphql") == ["a.graphql"]


def test_resolve_against_collapses_relative_segments() -> None:
    assert resolve_against("/p/app", "./server/../schema/**/*.graphql") == "/p/app/schema/**/*.graphql"
    assert resolve_against("/p/app", "/abs/*.graphql") == "/abs/*.graphql"


def test_resolve_expands_globstar(tmp_path: Path, schema_tree) -> None:
    resolved = resolve("./server/**/*.graphql", tmp_path)
    assert resolved == [
        (tmp_path / "server" / "a.graphql").as_posix(),
        (tmp_path / "server" / "nested" / "deep" / "b.graphql").as_posix(),
    ]


def test_resolved_files_match_their_patterns(tmp_path: Path, schema_tree) -> None:
    patterns = ["./server/**/*.graphql", "./other/*.{graphql,txt}"]
    absolute = absolute_patterns(patterns, tmp_path)
    resolved = resolve(patterns, tmp_path)

    assert (tmp_path / "other" / "e.graphql").as_posix() in resolved
    for path in resolved:
        assert matches(path, absolute)


def test_resolve_skips_missing_directories(tmp_path: Path, schema_tree) -> None:
    resolved = resolve(["./missing/**/*.graphql", "./server/*.graphql"], tmp_path)
    assert resolved == [(tmp_path / "server" / "a.graphql").as_posix()]


def test_resolve_literal_paths_and_deduplicates(tmp_path: Path, schema_tree) -> None:
    resolved = resolve(["./server/a.graphql", "./server/*.graphql", "./server/absent.graphql"], tmp_path)
    assert resolved == [(tmp_path / "server" / "a.graphql").as_posix()]


def test_resolve_nothing_matching_is_empty(tmp_path: Path) -> None:
    assert resolve("./server/**/*.graphql", tmp_path) == []


def _walk_failing_with(monkeypatch, error: OSError) -> None:
    real_walk = os.walk

    def walk(top, onerror=None, **kwargs):
        if onerror is not None:
            onerror(error)
        return real_walk(top, onerror=onerror, **kwargs)

    monkeypatch.setattr(os, "walk", walk)


def test_resolve_reports_unlistable_directories(tmp_path: Path, schema_tree, monkeypatch) -> None:
    locked = (tmp_path / "server" / "users").as_posix()
    _walk_failing_with(monkeypatch, PermissionError(13, "Permission denied", locked))

    with pytest.raises(SchemaReadError) as excinfo:
        resolve("./server/**/*.graphql", tmp_path)
    assert excinfo.value.path == locked


def test_resolve_ignores_directories_removed_while_walking(tmp_path: Path, schema_tree, monkeypatch) -> None:
    gone = (tmp_path / "server" / "gone").as_posix()
    _walk_failing_with(monkeypatch, FileNotFoundError(2, "No such file or directory", gone))

    assert (tmp_path / "server" / "a.graphql").as_posix() in resolve("./server/**/*.graphql", tmp_path)
