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

"""Glob pattern resolution and matching for schema source files.

Pattern syntax follows minimatch defaults:

  * ``*`` matches any run of characters except ``/``
  * ``?`` matches a single character except ``/``
  * ``[abc]`` / ``[!abc]`` character classes
  * ``**`` as a whole path segment matches zero or more directories
  * ``{a,b}`` brace alternation, nesting allowed

Wildcards never match a leading ``.`` of a path segment.

Resolution walks the filesystem and keeps the files accepted by
:func:`matches`, so a change event is relevant exactly when resolution
would have picked the file up.
"""

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Sequence, Union

from .exceptions import PatternResolutionError, SchemaReadError
from .utils.logging_utils import component_logger
from .utils.paths import resolve_against, to_posix

logger = logging.getLogger(__name__)

PatternSet = Union[str, Sequence[str]]

_MAGIC_CHARS = frozenset("*?[{")


def normalize_patterns(patterns: Optional[PatternSet]) -> List[str]:
    """Normalize a single pattern or a sequence of patterns to a list.

    Raises:
        PatternResolutionError: If the set is empty or holds a non-string or
            blank entry.
    """
    if patterns is None:
        raise PatternResolutionError("Schema pattern set is missing")

    if isinstance(patterns, str):
        patterns = [patterns]

    result = list(patterns)
    if not result:
        raise PatternResolutionError("Schema pattern set is empty")

    for pattern in result:
        if not isinstance(pattern, str):
            raise PatternResolutionError(
                f"Schema pattern must be a string, got {type(pattern).__name__}: {pattern!r}"
            )
        if not pattern.strip():
            raise PatternResolutionError("Schema pattern must not be blank")

    return result


def absolute_patterns(patterns: PatternSet, root: Union[str, os.PathLike]) -> List[str]:
    """Make every pattern absolute against ``root`` and validate its syntax."""

    result = [resolve_against(root, pattern) for pattern in normalize_patterns(patterns)]
    for pattern in result:
        compile_pattern(pattern)
    return result


def has_magic(pattern: str) -> bool:
    return any(ch in _MAGIC_CHARS for ch in pattern)


def _find_class_end(pattern: str, start: int) -> int:
    """Index of the ``]`` closing the class opened at ``start``, or -1."""

    i = start + 1
    if i < len(pattern) and pattern[i] in "!^":
        i += 1
    # A leading "]" is a literal member of the class.
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern):
        if pattern[i] == "]":
            return i
        if pattern[i] == "/":
            return -1
        i += 1
    return -1


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives into separate brace-free patterns.

    Braces without a top-level comma are kept literally.
    """
    depth = 0
    open_at = -1
    commas: List[int] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "[":
            end = _find_class_end(pattern, i)
            if end < 0:
                raise PatternResolutionError(f"Unterminated character class in pattern: {pattern!r}")
            i = end + 1
            continue
        if ch == "{":
            if depth == 0:
                open_at = i
                commas = []
            depth += 1
        elif ch == "}":
            if depth == 0:
                raise PatternResolutionError(f"Unbalanced '}}' in pattern: {pattern!r}")
            depth -= 1
            if depth == 0 and commas:
                prefix = pattern[:open_at]
                suffix = pattern[i + 1:]
                bounds = [open_at] + commas + [i]
                expanded: List[str] = []
                for k in range(len(bounds) - 1):
                    alternative = pattern[bounds[k] + 1:bounds[k + 1]]
                    for item in expand_braces(prefix + alternative + suffix):
                        if item not in expanded:
                            expanded.append(item)
                return expanded
        elif ch == "," and depth == 1:
            commas.append(i)
        i += 1

    if depth:
        raise PatternResolutionError(f"Unbalanced '{{' in pattern: {pattern!r}")
    return [pattern]


def _translate_segment(segment: str, pattern: str) -> str:
    parts: List[str] = []
    if segment[:1] in ("*", "?", "["):
        parts.append(r"(?!\.)")

    i = 0
    while i < len(segment):
        ch = segment[i]
        if ch == "*":
            while i + 1 < len(segment) and segment[i + 1] == "*":
                i += 1
            parts.append("[^/]*")
        elif ch == "?":
            parts.append("[^/]")
        elif ch == "[":
            end = _find_class_end(segment, i)
            if end < 0:
                raise PatternResolutionError(f"Unterminated character class in pattern: {pattern!r}")
            body = segment[i + 1:end]
            negate = body[:1] in ("!", "^")
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\").replace("[", "\\[")
            parts.append(f"[^/{body}]" if negate else f"[{body}]")
            i = end
        else:
            parts.append(re.escape(ch))
        i += 1
    return "".join(parts)


def _translate(pattern: str) -> str:
    segments = pattern.split("/")
    last = len(segments) - 1
    parts: List[str] = []
    for index, segment in enumerate(segments):
        if segment == "**":
            if index == last:
                parts.append(r"(?:(?!\.)[^/]*(?:/(?!\.)[^/]+)*)")
            else:
                parts.append(r"(?:(?!\.)[^/]+/)*")
            continue
        parts.append(_translate_segment(segment, pattern) if has_magic(segment) else re.escape(segment))
        if index != last:
            parts.append("/")
    return "".join(parts)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a glob pattern into an anchored regular expression.

    Raises:
        PatternResolutionError: If braces are unbalanced or a character
            class is unterminated.
    """
    alternatives = [_translate(to_posix(item)) for item in expand_braces(pattern)]
    try:
        return re.compile("(?:" + "|".join(alternatives) + ")")
    except re.error as exc:
        raise PatternResolutionError(f"Invalid pattern {pattern!r}: {exc}") from exc


def matches(path: str, patterns: PatternSet) -> bool:
    """Return True if ``path`` matches any of ``patterns``.

    Pure string comparison: the filesystem is never consulted.
    """
    if isinstance(patterns, str):
        patterns = [patterns]
    candidate = to_posix(path)
    return any(compile_pattern(to_posix(pattern)).fullmatch(candidate) for pattern in patterns)


def _static_base(pattern: str) -> str:
    """Longest leading directory of ``pattern`` free of glob characters."""

    segments = pattern.split("/")
    static: List[str] = []
    for segment in segments[:-1]:
        if has_magic(segment):
            break
        static.append(segment)
    return "/".join(static) or "/"


def _walk_files(base: str, log: logging.Logger) -> Iterable[str]:
    def on_error(error: OSError) -> None:
        if isinstance(error, FileNotFoundError):
            log.debug("Directory disappeared during resolution: %s", error.filename)
            return
        raise SchemaReadError(f"Failed to list schema directory {error.filename}: {error}", path=error.filename)

    for dirpath, dirnames, filenames in os.walk(base, onerror=on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            yield to_posix(os.path.join(dirpath, filename))


def resolve(
    patterns: PatternSet,
    root: Union[str, os.PathLike],
    logger: Optional[logging.Logger] = None,
) -> List[str]:
    """Resolve a pattern set to the sorted, deduplicated list of matching files.

    Args:
        patterns: Single pattern or sequence of patterns, relative to ``root``
            or absolute.
        root: Directory relative patterns are anchored to.
        logger: Optional logger; defaults to this module's logger.

    Returns:
        Absolute ``/``-separated file paths. Empty when nothing matches.

    Raises:
        PatternResolutionError: If the pattern set is empty or malformed.
        SchemaReadError: If a directory under a pattern base cannot be listed.
    """
    log = component_logger(logger, __name__)
    found = set()

    for pattern in absolute_patterns(patterns, root):
        regex = compile_pattern(pattern)
        for expanded in expand_braces(pattern):
            if not has_magic(expanded):
                if os.path.isfile(expanded):
                    found.add(expanded)
                else:
                    log.debug("Schema file does not exist: %s", expanded)
                continue

            base = _static_base(expanded)
            if not os.path.isdir(base):
                log.debug("Pattern base directory does not exist: %s", base)
                continue

            for candidate in _walk_files(base, log):
                if regex.fullmatch(candidate):
                    found.add(candidate)

    result = sorted(found)
    log.debug("Resolved %d schema file(s) from %s", len(result), list(normalize_patterns(patterns)))
    return result
