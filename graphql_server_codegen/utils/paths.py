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

from __future__ import annotations

import os
from pathlib import Path
from typing import Union


PathLike = Union[str, "os.PathLike[str]"]


def to_posix(path: PathLike) -> str:
    """Return ``path`` with every separator normalized to ``/``."""

    text = os.fspath(path)
    if os.sep != "/":
        text = text.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        text = text.replace(os.altsep, "/")
    return text.replace("\\", "/")


def is_absolute(path: str) -> bool:
    posix = to_posix(path)
    # Drive-letter paths count as absolute on every platform.
    return posix.startswith("/") or (len(posix) > 2 and posix[1] == ":" and posix[2] == "/")


def resolve_against(root: PathLike, path: PathLike) -> str:
    """Join ``path`` to ``root`` unless already absolute, collapse ``.``/``..``.

    Only string manipulation is performed, so glob characters survive and
    nothing is looked up on disk.
    """

    text = to_posix(path)
    if not is_absolute(text):
        base = to_posix(Path(os.fspath(root)).absolute())
        text = f"{base.rstrip('/')}/{text}"
    drive = ""
    if len(text) > 1 and text[1] == ":":
        drive, text = text[:2], text[2:]

    parts: list[str] = []
    for part in text.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return drive + "/" + "/".join(parts)
