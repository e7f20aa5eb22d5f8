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

"""Template rendering utilities for consistent Jinja2 rendering across the project."""

from __future__ import annotations

import os

from jinja2 import Environment, FileSystemLoader, StrictUndefined


def _get_template_directories() -> list[str]:
    """Resolve template search paths.

    Supports both source checkout and installed site-packages layouts.
    """

    # Base dir is .../graphql_server_codegen/file_io
    base_dir = os.path.dirname(os.path.abspath(__file__))
    core_template_dir = os.path.abspath(os.path.join(base_dir, "../templates"))

    if os.path.exists(core_template_dir):
        return [core_template_dir]
    return []


def pyrepr_filter(value) -> str:
    """Jinja2 filter emitting a Python literal for ``value``."""

    return repr(value)


def docstring_filter(value: str, indent: str = "") -> str:
    """Jinja2 filter rendering ``value`` as a triple-quoted docstring."""

    text = str(value).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    lines = text.splitlines() or [""]
    if len(lines) == 1:
        return f'"""{lines[0]}"""'
    body = "\n".join(f"{indent}{line}" if line else "" for line in lines[1:])
    return f'"""{lines[0]}\n{body}\n{indent}"""'


def comment_filter(value: str, indent: str = "") -> str:
    """Jinja2 filter rendering ``value`` as ``#`` comment lines."""

    lines = str(value).splitlines() or [""]
    return "\n".join(f"{indent}# {line}".rstrip() for line in lines)


class TemplateRenderer:
    """Unified template rendering utility."""

    def __init__(self, template_dir: str | list[str] | None = None):
        if template_dir is None:
            template_dirs = _get_template_directories()
        elif isinstance(template_dir, str):
            template_dirs = [template_dir]
        else:
            template_dirs = list(template_dir)

        self.template_dirs = template_dirs
        self.env = Environment(
            loader=FileSystemLoader(self.template_dirs),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            newline_sequence="\n",
            autoescape=False,
            undefined=StrictUndefined,
        )
        self.env.filters["pyrepr"] = pyrepr_filter
        self.env.filters["docstring"] = docstring_filter
        self.env.filters["comment"] = comment_filter

    def render_template(self, template_name: str, **kwargs) -> str:
        template = self.env.get_template(template_name)
        return template.render(**kwargs)
