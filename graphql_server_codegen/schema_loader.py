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

"""Schema aggregation: read every matched schema fragment and merge them textually."""

import logging
import os
from typing import List, Optional, Tuple, Union

from .exceptions import SchemaReadError
from .file_io.template_renderer import TemplateRenderer
from .patterns import PatternSet, resolve
from .utils.logging_utils import component_logger

logger = logging.getLogger(__name__)

SCHEMA_EXPORT_NAME = "type_defs"
SCHEMA_MODULE_TEMPLATE = "schema_module.py.jinja2"


def read_schema_files(
    paths: List[str], logger: Optional[logging.Logger] = None
) -> List[Tuple[str, str]]:
    """Read every file in ``paths`` as UTF-8 text.

    Returns:
        ``(path, content)`` pairs in the order given.

    Raises:
        SchemaReadError: If any file cannot be opened, read or decoded. A
            schema missing a fragment is never returned.
    """
    log = component_logger(logger, __name__)
    fragments: List[Tuple[str, str]] = []
    for path in paths:
        try:
            with open(path, "r", encoding="utf-8") as stream:
                content = stream.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise SchemaReadError(f"Failed to read schema file {path}: {exc}", path=path) from exc
        log.debug("Read schema fragment %s (%d chars)", path, len(content))
        fragments.append((path, content))
    return fragments


def aggregate_schema(
    patterns: PatternSet,
    root: Union[str, os.PathLike],
    logger: Optional[logging.Logger] = None,
) -> str:
    """Merge every schema file matched by ``patterns`` into one document.

    Files are concatenated in lexicographic order of their absolute path,
    separated by a newline.
    """
    log = component_logger(logger, __name__)
    files = resolve(patterns, root, logger=log)
    if not files:
        log.warning("No schema files matched %s (root: %s)", patterns, root)
    fragments = read_schema_files(sorted(files), logger=log)
    return "\n".join(content for _, content in fragments)


def render_schema_module(document: str, renderer: Optional[TemplateRenderer] = None) -> str:
    """Wrap a merged schema document as importable Python source."""

    renderer = renderer or TemplateRenderer()
    return renderer.render_template(
        SCHEMA_MODULE_TEMPLATE,
        export_name=SCHEMA_EXPORT_NAME,
        schema=document,
    )


def create_schema_module(
    patterns: PatternSet,
    root: Union[str, os.PathLike],
    logger: Optional[logging.Logger] = None,
) -> str:
    """Aggregate the schema and return it wrapped as a loadable module."""

    return render_schema_module(aggregate_schema(patterns, root, logger=logger))
