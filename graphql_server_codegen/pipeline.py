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

"""Build every generated artifact from one read of the schema sources."""

import logging
import os
from typing import Dict, Optional, Union

from .artifacts import (
    ARTIFACT_FILENAMES,
    RESOLVER_TYPES_IDENTIFIER,
    SCHEMA_MODULE_IDENTIFIER,
    SCHEMA_TYPES_IDENTIFIER,
    GeneratedArtifact,
)
from .codegen.generator import render_resolver_types, render_types
from .config import ModuleOptions
from .file_io.template_renderer import TemplateRenderer
from .schema_loader import aggregate_schema, render_schema_module
from .utils.logging_utils import component_logger

logger = logging.getLogger(__name__)


def build_artifacts(
    options: ModuleOptions,
    root: Union[str, os.PathLike],
    logger: Optional[logging.Logger] = None,
) -> Dict[str, GeneratedArtifact]:
    """Aggregate the schema once and derive all three artifacts from it.

    Nothing is returned unless every artifact was generated.

    Raises:
        SchemaReadError, SchemaParseError, CodegenError: On failure of the
            corresponding step.
    """
    log = component_logger(logger, __name__)
    document = aggregate_schema(options.schema, root, logger=log)
    renderer = TemplateRenderer()

    contents = {
        SCHEMA_MODULE_IDENTIFIER: render_schema_module(document, renderer),
        SCHEMA_TYPES_IDENTIFIER: render_types(document, options.codegen, renderer),
        RESOLVER_TYPES_IDENTIFIER: render_resolver_types(document, options.codegen, renderer),
    }
    names = {
        SCHEMA_MODULE_IDENTIFIER: "schema module",
        SCHEMA_TYPES_IDENTIFIER: "schema types",
        RESOLVER_TYPES_IDENTIFIER: "resolver types",
    }
    artifacts = {
        identifier: GeneratedArtifact(
            name=names[identifier],
            identifier=identifier,
            filename=ARTIFACT_FILENAMES[identifier],
            contents=text,
        )
        for identifier, text in contents.items()
    }
    log.debug("Generated %s", ", ".join(a.filename for a in artifacts.values()))
    return artifacts
