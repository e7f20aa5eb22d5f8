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

"""Generated artifacts, the templates the host writes them through, and the published snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

SCHEMA_MODULE_IDENTIFIER = "#schema-module"
SCHEMA_TYPES_IDENTIFIER = "#schema-types"
RESOLVER_TYPES_IDENTIFIER = "#resolver-types"

SCHEMA_MODULE_FILENAME = "graphql_schema.py"
SCHEMA_TYPES_FILENAME = "graphql_schema_types.py"
RESOLVER_TYPES_FILENAME = "graphql_resolver_types.py"

ARTIFACT_FILENAMES: Dict[str, str] = {
    SCHEMA_MODULE_IDENTIFIER: SCHEMA_MODULE_FILENAME,
    SCHEMA_TYPES_IDENTIFIER: SCHEMA_TYPES_FILENAME,
    RESOLVER_TYPES_IDENTIFIER: RESOLVER_TYPES_FILENAME,
}

# Templates whose contents are derived from the schema sources.
SCHEMA_DERIVED_FILENAMES = frozenset(ARTIFACT_FILENAMES.values())


@dataclass(frozen=True)
class GeneratedArtifact:
    name: str
    identifier: str
    filename: str
    contents: str


@dataclass(frozen=True)
class ArtifactTemplate:
    """A file the host materializes by calling ``get_contents``."""

    filename: str
    identifier: str
    get_contents: Callable[[], str]
    write: bool = True


def template_filter(template: Any) -> bool:
    """Select the templates that must be rebuilt after a schema change."""

    return getattr(template, "filename", None) in SCHEMA_DERIVED_FILENAMES


class ArtifactStore:
    """Holds the most recently published artifact snapshot.

    A snapshot is replaced as a whole; a failed regeneration never reaches
    :meth:`publish`, so readers keep seeing the previous one.
    """

    def __init__(self) -> None:
        self._snapshot: Dict[str, GeneratedArtifact] = {}
        self.generation = 0

    def publish(self, artifacts: Mapping[str, GeneratedArtifact]) -> None:
        self._snapshot = dict(artifacts)
        self.generation += 1
        logger.debug("Published artifact snapshot #%d (%s)", self.generation, ", ".join(sorted(artifacts)))

    def get(self, identifier: str) -> Optional[GeneratedArtifact]:
        return self._snapshot.get(identifier)

    def contents(self, identifier: str) -> str:
        artifact = self._snapshot.get(identifier)
        if artifact is None:
            raise LookupError(f"Artifact {identifier} has not been generated yet")
        return artifact.contents

    @property
    def snapshot(self) -> Dict[str, GeneratedArtifact]:
        return dict(self._snapshot)
