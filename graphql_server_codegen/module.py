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

import asyncio
import logging
import os
from functools import partial
from typing import Any, Dict, List, Optional, Union

from .artifacts import ARTIFACT_FILENAMES, ArtifactStore, ArtifactTemplate, GeneratedArtifact, template_filter
from .config import ModuleOptions
from .dispatcher import ChangeDispatcher
from .host import Host
from .patterns import absolute_patterns
from .pipeline import build_artifacts
from .utils.logging_utils import component_logger

logger = logging.getLogger(__name__)


class GraphQLServerModule:
    """Wire the schema pipeline into a host.

    Construction validates the schema pattern set, so an unusable
    configuration fails before anything is registered with the host.
    """

    name = "graphql-server-codegen"
    config_key = "graphqlServer"

    def __init__(self, options: ModuleOptions, host: Host, logger: Optional[logging.Logger] = None):
        self.options = options
        self.host = host
        self.logger = component_logger(logger, __name__)
        self.store = ArtifactStore()
        self.schema_patterns = absolute_patterns(options.schema, host.root_dir)
        self.destinations: Dict[str, str] = {}
        self.dispatcher: Optional[ChangeDispatcher] = None

    def setup(self) -> None:
        """Register the generated templates and, in dev mode, the dispatcher."""

        for identifier, filename in ARTIFACT_FILENAMES.items():
            template = ArtifactTemplate(
                filename=filename,
                identifier=identifier,
                get_contents=partial(self._template_contents, identifier),
            )
            destination = self.host.add_template(template)
            self.host.set_alias(identifier, destination)
            self.destinations[identifier] = destination
            self.logger.debug("%s registered at %s", identifier, destination)

        if self.host.dev:
            self.dispatcher = ChangeDispatcher(
                self.schema_patterns,
                root=self.host.root_dir,
                regenerate=self.regenerate,
                notify_reload=self._reload,
                logger=self.logger,
            )

    def _template_contents(self, identifier: str) -> str:
        self.logger.debug("Generating %s", ARTIFACT_FILENAMES[identifier])
        return self.store.contents(identifier)

    def on_ready(self) -> Dict[str, GeneratedArtifact]:
        """Generate and publish the initial artifacts.

        Any failure here propagates: without an initial schema there is
        nothing to serve.
        """
        artifacts = build_artifacts(self.options, self.host.root_dir, logger=self.logger)
        self.store.publish(artifacts)
        return artifacts

    async def regenerate(self) -> None:
        """Rebuild every artifact off the event loop and publish the new snapshot."""

        artifacts = await asyncio.to_thread(build_artifacts, self.options, self.host.root_dir, self.logger)
        self.store.publish(artifacts)

    async def on_file_changed(self, path: Union[str, os.PathLike]) -> bool:
        self.logger.debug("File changed: %s", path)
        if self.dispatcher is None:
            return False
        return await self.dispatcher.on_schema_changed(path)

    async def on_schema_changed(self, path: Union[str, os.PathLike]) -> bool:
        return await self.on_file_changed(path)

    async def on_before_reload(self) -> None:
        await self.host.update_templates(template_filter)

    async def _reload(self) -> None:
        await self.on_before_reload()
        await self.host.notify_reload()

    def devtools_tabs(self) -> List[Dict[str, Any]]:
        """Inspection panel descriptors; empty unless ``url`` is configured."""

        if self.options.url is None:
            return []
        return [
            {
                "name": "graphql-server",
                "title": "GraphQL server",
                "icon": "simple-icons:graphql",
                "view": {"type": "iframe", "src": self.options.url},
            }
        ]
