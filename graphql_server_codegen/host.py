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

"""Interfaces between the schema pipeline and the host that serves it.

``Host`` is what the pipeline calls into; ``LifecycleHooks`` is what the
host calls on the pipeline. ``LocalHost`` is a file-system host used by the
command line interface.
"""

from __future__ import annotations

import inspect
import logging
import os
import tempfile
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from .artifacts import ArtifactTemplate
from .utils.logging_utils import component_logger

logger = logging.getLogger(__name__)

TemplateFilter = Callable[[ArtifactTemplate], bool]


class Host(Protocol):
    root_dir: str
    dev: bool

    def add_template(self, template: ArtifactTemplate) -> str:
        """Register ``template`` and return its destination path."""
        ...

    def set_alias(self, identifier: str, path: str) -> None:
        """Make ``path`` importable under ``identifier``."""
        ...

    async def update_templates(self, filter: TemplateFilter) -> None:
        """Re-materialize every registered template accepted by ``filter``."""
        ...

    async def notify_reload(self) -> None:
        """Ask the dependent runtime to reload its schema-serving state."""
        ...


class LifecycleHooks(Protocol):
    def on_ready(self) -> Any:
        ...

    async def on_file_changed(self, path: str) -> bool:
        ...

    async def on_before_reload(self) -> None:
        ...


class LocalHost:
    """Host that writes templates below ``build_dir``."""

    def __init__(
        self,
        root_dir: Union[str, os.PathLike],
        build_dir: Union[str, os.PathLike],
        dev: bool = False,
        on_reload: Optional[Callable[[], Any]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.root_dir = os.path.abspath(os.fspath(root_dir))
        self.build_dir = os.path.abspath(os.path.join(self.root_dir, os.fspath(build_dir)))
        self.dev = dev
        self.templates: List[ArtifactTemplate] = []
        self.aliases: Dict[str, str] = {}
        self.reload_count = 0
        self._on_reload = on_reload
        self.logger = component_logger(logger, __name__)

    def destination(self, template: ArtifactTemplate) -> str:
        return os.path.join(self.build_dir, template.filename)

    def add_template(self, template: ArtifactTemplate) -> str:
        self.templates.append(template)
        return self.destination(template)

    def set_alias(self, identifier: str, path: str) -> None:
        self.aliases[identifier] = path
        self.logger.debug("Registered %s at %s", identifier, path)

    def write_templates(self, filter: Optional[TemplateFilter] = None) -> List[str]:
        """Write registered templates, optionally restricted by ``filter``."""

        written = []
        for template in self.templates:
            if not template.write or (filter is not None and not filter(template)):
                continue
            output_path = self.destination(template)
            _write_atomic(output_path, template.get_contents())
            self.logger.debug("Wrote %s", output_path)
            written.append(output_path)
        return written

    async def update_templates(self, filter: TemplateFilter) -> None:
        self.write_templates(filter)

    async def notify_reload(self) -> None:
        self.reload_count += 1
        self.logger.info("Reload requested (%d)", self.reload_count)
        if self._on_reload is not None:
            result = self._on_reload()
            if inspect.isawaitable(result):
                await result


def _write_atomic(output_path: str, content: str) -> None:
    directory = os.path.dirname(output_path)
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.replace(tmp_path, output_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
