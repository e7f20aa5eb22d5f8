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

"""Decide which file changes trigger a schema regeneration, and run it.

The dispatcher is either IDLE or REGENERATING. A relevant change while
IDLE starts a round; relevant changes arriving while a round is in flight
only mark that one more round is needed, so a burst of edits costs at most
one extra regeneration.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Union

from .exceptions import GraphQLServerError
from .patterns import matches
from .utils.logging_utils import component_logger
from .utils.paths import resolve_against

logger = logging.getLogger(__name__)


class DispatcherState(Enum):
    IDLE = "idle"
    REGENERATING = "regenerating"


class ChangeDispatcher:
    """Serialize schema regenerations triggered by file-change events."""

    def __init__(
        self,
        schema_patterns: List[str],
        root: Union[str, os.PathLike],
        regenerate: Callable[[], Awaitable[None]],
        notify_reload: Callable[[], Awaitable[None]],
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            schema_patterns: Absolute schema patterns.
            root: Directory relative change paths are resolved against.
            regenerate: Rebuilds and publishes the artifacts. Any exception
                it raises is logged and ends that round only.
            notify_reload: Reload signal sent after a successful round;
                its failures are logged the same way.
            logger: Optional logger; defaults to this module's logger.
        """
        self.schema_patterns = list(schema_patterns)
        self.root = root
        self._regenerate = regenerate
        self._notify_reload = notify_reload
        self.logger = component_logger(logger, __name__)

        self.state = DispatcherState.IDLE
        self.pending = False
        self.rounds = 0
        self.last_error: Optional[Exception] = None

    def is_relevant(self, path: Union[str, os.PathLike]) -> bool:
        return matches(resolve_against(self.root, path), self.schema_patterns)

    async def on_schema_changed(self, path: Union[str, os.PathLike]) -> bool:
        """Handle one change event.

        Returns:
            True if the path is a schema source and a regeneration was run
            or scheduled, False if the event was ignored.
        """
        if not self.is_relevant(path):
            self.logger.debug("Ignoring change outside schema patterns: %s", path)
            return False

        self.logger.debug("Schema changed: %s", path)
        if self.state is DispatcherState.REGENERATING:
            self.pending = True
            return True

        self.state = DispatcherState.REGENERATING
        try:
            while True:
                self.pending = False
                await self._run_round()
                if not self.pending:
                    break
                self.logger.debug("Schema changed during regeneration, running again")
        finally:
            self.pending = False
            self.state = DispatcherState.IDLE
        return True

    async def _run_round(self) -> None:
        """Run one regeneration; a failure ends the round, never the dispatcher."""

        self.rounds += 1
        try:
            await self._regenerate()
        except GraphQLServerError as exc:
            self.last_error = exc
            self.logger.error("Schema regeneration failed, keeping previous artifacts: %s", exc)
            return
        except Exception as exc:
            self.last_error = exc
            self.logger.exception("Unexpected error during schema regeneration, keeping previous artifacts")
            return

        self.last_error = None
        self.logger.info("Schema regenerated, reloading")
        try:
            await self._notify_reload()
        except Exception as exc:
            self.last_error = exc
            self.logger.exception("Reload after schema regeneration failed")
