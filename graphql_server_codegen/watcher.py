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

"""Forward filesystem events from a watchdog observer to the schema pipeline."""

import asyncio
import logging
import os
from concurrent.futures import Future
from typing import Callable, Optional

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .host import LifecycleHooks
from .utils.logging_utils import component_logger

logger = logging.getLogger(__name__)

_RELEVANT_EVENTS = (EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED)


class SchemaChangeHandler(FileSystemEventHandler):
    def __init__(self, submit: Callable[[str], None]):
        self._submit = submit

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _RELEVANT_EVENTS:
            return
        self._submit(os.fsdecode(event.src_path))
        dest_path = getattr(event, "dest_path", None)
        if dest_path:
            self._submit(os.fsdecode(dest_path))


class SchemaWatcher:
    """Run a recursive observer on ``root_dir`` and hand every file change to ``hooks``.

    Events are raised on the observer thread and handed to ``loop``, where
    the dispatcher serializes them.
    """

    def __init__(
        self,
        hooks: LifecycleHooks,
        root_dir: str,
        loop: asyncio.AbstractEventLoop,
        logger: Optional[logging.Logger] = None,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        self.hooks = hooks
        self.root_dir = root_dir
        self.loop = loop
        self.logger = component_logger(logger, __name__)
        self._observer_factory = observer_factory
        self._observer = None

    def submit(self, path: str) -> Future:
        future = asyncio.run_coroutine_threadsafe(self.hooks.on_file_changed(path), self.loop)
        future.add_done_callback(self._report_failure)
        return future

    def _report_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            self.logger.error("Handling file change failed: %s", exc, exc_info=exc)

    def start(self) -> None:
        self._observer = self._observer_factory()
        self._observer.schedule(SchemaChangeHandler(self.submit), self.root_dir, recursive=True)
        self._observer.start()
        self.logger.info("Watching %s for schema changes", self.root_dir)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
