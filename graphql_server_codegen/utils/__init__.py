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

"""Small shared helpers (logging setup, path handling)."""

from .logging_utils import component_logger, configure_split_stream_logging
from .paths import to_posix, resolve_against

__all__ = [
    "component_logger",
    "configure_split_stream_logging",
    "to_posix",
    "resolve_against",
]
