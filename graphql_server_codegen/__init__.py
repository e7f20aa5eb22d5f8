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

"""Aggregate GraphQL SDL files into a schema module and typed resolver stubs."""

from .artifacts import ArtifactStore, GeneratedArtifact, template_filter
from .codegen import generate_resolver_types, generate_types
from .config import CodegenConfig, ModuleOptions, load_options
from .dispatcher import ChangeDispatcher, DispatcherState
from .exceptions import (
    CodegenError,
    ConfigurationError,
    GraphQLServerError,
    PatternResolutionError,
    SchemaParseError,
    SchemaReadError,
)
from .host import LocalHost
from .module import GraphQLServerModule
from .patterns import matches, resolve
from .pipeline import build_artifacts
from .schema_loader import aggregate_schema, create_schema_module

__version__ = "0.1.0"

__all__ = [
    "ArtifactStore",
    "ChangeDispatcher",
    "CodegenConfig",
    "CodegenError",
    "ConfigurationError",
    "DispatcherState",
    "GeneratedArtifact",
    "GraphQLServerError",
    "GraphQLServerModule",
    "LocalHost",
    "ModuleOptions",
    "PatternResolutionError",
    "SchemaParseError",
    "SchemaReadError",
    "aggregate_schema",
    "build_artifacts",
    "create_schema_module",
    "generate_resolver_types",
    "generate_types",
    "load_options",
    "matches",
    "resolve",
    "template_filter",
]
