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

"""Schema model and Python type generation for GraphQL SDL documents."""

from .generator import generate_resolver_types, generate_types, render_resolver_types, render_types
from .schema_model import SchemaModel, build_schema_model, parse_schema_document

__all__ = [
    "SchemaModel",
    "build_schema_model",
    "parse_schema_document",
    "render_types",
    "render_resolver_types",
    "generate_types",
    "generate_resolver_types",
]
