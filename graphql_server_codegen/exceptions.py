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

"""Custom exceptions for the GraphQL server codegen pipeline."""

from typing import Optional


class GraphQLServerError(Exception):
    """Base exception for schema pipeline related errors."""
    pass


class ConfigurationError(GraphQLServerError):
    """Exception raised for invalid module options."""
    pass


class PatternResolutionError(ConfigurationError):
    """Exception raised when the schema pattern set is empty or malformed."""
    pass


class SchemaReadError(GraphQLServerError):
    """Exception raised when a matched schema file cannot be read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SchemaParseError(GraphQLServerError):
    """Exception raised when the merged schema document is not valid GraphQL."""

    def __init__(self, message: str, source_error: Optional[Exception] = None):
        super().__init__(message)
        self.source_error = source_error


class CodegenError(GraphQLServerError):
    """Exception raised for schema constructs the code generator cannot map."""
    pass
