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

"""Module options: defaults, YAML loading and JSON Schema validation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import jsonschema
import yaml

from .exceptions import ConfigurationError
from .patterns import normalize_patterns

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATTERN = "./server/**/*.graphql"
DEFAULT_CONFIG_FILENAME = "graphql_server.yaml"
DEFAULT_TYPES_MODULE = "graphql_schema_types"

_OPTIONS_SCHEMA_PATH = Path(__file__).parent / "schema" / "module_options.json"
_SCHEMA_CACHE: Dict[str, dict] = {}


@dataclass
class CodegenConfig:
    """Options recognized by the type generator.

    Keys in the options file are camelCase. Unrecognized keys are kept in
    ``extra`` as-is and never validated.
    """

    use_index_signature: bool = True
    scalars: Dict[str, str] = field(default_factory=dict)
    types_module: str = DEFAULT_TYPES_MODULE
    extra: Dict[str, Any] = field(default_factory=dict)

    _KEYS = {
        "useIndexSignature": "use_index_signature",
        "scalars": "scalars",
        "typesModule": "types_module",
    }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CodegenConfig":
        if data is None:
            return cls()
        if isinstance(data, CodegenConfig):
            return data

        config = cls()
        for key, value in data.items():
            attribute = cls._KEYS.get(key)
            if attribute is None:
                config.extra[key] = value
            elif attribute == "scalars":
                config.scalars = dict(value or {})
            else:
                setattr(config, attribute, value)
        return config

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "useIndexSignature": self.use_index_signature,
            "scalars": dict(self.scalars),
            "typesModule": self.types_module,
        }
        data.update(self.extra)
        return data


@dataclass
class ModuleOptions:
    schema: List[str] = field(default_factory=lambda: [DEFAULT_SCHEMA_PATTERN])
    codegen: CodegenConfig = field(default_factory=CodegenConfig)
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ModuleOptions":
        """Build options from a mapping, applying defaults for missing keys.

        Raises:
            ConfigurationError: If the mapping does not match the options schema.
            PatternResolutionError: If the schema pattern set is empty or blank.
        """
        data = dict(data or {})
        issues = validate_options(data)
        if issues:
            raise ConfigurationError(
                "Invalid module options:\n" + "\n".join(f"  - {issue}" for issue in issues)
            )

        return cls(
            schema=normalize_patterns(data.get("schema", DEFAULT_SCHEMA_PATTERN)),
            codegen=CodegenConfig.from_dict(data.get("codegen")),
            url=data.get("url"),
        )


def load_options_schema() -> dict:
    """Load the JSON Schema describing the options file (cached)."""

    cache_key = str(_OPTIONS_SCHEMA_PATH)
    if cache_key not in _SCHEMA_CACHE:
        with open(_OPTIONS_SCHEMA_PATH, "r", encoding="utf-8") as f:
            _SCHEMA_CACHE[cache_key] = json.load(f)
    return _SCHEMA_CACHE[cache_key]


def validate_options(data: Any) -> List[str]:
    """Validate raw options against the options schema.

    Returns:
        Human readable issues, ordered by location. Empty when valid.
    """
    if not isinstance(data, dict):
        return ["Root must be a mapping/object"]

    validator = jsonschema.Draft7Validator(load_options_schema())
    issues = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path))):
        path = "/" + "/".join(str(p) for p in error.absolute_path) if error.absolute_path else "/"
        issues.append(f"{path}: {error.message}")
    return issues


def load_options(file_path: Union[str, Path]) -> ModuleOptions:
    """Load module options from a YAML file.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated.
    """
    path = Path(file_path)

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    if not path.is_file():
        raise ConfigurationError(f"Path is not a file: {path}")

    try:
        logger.debug("Loading configuration file: %s", path)
        with open(path, "r", encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse YAML file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Failed to read configuration file {path}: {exc}") from exc

    if data is None:
        data = {}

    return ModuleOptions.from_dict(data)
