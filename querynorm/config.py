# Copyright (c) Nex-AGI. All rights reserved.
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

"""Normalization configuration for querynorm.

The configuration can be built directly or loaded from a YAML file, either
as a top-level mapping or under a ``normalization`` section:

.. code-block:: yaml

    normalization:
      max_dnf_terms: 64
      expand_in_filters: true
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

SECTION_KEY = "normalization"


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def _format_validation_error(exc: ValidationError) -> str:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(messages)


class NormalizationConfig(BaseModel):
    """Caller-side limits and options for DNF term extraction.

    Attributes:
        max_dnf_terms: Reject filters whose DNF would have more terms than
            this (default: None, unlimited)
        expand_in_filters: Rewrite ``in`` filters into disjunctions of
            equalities before normalizing (default: False)
    """

    model_config = ConfigDict(extra="forbid")

    max_dnf_terms: int | None = Field(default=None, gt=0)
    expand_in_filters: bool = False

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> NormalizationConfig:
        """Load and validate normalization configuration from a YAML file."""
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with path.open(encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parsing error in {config_path}: {e}") from e

        if config is None:
            return cls()
        if not isinstance(config, dict):
            raise ConfigError(f"Invalid configuration file: {config_path}")

        section = config.get(SECTION_KEY, config)
        if section is None:
            return cls()
        if not isinstance(section, dict):
            raise ConfigError(f"'{SECTION_KEY}' must be a mapping in {config_path}")

        try:
            return cls.model_validate(section)
        except ValidationError as exc:
            raise ConfigError(
                f"Invalid normalization configuration: {_format_validation_error(exc)}",
            ) from exc
