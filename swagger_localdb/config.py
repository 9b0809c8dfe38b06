"""Generator configuration.

Defaults come from the command line; an optional JSON/YAML config file is
merged over them. Keys may be written in either snake_case or the camelCase
used by the generated TypeScript config (``dbName``, ``responseDelay``...).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class GeneratorConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    db_name: str = Field("mockApiDB", alias="dbName")
    response_delay: int = Field(200, alias="responseDelay", ge=0)
    enable_logging: bool = Field(False, alias="enableLogging")
    enable_validation: bool = Field(True, alias="enableValidation")
    # reserved: accepted from config files, not read by the generator yet
    output_format: Literal["typescript"] = Field("typescript", alias="outputFormat")
    error_rate: float = Field(0, alias="errorRate", ge=0, le=1)
    generate_tests: bool = Field(False, alias="generateTests")  # reserved


def load_config(path: Path | None = None, **overrides: Any) -> GeneratorConfig:
    """Build the config from overrides, then merge a config file over it.

    A config file that cannot be read or does not validate is reported and
    ignored; generation continues with the defaults.
    """
    defaults = GeneratorConfig(**{k: v for k, v in overrides.items() if v is not None})
    if path is None:
        return defaults

    try:
        content = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(content, dict):
            raise ValueError("config file must contain an object")
        return GeneratorConfig(**{**defaults.model_dump(), **_snake_keys(content)})
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.warning("Could not load config file %s, using defaults: %s", path, e)
        return defaults


def _snake_keys(content: dict[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases onto field names so they merge with dumped defaults."""
    aliases = {
        field.alias: name
        for name, field in GeneratorConfig.model_fields.items()
        if field.alias
    }
    return {aliases.get(k, k): v for k, v in content.items()}
