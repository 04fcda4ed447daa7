"""Generator configuration loaded from a YAML file.

Example::

    host: petstore.swagger.io
    base_path: /api
    info:
      title: Swagger Petstore
      version: "1.0"
    security_definitions:
      BasicAuth:
        type: basic
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from swagger_gen.errors import ConfigurationError
from swagger_gen.schema.document import InfoObj, SecurityDef


class GeneratorConfig(BaseModel):
    """Document header and generator options."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    host: str | None = None
    base_path: str | None = Field(None, alias="basePath")
    schemes: list[str] = Field(default_factory=list)
    info: InfoObj = Field(default_factory=InfoObj)
    security_definitions: dict[str, SecurityDef] = Field(default_factory=dict, alias="securityDefinitions")
    extensions: dict[str, Any] = Field(default_factory=dict)
    reflect_types: bool = False


def load_config(path: Path) -> GeneratorConfig:
    """Load configuration from a YAML file; a missing file yields the defaults."""
    if not path.exists():
        return GeneratorConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")

    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration in {path}: {e}") from e
