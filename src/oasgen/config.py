"""Generator configuration.

Values come from an optional YAML file and are overridden by CLI flags.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from oasgen.errors import OasgenError


class GeneratorConfig(BaseModel):
    """Options consumed by the directive parser, resolver and assembler."""

    source_root: Path = Path(".")
    module_path: str = ""  # only packages under this directory are scanned for operations
    handler_path: str = ""  # optional sub-filter below module_path
    filter_tag: str = ""
    schema_without_pkg: bool = False
    strict: bool = True  # first declaration error aborts the run
    title: str = "API"
    version: str = "1.0.0"
    description: str | None = None

    def merged(self, **overrides) -> "GeneratorConfig":
        """Return a copy with every non-None override applied."""
        update = {k: v for k, v in overrides.items() if v is not None}
        return self.model_validate({**self.model_dump(), **update})


def load_config(path: Path) -> GeneratorConfig:
    """Load a GeneratorConfig from a YAML file."""
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise OasgenError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise OasgenError(f"Config file {path} must contain a mapping")

    try:
        return GeneratorConfig(**data)
    except ValidationError as e:
        raise OasgenError(f"Invalid config file {path}: {e}") from e
