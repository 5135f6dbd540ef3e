"""Serialize the assembled document to JSON or YAML."""

import json
import logging
from pathlib import Path

import yaml

from oasgen.errors import OutputWriteError
from oasgen.openapi.models import OpenAPIObject

logger = logging.getLogger(__name__)


def render_document(openapi: OpenAPIObject, as_yaml: bool = False) -> str:
    data = openapi.to_dict()
    if as_yaml:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def write_document(openapi: OpenAPIObject, path: Path, as_yaml: bool = False) -> None:
    """Write the document, creating parent directories as needed."""
    logger.info("Writing OpenAPI document to %s", path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_document(openapi, as_yaml=as_yaml), encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(f"Can not write {path}: {e}") from e
