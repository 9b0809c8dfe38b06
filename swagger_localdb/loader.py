"""Load and validate an OpenAPI document.

Reads JSON or YAML from disk and checks it against the openapi-pydantic
models before anything downstream sees it. Every failure surfaces as a
single SpecValidationError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from openapi_pydantic import OpenAPI
from openapi_pydantic.v3.v3_0 import OpenAPI as OpenAPI_30
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class SpecValidationError(ValueError):
    """The input document could not be read or failed structural validation."""

    def __init__(self, message: str):
        super().__init__(f"Failed to parse Swagger specification: {message}")


def _stringify_keys(node: Any) -> Any:
    """Coerce mapping keys to str, as JSON would (YAML reads `200:` as an int)."""
    if isinstance(node, dict):
        return {str(k): _stringify_keys(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_stringify_keys(v) for v in node]
    return node


def read_document(path: Path) -> Any:
    """Parse a JSON or YAML file. YAML is a superset of JSON, so one parser covers both."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SpecValidationError(f"cannot read {path}: {e}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecValidationError(f"{path} is not valid JSON or YAML: {e}") from e


def validate_spec(document: Any) -> dict[str, Any]:
    """Validate an OpenAPI 3.0/3.1 document and return it with string keys."""
    if not isinstance(document, dict):
        raise SpecValidationError("document root must be an object")

    document = _stringify_keys(document)
    version = str(document.get("openapi", ""))

    if version.startswith("3.0"):
        model = OpenAPI_30
    elif version.startswith("3.1"):
        model = OpenAPI
    elif "swagger" in document:
        raise SpecValidationError(
            f"Swagger {document['swagger']} documents are not supported; convert to OpenAPI 3 first"
        )
    else:
        raise SpecValidationError(f"unsupported or missing OpenAPI version {version!r}")

    try:
        model.model_validate(document)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(p) for p in first.get("loc", ()))
        logger.debug("OpenAPI validation errors: %s", e.errors())
        raise SpecValidationError(f"{location}: {first.get('msg')}") from e

    logger.debug("Validated OpenAPI %s document", version)
    return document


def load_spec(path: Path) -> dict[str, Any]:
    """Load and validate the OpenAPI document at ``path``."""
    return validate_spec(read_document(path))


def resolve_ref(spec: dict[str, Any], ref: str) -> Any:
    """Resolve a local $ref pointer in the document, or None when it points nowhere."""
    node: Any = spec
    for part in ref.lstrip("#/").split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node
