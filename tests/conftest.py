"""Shared fixtures: the petstore document, its IR, and a tiny document builder."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from swagger_localdb.loader import load_spec
from swagger_localdb.models import IntermediateRepresentation
from swagger_localdb.normalizer import normalize

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = FIXTURES / "petstore.yaml"


def make_document(paths: dict[str, Any] | None = None, schemas: dict[str, Any] | None = None) -> dict[str, Any]:
    """Minimal OpenAPI 3.0 document around the given paths and schemas."""
    doc: dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": paths or {},
    }
    if schemas is not None:
        doc["components"] = {"schemas": schemas}
    return doc


@pytest.fixture(scope="session")
def petstore_document() -> dict[str, Any]:
    return load_spec(PETSTORE)


@pytest.fixture(scope="session")
def petstore_ir(petstore_document) -> IntermediateRepresentation:
    return normalize(petstore_document)


@pytest.fixture
def document():
    """Factory for minimal documents: ``document(paths, schemas)``."""
    return make_document
