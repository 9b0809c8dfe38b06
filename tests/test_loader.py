"""Tests for document loading and validation."""

import json
from pathlib import Path

import pytest

from swagger_localdb.loader import SpecValidationError, load_spec, resolve_ref, validate_spec

PETSTORE = Path(__file__).parent / "fixtures" / "petstore.yaml"


class TestLoadSpec:
    def test_loads_yaml(self):
        doc = load_spec(PETSTORE)
        assert doc["info"]["title"] == "Swagger Petstore"
        assert "/pets/{petId}" in doc["paths"]

    def test_integer_status_keys_become_strings(self):
        """YAML reads an unquoted 200 as an int; keys must match JSON semantics."""
        doc = load_spec(PETSTORE)
        assert "200" in doc["paths"]["/pets"]["get"]["responses"]

    def test_loads_json(self, tmp_path, document):
        path = tmp_path / "api.json"
        path.write_text(json.dumps(document({"/health": {"get": {"responses": {"200": {"description": "ok"}}}}})))
        assert "/health" in load_spec(path)["paths"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecValidationError, match="cannot read"):
            load_spec(tmp_path / "missing.yaml")

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("openapi: [unclosed")
        with pytest.raises(SpecValidationError, match="not valid JSON or YAML"):
            load_spec(path)


class TestValidateSpec:
    def test_error_message_prefix(self):
        with pytest.raises(SpecValidationError) as exc_info:
            validate_spec([])
        assert str(exc_info.value).startswith("Failed to parse Swagger specification: ")

    def test_swagger_2_rejected(self):
        with pytest.raises(SpecValidationError, match="Swagger 2.0"):
            validate_spec({"swagger": "2.0", "info": {"title": "x", "version": "1"}, "paths": {}})

    def test_missing_version_rejected(self):
        with pytest.raises(SpecValidationError, match="unsupported or missing"):
            validate_spec({"info": {"title": "x", "version": "1"}, "paths": {}})

    def test_missing_info_rejected(self):
        with pytest.raises(SpecValidationError):
            validate_spec({"openapi": "3.0.3", "paths": {}})

    def test_openapi_31_accepted(self, document):
        doc = document()
        doc["openapi"] = "3.1.0"
        assert validate_spec(doc)["openapi"] == "3.1.0"


class TestResolveRef:
    def test_resolves_pointer(self, petstore_document):
        node = resolve_ref(petstore_document, "#/components/schemas/Error")
        assert node["required"] == ["code", "message"]

    def test_missing_target(self, petstore_document):
        assert resolve_ref(petstore_document, "#/components/schemas/Nope") is None
