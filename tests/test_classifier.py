"""Tests for the route classifier."""

import pytest

from swagger_localdb.classifier import (
    classify,
    classify_intent,
    error_status,
    group_routes,
    status_text,
    success_status,
)
from swagger_localdb.models import CrudIntent
from swagger_localdb.normalizer import normalize, parse_operation


def _op(method, path, **operation):
    return parse_operation(path, method.lower(), operation)


class TestClassifyIntent:
    """Test the verb x path-shape decision table."""

    @pytest.mark.parametrize("method, path, intent", [
        ("GET", "/pets", CrudIntent.LIST),
        ("GET", "/pets/{petId}", CrudIntent.GET_BY_ID),
        ("GET", "/pets/{petId}/photos", CrudIntent.LIST),
        ("POST", "/pets", CrudIntent.CREATE),
        ("POST", "/pets/{petId}", CrudIntent.CREATE),
        ("PUT", "/pets/{petId}", CrudIntent.UPDATE),
        ("PATCH", "/pets/{petId}", CrudIntent.UPDATE),
        ("DELETE", "/pets/{petId}", CrudIntent.DELETE),
        ("HEAD", "/pets", CrudIntent.CUSTOM),
        ("OPTIONS", "/pets/{petId}", CrudIntent.CUSTOM),
    ])
    def test_table(self, method, path, intent):
        assert classify_intent(method, path) is intent

    def test_method_case_insensitive(self):
        assert classify_intent("get", "/pets") is CrudIntent.LIST


class TestStatusCodes:
    def test_first_2xx_wins(self):
        op = _op("GET", "/pets", responses={"404": {}, "202": {}, "200": {}})
        assert success_status(op) == 202

    @pytest.mark.parametrize("method, expected", [
        ("POST", 201),
        ("DELETE", 204),
        ("GET", 200),
        ("PUT", 200),
    ])
    def test_defaults_by_method(self, method, expected):
        assert success_status(_op(method, "/pets")) == expected

    def test_wildcard_codes_skipped(self):
        assert success_status(_op("GET", "/pets", responses={"2XX": {}, "default": {}})) == 200

    def test_status_text(self):
        assert status_text(200) == "OK"
        assert status_text(201) == "Created"
        assert status_text(204) == "No Content"
        assert status_text(202) == "Success"

    def test_error_status(self):
        assert error_status(_op("GET", "/pets", responses={"200": {}, "404": {}, "422": {}})) == 404
        assert error_status(_op("GET", "/pets")) == 400


class TestClassify:
    """End-to-end classification of the petstore operations."""

    @pytest.fixture
    def routes(self, petstore_ir):
        return [classify(op) for op in petstore_ir.operations]

    def test_list(self, routes):
        route = routes[0]
        assert route.intent is CrudIntent.LIST
        assert route.function_name == "listPets"
        assert route.db_operation == "findAll"
        assert route.group == "Pets"
        assert [(q.name, q.type, q.required) for q in route.query_params] == [("limit", "number", False)]
        assert route.path_params == []

    def test_create(self, routes):
        route = routes[1]
        assert route.intent is CrudIntent.CREATE
        assert route.has_body is True
        assert route.success_status == 201
        assert route.success_status_text == "Created"
        assert route.error_status == 400

    def test_get_by_id(self, routes):
        route = routes[2]
        assert route.intent is CrudIntent.GET_BY_ID
        assert route.db_operation == "findById"
        assert [(p.name, p.type) for p in route.path_params] == [("petId", "string")]
        assert route.id_param == "petId"
        assert route.success_status == 200
        assert route.error_status == 404

    def test_delete_without_2xx(self, routes):
        route = routes[3]
        assert route.intent is CrudIntent.DELETE
        assert route.function_name == "deletePets"
        assert route.success_status == 204
        assert route.success_status_text == "No Content"

    def test_missing_operation_id(self, routes):
        route = routes[4]
        assert route.function_name == "getProfiles"
        assert route.group == "UserProfile"

    def test_delete_with_no_responses(self):
        route = classify(_op("DELETE", "/pets/{petId}", parameters=[
            {"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}},
        ]))
        assert route.intent is CrudIntent.DELETE
        assert route.success_status == 204

    def test_body_ignored_for_get(self):
        op = _op("GET", "/search", requestBody={"content": {"application/json": {"schema": {"type": "object"}}}})
        assert classify(op).has_body is False

    def test_path_params_follow_template_order(self):
        op = _op("GET", "/owners/{ownerId}/pets/{petId}", parameters=[
            {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}},
            {"name": "ownerId", "in": "path", "required": True, "schema": {"type": "string"}},
        ])
        route = classify(op)
        assert [(p.name, p.type) for p in route.path_params] == [("ownerId", "string"), ("petId", "number")]
        assert route.id_param == "petId"

    def test_undeclared_placeholder_typed_string(self):
        route = classify(_op("GET", "/files/{name}"))
        assert [(p.name, p.type) for p in route.path_params] == [("name", "string")]

    def test_required_query_param(self):
        op = _op("GET", "/search", parameters=[
            {"name": "q", "in": "query", "required": True, "schema": {"type": "string"}},
            {"name": "page", "in": "query", "schema": {"type": "integer"}},
        ])
        assert [(q.name, q.required) for q in classify(op).query_params] == [("q", True), ("page", False)]

    def test_header_params_ignored(self):
        op = _op("GET", "/pets", parameters=[{"name": "X-Trace", "in": "header", "schema": {"type": "string"}}])
        route = classify(op)
        assert route.path_params == []
        assert route.query_params == []

    def test_untagged_default_group(self):
        assert classify(_op("GET", "/health")).group == "Default"


class TestGroupRoutes:
    def test_petstore_groups(self, petstore_ir):
        groups = group_routes(petstore_ir)
        assert list(groups) == ["Pets", "UserProfile"]
        assert [r.function_name for r in groups["Pets"]] == [
            "listPets", "createPets", "showPetById", "deletePets",
        ]

    def test_collisions_not_deduplicated(self, document):
        ir = normalize(document({
            "/a/items": {"get": {"tags": ["x"]}},
            "/b/items": {"get": {"tags": ["x"]}},
        }))
        names = [r.function_name for r in group_routes(ir)["X"]]
        assert names == ["getItems", "getItems"]
