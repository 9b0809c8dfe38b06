"""Classify operations into CRUD intents, function names and storage groups.

Intent is a pure lookup on (method, trailing path parameter):

  GET    /pets          -> list       findAll
  GET    /pets/{petId}  -> getById    findById
  POST   /pets          -> create     create
  PUT    /pets/{petId}  -> update     update
  PATCH  /pets/{petId}  -> update     update
  DELETE /pets/{petId}  -> delete     delete
  anything else         -> custom     query
"""

from __future__ import annotations

from .models import (
    CrudIntent,
    IntermediateRepresentation,
    Operation,
    PathParam,
    QueryParam,
    RouteClassification,
)
from .naming import build_function_name, group_key, has_trailing_param, path_placeholders
from .type_resolver import primitive_type

# (method, trailing path param) -> intent; None matches either path shape
_INTENT_TABLE: dict[tuple[str, bool | None], CrudIntent] = {
    ("GET", True): CrudIntent.GET_BY_ID,
    ("GET", False): CrudIntent.LIST,
    ("POST", None): CrudIntent.CREATE,
    ("PUT", None): CrudIntent.UPDATE,
    ("PATCH", None): CrudIntent.UPDATE,
    ("DELETE", None): CrudIntent.DELETE,
}

_DB_OPERATIONS: dict[CrudIntent, str] = {
    CrudIntent.LIST: "findAll",
    CrudIntent.GET_BY_ID: "findById",
    CrudIntent.CREATE: "create",
    CrudIntent.UPDATE: "update",
    CrudIntent.DELETE: "delete",
    CrudIntent.CUSTOM: "query",
}

_DEFAULT_SUCCESS: dict[str, int] = {
    "POST": 201,
    "DELETE": 204,
}

_STATUS_TEXT: dict[int, str] = {
    200: "OK",
    201: "Created",
    204: "No Content",
}

DEFAULT_ERROR_STATUS = 400


def classify_intent(method: str, path: str) -> CrudIntent:
    """Look up the CRUD intent for a method and path shape."""
    method = method.upper()
    trailing = has_trailing_param(path)
    intent = _INTENT_TABLE.get((method, trailing)) or _INTENT_TABLE.get((method, None))
    return intent or CrudIntent.CUSTOM


def _first_status(operation: Operation, prefix: str) -> int | None:
    for response in operation.responses:
        code = response.status_code
        if code.startswith(prefix) and code.isdigit():
            return int(code)
    return None


def success_status(operation: Operation) -> int:
    """First declared 2xx code, else the method default (POST 201, DELETE 204, 200)."""
    status = _first_status(operation, "2")
    if status is not None:
        return status
    return _DEFAULT_SUCCESS.get(operation.method.upper(), 200)


def status_text(status: int) -> str:
    return _STATUS_TEXT.get(status, "Success")


def error_status(operation: Operation) -> int:
    """First declared 4xx code, else 400."""
    status = _first_status(operation, "4")
    return DEFAULT_ERROR_STATUS if status is None else status


def has_body(operation: Operation) -> bool:
    return operation.request_body is not None and operation.method.upper() != "GET"


def _path_params(operation: Operation) -> list[PathParam]:
    """Path parameters in the order their placeholders appear in the path.

    Placeholders without a declared parameter are typed as string; declared
    path parameters missing from the template follow at the end.
    """
    declared = {p.name: p for p in operation.parameters if p.location == "path"}
    ordered = path_placeholders(operation.path)
    ordered += [name for name in declared if name not in ordered]
    return [
        PathParam(
            name=name,
            type=primitive_type(declared[name].schema_) if name in declared else "string",
        )
        for name in ordered
    ]


def classify(operation: Operation) -> RouteClassification:
    """Classify a single operation."""
    intent = classify_intent(operation.method, operation.path)
    declared_id = None if operation.operation_id_synthesized else operation.operation_id

    path_params = _path_params(operation)
    query_params = [
        QueryParam(name=p.name, type=primitive_type(p.schema_), required=p.required)
        for p in operation.parameters
        if p.location == "query"
    ]
    status = success_status(operation)

    return RouteClassification(
        group=group_key(operation.tags),
        intent=intent,
        function_name=build_function_name(operation.method, operation.path, declared_id),
        db_operation=_DB_OPERATIONS[intent],
        method=operation.method.upper(),
        path=operation.path,
        summary=operation.summary or operation.description,
        path_params=path_params,
        query_params=query_params,
        id_param=path_params[-1].name if path_params else None,
        has_body=has_body(operation),
        success_status=status,
        success_status_text=status_text(status),
        error_status=error_status(operation),
    )


def group_routes(ir: IntermediateRepresentation) -> dict[str, list[RouteClassification]]:
    """Classify every operation, grouped by storage-group key in first-seen order."""
    groups: dict[str, list[RouteClassification]] = {}
    for operation in ir.operations:
        route = classify(operation)
        groups.setdefault(route.group, []).append(route)
    return groups
