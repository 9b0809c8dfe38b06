"""Reshape a validated OpenAPI document into the intermediate representation.

Pure function of its input: no recursion into $ref targets, no I/O. Every
optional list or map defaults to an empty collection so downstream code
never has to null-check.
"""

from __future__ import annotations

from typing import Any

from .models import (
    UNKNOWN,
    ApiInfo,
    IntermediateRepresentation,
    Operation,
    Parameter,
    RequestBody,
    Response,
    SchemaKind,
    SchemaNode,
    Server,
)
from .loader import resolve_ref
from .naming import ref_name, synthesize_operation_id

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head")


def _merge_all_of(members: list[Any]) -> SchemaNode:
    """Merge an allOf made only of inline object schemas into one object node."""
    if len(members) == 1:
        return parse_schema(members[0])

    nodes = [parse_schema(m) for m in members]
    if any(n.kind is not SchemaKind.OBJECT for n in nodes):
        return UNKNOWN

    properties: dict[str, SchemaNode] = {}
    required: set[str] = set()
    for node in nodes:
        properties.update(node.properties)
        required |= node.required
    return SchemaNode(
        kind=SchemaKind.OBJECT,
        primitive="object",
        properties=properties,
        required=frozenset(required),
    )


def parse_schema(schema: Any) -> SchemaNode:
    """Convert one raw schema object into a SchemaNode."""
    if not isinstance(schema, dict) or not schema:
        return UNKNOWN

    if "$ref" in schema:
        return SchemaNode(
            kind=SchemaKind.REFERENCE,
            ref=ref_name(schema["$ref"]),
            description=schema.get("description"),
        )

    if "allOf" in schema:
        node = _merge_all_of(schema["allOf"] or [])
        if schema.get("description") and node.description is None:
            node = node.model_copy(update={"description": schema["description"]})
        return node

    if "oneOf" in schema or "anyOf" in schema:
        return UNKNOWN

    schema_type = schema.get("type")
    # OpenAPI 3.1 allows a list of types; ["string", "null"] means a nullable string
    if isinstance(schema_type, list):
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if len(non_null) == 1 else None

    common = {
        "primitive": schema_type,
        "format": schema.get("format"),
        "description": schema.get("description"),
    }

    if "enum" in schema:
        return SchemaNode(kind=SchemaKind.ENUM, enum=list(schema["enum"] or []), **common)

    if schema_type == "array" or "items" in schema:
        items = schema.get("items")
        return SchemaNode(
            kind=SchemaKind.ARRAY,
            items=parse_schema(items) if items else None,
            **common,
        )

    if schema_type == "object" or "properties" in schema:
        properties = {
            name: parse_schema(prop)
            for name, prop in (schema.get("properties") or {}).items()
        }
        return SchemaNode(
            kind=SchemaKind.OBJECT,
            properties=properties,
            required=frozenset(schema.get("required") or []),
            **common,
        )

    if isinstance(schema_type, str):
        return SchemaNode(kind=SchemaKind.PRIMITIVE, **common)

    return UNKNOWN


def _parse_content(content: Any) -> dict[str, SchemaNode]:
    return {
        media_type: parse_schema((media or {}).get("schema"))
        for media_type, media in (content or {}).items()
    }


def _deref(document: dict[str, Any], node: Any) -> Any:
    """Follow local $refs on parameter, body and response objects (not on schemas)."""
    hops = 0
    while isinstance(node, dict) and "$ref" in node and hops < 16:
        node = resolve_ref(document, node["$ref"])
        hops += 1
    return node


def _parse_parameter(param: dict[str, Any]) -> Parameter:
    return Parameter(
        name=param["name"],
        location=param.get("in", "query"),
        required=bool(param.get("required", False)),
        schema=parse_schema(param.get("schema")),
        description=param.get("description"),
    )


def _parse_request_body(body: Any) -> RequestBody | None:
    if not body:
        return None
    return RequestBody(
        required=bool(body.get("required", False)),
        content=_parse_content(body.get("content")),
    )


def _parse_responses(responses: Any) -> list[Response]:
    return [
        Response(
            status_code=str(status_code),
            description=(response or {}).get("description") or "",
            content=_parse_content((response or {}).get("content")),
        )
        for status_code, response in (responses or {}).items()
    ]


def _merge_parameters(
    document: dict[str, Any],
    shared: list[Any],
    own: list[Any],
) -> list[Parameter]:
    """Combine path-level and operation-level parameters.

    Operation-level entries override path-level ones with the same
    (name, location); unresolvable or nameless entries are dropped.
    """
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for raw in [*shared, *own]:
        param = _deref(document, raw)
        if not isinstance(param, dict) or "name" not in param:
            continue
        merged[(param["name"], param.get("in", "query"))] = param
    return [_parse_parameter(p) for p in merged.values()]


def parse_operation(
    path: str,
    method: str,
    operation: dict[str, Any],
    document: dict[str, Any] | None = None,
    shared_parameters: list[Any] | None = None,
) -> Operation:
    """Build one Operation for a (path, method) pair."""
    document = document or {}
    declared_id = operation.get("operationId")
    responses = {
        code: _deref(document, response)
        for code, response in (operation.get("responses") or {}).items()
    }
    return Operation(
        path=path,
        method=method.upper(),
        operation_id=declared_id or synthesize_operation_id(method, path),
        operation_id_synthesized=not declared_id,
        summary=operation.get("summary"),
        description=operation.get("description"),
        parameters=_merge_parameters(
            document, shared_parameters or [], operation.get("parameters") or []
        ),
        request_body=_parse_request_body(_deref(document, operation.get("requestBody"))),
        responses=_parse_responses(responses),
        tags=list(operation.get("tags") or []),
    )


def normalize(document: dict[str, Any]) -> IntermediateRepresentation:
    """Produce the IR for a validated OpenAPI document."""
    info = document.get("info") or {}

    operations: list[Operation] = []
    for path, path_item in (document.get("paths") or {}).items():
        if not path_item:
            continue
        shared = path_item.get("parameters") or []
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if operation is not None:
                operations.append(parse_operation(path, method, operation, document, shared))

    schemas = {
        name: parse_schema(schema)
        for name, schema in ((document.get("components") or {}).get("schemas") or {}).items()
    }

    return IntermediateRepresentation(
        info=ApiInfo(
            title=info.get("title", ""),
            version=str(info.get("version", "")),
            description=info.get("description"),
        ),
        servers=[
            Server(url=s.get("url", ""), description=s.get("description"))
            for s in document.get("servers") or []
        ],
        operations=operations,
        schemas=schemas,
    )
