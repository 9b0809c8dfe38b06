"""Build the Jinja2 template context from the IR.

Resolves named schemas, classifies every operation into its storage group,
attaches seed records, and precomputes the TypeScript snippets (signatures,
database calls, request/response types) the templates stitch together.
"""

from __future__ import annotations

import logging
from typing import Any

from .classifier import group_routes
from .config import GeneratorConfig
from .models import CrudIntent, IntermediateRepresentation, Operation, RouteClassification
from .naming import to_camel_case, to_identifier, to_kebab_case, to_pascal_case
from .seed import SeedData, seed_records
from .type_resolver import Expansions, property_key, resolve, resolve_schemas

logger = logging.getLogger(__name__)

JSON_CONTENT = "application/json"


def _query_shape(route: RouteClassification) -> str:
    fields = " ".join(
        f"{property_key(q.name, q.required)}: {q.type};" for q in route.query_params
    )
    return f"{{ {fields} }}"


def _signature(route: RouteClassification) -> str:
    """Argument list: path params, then the query object, then the body.

    Path parameters become identifiers (``pet-id`` -> ``petId``). An
    all-optional query object followed by a body gets an ``= {}`` default,
    since TypeScript does not allow an optional argument before a required one.
    """
    args = [f"{to_identifier(p.name)}: {p.type}" for p in route.path_params]
    if route.query_params:
        shape = _query_shape(route)
        if any(q.required for q in route.query_params):
            args.append(f"params: {shape}")
        elif route.has_body:
            args.append(f"params: {shape} = {{}}")
        else:
            args.append(f"params?: {shape}")
    if route.has_body:
        args.append("body: any")
    return ", ".join(args)


def _log_args(route: RouteClassification) -> list[str]:
    names = [to_identifier(p.name) for p in route.path_params]
    if route.query_params:
        names.append("params")
    if route.has_body:
        names.append("body")
    return names


def _id_expression(route: RouteClassification) -> str:
    if route.id_param:
        return f"String({to_identifier(route.id_param)})"
    if route.has_body:
        return "String(body?.id ?? '')"
    return "''"


def _db_arguments(route: RouteClassification) -> str:
    params = "params" if route.query_params else ""
    body = "body" if route.has_body else "{}"
    intent = route.intent
    if intent in (CrudIntent.LIST, CrudIntent.CUSTOM):
        return params
    if intent is CrudIntent.GET_BY_ID or intent is CrudIntent.DELETE:
        return _id_expression(route)
    if intent is CrudIntent.CREATE:
        return body
    return f"{_id_expression(route)}, {body}"


def _route_context(route: RouteClassification) -> dict[str, Any]:
    return {
        "name": route.function_name,
        "method": route.method,
        "path": route.path,
        "intent": route.intent.value,
        "doc": route.summary or f"{route.method} {route.path}",
        "signature": _signature(route),
        "log_args": _log_args(route),
        "db_operation": route.db_operation,
        "db_arguments": _db_arguments(route),
        "success_status": route.success_status,
        "success_status_text": route.success_status_text,
        "error_status": route.error_status,
    }


def _warn_on_collisions(group: str, routes: list[RouteClassification]) -> None:
    """Report function names emitted twice in one group; the later one wins."""
    seen: set[str] = set()
    for route in routes:
        if route.function_name in seen:
            logger.warning(
                "Function %s is emitted twice in group %s (%s %s overrides it)",
                route.function_name, group, route.method, route.path,
            )
        seen.add(route.function_name)


def _endpoint_types(ir: IntermediateRepresentation, expansions: Expansions) -> list[dict[str, Any]]:
    """Per-operation request/response type snippets."""
    endpoint_types = []
    for operation in ir.operations:
        endpoint_types.append({
            "name": to_pascal_case(operation.operation_id),
            "request": _request_type(operation, ir, expansions),
            "response": _response_type(operation, ir, expansions),
        })
    return endpoint_types


def _request_type(
    operation: Operation,
    ir: IntermediateRepresentation,
    expansions: Expansions,
) -> dict[str, Any] | None:
    if operation.request_body is None:
        return None

    def type_of(schema):
        return resolve(schema, ir.schemas, expansions=expansions).expression

    path_fields = [
        {"key": property_key(p.name, True), "type": type_of(p.schema_)}
        for p in operation.parameters
        if p.location == "path"
    ]
    query_fields = [
        {"key": property_key(p.name, p.required), "type": type_of(p.schema_)}
        for p in operation.parameters
        if p.location == "query"
    ]
    body_schema = operation.request_body.content.get(JSON_CONTENT)
    return {
        "path_fields": path_fields,
        "query_fields": query_fields,
        "body": type_of(body_schema) if body_schema else None,
    }


def _response_type(
    operation: Operation,
    ir: IntermediateRepresentation,
    expansions: Expansions,
) -> str:
    for response in operation.responses:
        if response.status_code.startswith("2"):
            schema = response.content.get(JSON_CONTENT)
            if schema is None:
                return "void"
            return resolve(schema, ir.schemas, expansions=expansions).expression
    return "void"


def build_context(
    ir: IntermediateRepresentation,
    config: GeneratorConfig | None = None,
    seed: SeedData | None = None,
) -> dict[str, Any]:
    """Build the full template context."""
    config = config or GeneratorConfig()
    # shared by every resolve call in this pass
    expansions: Expansions = {}
    types = resolve_schemas(ir, expansions)

    groups = []
    for key, routes in group_routes(ir).items():
        _warn_on_collisions(key, routes)
        slug = to_kebab_case(key)
        groups.append({
            "key": key,
            "slug": slug,
            "store_name": slug,
            "api_class": f"{key}Api",
            "db_class": f"{key}Database",
            "instance": f"{to_camel_case(key)}Api",
            "routes": [_route_context(r) for r in routes],
            "seed": seed_records(seed, key),
        })

    return {
        "info": ir.info.model_dump(),
        "servers": [s.model_dump() for s in ir.servers],
        "config": config.model_dump(),
        "declarations": [t.declaration for t in types.values()],
        "endpoint_types": _endpoint_types(ir, expansions),
        "groups": groups,
        "operation_count": len(ir.operations),
        "schema_count": len(types),
    }
