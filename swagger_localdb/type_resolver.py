"""Resolve schema nodes into TypeScript type expressions.

Handles:
- primitives (string, integer/number, boolean; anything else is any)
- arrays, including arrays without items (any[])
- enums as literal unions in declaration order
- inline object literals and named interfaces
- $ref resolution with call-chain cycle breaking
- unresolvable references (degrade to any)
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .models import IntermediateRepresentation, ResolvedType, SchemaKind, SchemaNode
from .naming import is_identifier, to_pascal_case

logger = logging.getLogger(__name__)

ANY = "any"

_PRIMITIVES: dict[str, str] = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
}


def primitive_type(node: SchemaNode) -> str:
    """Map a node to a primitive TypeScript type without following references."""
    if node.kind in (SchemaKind.PRIMITIVE, SchemaKind.ENUM):
        return _PRIMITIVES.get(node.primitive or "", ANY)
    if node.kind is SchemaKind.ARRAY:
        return f"{ANY}[]"
    return ANY


def _literal(value: Any) -> str:
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(value)


def _array_of(expression: str) -> str:
    if " | " in expression:
        return f"({expression})[]"
    return f"{expression}[]"


def property_key(name: str, required: bool) -> str:
    """Object-literal key for a property, quoted when it is not an identifier."""
    key = name if is_identifier(name) else json.dumps(name)
    return key if required else f"{key}?"


def _doc_comment(text: str | None, indent: str) -> str:
    if not text:
        return ""
    flat = " ".join(text.split()).replace("*/", "*\\/")
    return f"{indent}/** {flat} */\n"


Expansions = dict[str, ResolvedType]


def _resolve_reference(
    node: SchemaNode,
    schemas: dict[str, SchemaNode],
    seen: frozenset[str],
    expansions: Expansions,
) -> ResolvedType:
    ref = node.ref or ""
    name = to_pascal_case(ref)

    if ref in seen:
        return ResolvedType(expression=name, named=True, name=name)

    target = schemas.get(ref)
    if target is None:
        logger.warning("Unresolvable reference to %r, using %s", ref, ANY)
        return ResolvedType(expression=ANY)

    # each target is expanded once per pass; later references reuse it
    expansion = expansions.get(ref)
    if expansion is None:
        expansion = resolve(target, schemas, seen | {ref}, expansions)
        expansions[ref] = expansion
    return ResolvedType(expression=name, named=True, name=name, expansion=expansion)


def resolve(
    node: SchemaNode,
    schemas: dict[str, SchemaNode],
    seen: frozenset[str] = frozenset(),
    expansions: Expansions | None = None,
) -> ResolvedType:
    """Resolve a node in an anonymous position to a structural type.

    ``seen`` holds the definition names on the current call chain only; it
    is extended per recursive call and never shared between siblings.
    ``expansions`` caches expanded reference targets by name. Pass the same
    dict to every call of one generation pass so each target is expanded
    only once; when omitted, a fresh cache is used for this call.
    """
    if expansions is None:
        expansions = {}
    kind = node.kind

    if kind is SchemaKind.REFERENCE:
        return _resolve_reference(node, schemas, seen, expansions)

    if kind is SchemaKind.PRIMITIVE:
        return ResolvedType(expression=primitive_type(node))

    if kind is SchemaKind.ARRAY:
        if node.items is None:
            return ResolvedType(expression=_array_of(ANY))
        items = resolve(node.items, schemas, seen, expansions)
        return ResolvedType(expression=_array_of(items.expression))

    if kind is SchemaKind.ENUM:
        if not node.enum:
            return ResolvedType(expression=primitive_type(node))
        return ResolvedType(expression=" | ".join(_literal(v) for v in node.enum))

    if kind is SchemaKind.OBJECT:
        members = [
            f"{property_key(name, name in node.required)}: "
            f"{resolve(prop, schemas, seen, expansions).expression}"
            for name, prop in node.properties.items()
        ]
        if not members:
            return ResolvedType(expression="{}")
        return ResolvedType(expression="{ " + "; ".join(members) + " }")

    return ResolvedType(expression=ANY)


def resolve_definition(
    name: str,
    node: SchemaNode,
    schemas: dict[str, SchemaNode],
    expansions: Expansions | None = None,
) -> ResolvedType:
    """Resolve a top-level named definition into an exported declaration."""
    if expansions is None:
        expansions = {}
    canonical = to_pascal_case(name)
    seen = frozenset({name})

    if node.kind is SchemaKind.OBJECT:
        body = "".join(
            _doc_comment(prop.description, "  ")
            + f"  {property_key(prop_name, prop_name in node.required)}: "
            + f"{resolve(prop, schemas, seen, expansions).expression};\n"
            for prop_name, prop in node.properties.items()
        )
        declaration = f"export interface {canonical} {{\n{body}}}"
    else:
        expression = resolve(node, schemas, seen, expansions).expression
        declaration = f"export type {canonical} = {expression};"

    return ResolvedType(
        expression=canonical,
        named=True,
        name=canonical,
        declaration=_doc_comment(node.description, "") + declaration,
    )


def resolve_schemas(
    ir: IntermediateRepresentation,
    expansions: Expansions | None = None,
) -> dict[str, ResolvedType]:
    """Resolve every named schema, keyed by canonical name.

    Two definitions that canonicalize to the same identifier are not
    rejected: the later one replaces the earlier and a warning is logged.
    """
    if expansions is None:
        expansions = {}
    table: dict[str, ResolvedType] = {}
    origin: dict[str, str] = {}
    for name, node in ir.schemas.items():
        resolved = resolve_definition(name, node, ir.schemas, expansions)
        if resolved.expression in table:
            logger.warning(
                "Schemas %r and %r both emit type %s; keeping %r",
                origin[resolved.expression], name, resolved.expression, name,
            )
        table[resolved.expression] = resolved
        origin[resolved.expression] = name
    return table
