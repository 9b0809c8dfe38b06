"""Intermediate representation shared by the normalizer, resolver and classifier.

The IR is built once per run by ``normalizer.normalize`` and never mutated
afterwards; every model here is frozen.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SchemaKind(str, Enum):
    PRIMITIVE = "primitive"
    OBJECT = "object"
    ARRAY = "array"
    ENUM = "enum"
    REFERENCE = "reference"
    UNKNOWN = "unknown"


class SchemaNode(_Frozen):
    """One node of a schema tree.

    References keep the target definition's key in ``ref`` and are only
    followed at resolution time, so cyclic schema graphs stay finite here.
    """

    kind: SchemaKind
    primitive: str | None = None  # declared "type" for primitives and enums
    format: str | None = None
    description: str | None = None
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    required: frozenset[str] = frozenset()
    items: SchemaNode | None = None
    enum: list[Any] = Field(default_factory=list)
    ref: str | None = None


UNKNOWN = SchemaNode(kind=SchemaKind.UNKNOWN)


class Parameter(_Frozen):
    name: str
    location: str  # path / query / header / cookie
    required: bool = False
    schema_: SchemaNode = Field(default=UNKNOWN, alias="schema")
    description: str | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RequestBody(_Frozen):
    required: bool = False
    content: dict[str, SchemaNode] = Field(default_factory=dict)


class Response(_Frozen):
    status_code: str
    description: str = ""
    content: dict[str, SchemaNode] = Field(default_factory=dict)


class Operation(_Frozen):
    """One HTTP method bound to one path template."""

    path: str
    method: str  # upper-case
    operation_id: str
    operation_id_synthesized: bool = False
    summary: str | None = None
    description: str | None = None
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: RequestBody | None = None
    responses: list[Response] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class ApiInfo(_Frozen):
    title: str
    version: str
    description: str | None = None


class Server(_Frozen):
    url: str
    description: str | None = None


class IntermediateRepresentation(_Frozen):
    info: ApiInfo
    servers: list[Server] = Field(default_factory=list)
    operations: list[Operation] = Field(default_factory=list)
    schemas: dict[str, SchemaNode] = Field(default_factory=dict)


class ResolvedType(_Frozen):
    """A TypeScript type expression produced by the type resolver.

    ``named`` types refer to a top-level definition by its canonical
    ``name``; ``declaration`` is only set when resolving that definition
    itself. For references, ``expansion`` holds the eagerly resolved target,
    or None when the reference closes a cycle or points nowhere.
    """

    expression: str
    named: bool = False
    name: str | None = None
    declaration: str | None = None
    expansion: ResolvedType | None = None


class CrudIntent(str, Enum):
    LIST = "list"
    GET_BY_ID = "getById"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CUSTOM = "custom"


class PathParam(_Frozen):
    name: str
    type: str


class QueryParam(_Frozen):
    name: str
    type: str
    required: bool = False


class RouteClassification(_Frozen):
    group: str
    intent: CrudIntent
    function_name: str
    db_operation: str
    method: str
    path: str
    summary: str | None = None
    path_params: list[PathParam] = Field(default_factory=list)
    query_params: list[QueryParam] = Field(default_factory=list)
    id_param: str | None = None
    has_body: bool = False
    success_status: int = 200
    success_status_text: str = "OK"
    error_status: int = 400
