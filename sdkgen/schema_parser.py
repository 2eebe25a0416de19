"""Translate OpenAPI schemas into Python type expressions.

Raw schema nodes are decoded once into a small tagged variant
(ref / enum / primitive / array / object / unknown) and every mapper
works on that variant. Decoding accepts any value, so the mappers
cannot fail: a malformed schema becomes ``Any`` and generation of the
rest of the surface carries on.

Two renderings:
- structural (resolve_schema_type): property types inside the generated
  types module, where other schemas are referenced by bare name
- SDK (resolve_sdk_type): parameter and result types of the stubs, where
  schemas are referenced through the ``Types`` module alias
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .config import NO_CONTENT_STATUS, PREFERRED_MEDIA_TYPE, SUCCESS_STATUSES
from .naming import safe_identifier

ANY_TYPE = "Any"
NONE_TYPE = "None"
TYPES_ALIAS = "Types"

_PRIMITIVE_TYPES: dict[str, str] = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
}


@dataclass(frozen=True)
class RefSchema:
    name: str


@dataclass(frozen=True)
class EnumSchema:
    values: tuple[Any, ...]


@dataclass(frozen=True)
class PrimitiveSchema:
    kind: str


@dataclass(frozen=True)
class ArraySchema:
    items: Schema


@dataclass(frozen=True)
class ObjectSchema:
    properties: dict[str, Schema] = field(default_factory=dict)
    required: frozenset[str] = frozenset()
    # None when the object takes no additional properties.
    additional: Schema | None = None


@dataclass(frozen=True)
class UnknownSchema:
    pass


Schema = Union[RefSchema, EnumSchema, PrimitiveSchema, ArraySchema, ObjectSchema, UnknownSchema]

UNKNOWN = UnknownSchema()


def ref_name(ref: Any) -> str | None:
    """Return the schema name of a local ``#/...`` reference."""
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return None
    name = ref.rsplit("/", 1)[-1]
    return name or None


def is_object_like(node: Any) -> bool:
    """True for schemas that map to a TypedDict in the types module."""
    return isinstance(node, dict) and (
        node.get("type") == "object"
        or node.get("properties") not in (None, False)
        or node.get("additionalProperties") not in (None, False)
    )


def parse_schema(node: Any) -> Schema:
    """Decode a raw schema node into the tagged variant. Never raises."""
    if not isinstance(node, dict):
        return UNKNOWN

    if "$ref" in node:
        name = ref_name(node["$ref"])
        return RefSchema(name) if name else UNKNOWN

    enum = node.get("enum")
    if isinstance(enum, list) and enum:
        return EnumSchema(tuple(enum))

    schema_type = node.get("type")
    if isinstance(schema_type, str) and schema_type in _PRIMITIVE_TYPES:
        return PrimitiveSchema(schema_type)
    if schema_type == "array":
        return ArraySchema(parse_schema(node.get("items")))
    if schema_type == "object" or (
        schema_type is None
        and ("properties" in node or "additionalProperties" in node)
    ):
        return parse_object_schema(node)

    return UNKNOWN


def parse_object_schema(node: dict[str, Any]) -> ObjectSchema:
    """Decode the object part of a schema, whatever its declared type."""
    properties = node.get("properties")
    if not isinstance(properties, dict):
        properties = {}
    required = node.get("required")
    if not isinstance(required, list):
        required = []
    additional = node.get("additionalProperties")

    return ObjectSchema(
        properties={str(k): parse_schema(v) for k, v in properties.items()},
        required=frozenset(str(r) for r in required),
        # additionalProperties: true means "any value"; false means none.
        additional=None if additional in (None, False) else parse_schema(additional),
    )


def _ref_identifier(name: str, names: Mapping[str, str] | None) -> str:
    """Identifier a referenced schema is declared under in the types module."""
    if names and name in names:
        return names[name]
    return safe_identifier(name)


def _literal(value: Any) -> str:
    """Render one enum value as a Literal[] member."""
    if isinstance(value, str):
        return json.dumps(value)
    if value is None or isinstance(value, (bool, int)):
        return repr(value)
    if isinstance(value, float) and math.isfinite(value):
        return repr(value)
    return json.dumps(str(value))


def map_structural(schema: Schema, names: Mapping[str, str] | None = None) -> str:
    """Structural rendering of an already decoded schema.

    ``names`` maps schema names to their declared identifiers; without it
    references are sanitised one by one.
    """
    if isinstance(schema, RefSchema):
        return _ref_identifier(schema.name, names)
    if isinstance(schema, EnumSchema):
        return f"Literal[{', '.join(_literal(v) for v in schema.values)}]"
    if isinstance(schema, PrimitiveSchema):
        return _PRIMITIVE_TYPES[schema.kind]
    if isinstance(schema, ArraySchema):
        return f"list[{map_structural(schema.items, names)}]"
    if isinstance(schema, ObjectSchema):
        if schema.additional is not None:
            return f"dict[str, {map_structural(schema.additional, names)}]"
        return f"dict[str, {ANY_TYPE}]"
    return ANY_TYPE


def map_sdk(schema: Schema, names: Mapping[str, str] | None = None) -> str | None:
    """SDK rendering of an already decoded schema; None when not expressible."""
    if isinstance(schema, RefSchema):
        return f"{TYPES_ALIAS}.{_ref_identifier(schema.name, names)}"
    if isinstance(schema, ArraySchema):
        return f"list[{map_sdk(schema.items, names) or ANY_TYPE}]"
    if isinstance(schema, PrimitiveSchema):
        return map_structural(schema)
    return None


def resolve_schema_type(node: Any, names: Mapping[str, str] | None = None) -> str:
    """Resolve a raw schema node to its structural type string."""
    return map_structural(parse_schema(node), names)


def resolve_sdk_type(node: Any, names: Mapping[str, str] | None = None) -> str | None:
    """Resolve a raw schema node to a ``Types``-qualified type string."""
    return map_sdk(parse_schema(node), names)


def _select_media_schema(content: Any) -> Any:
    """Pick the schema of the JSON media entry, else of the first entry."""
    if not isinstance(content, dict) or not content:
        return None
    media = content.get(PREFERRED_MEDIA_TYPE)
    if media is None:
        media = next(iter(content.values()))
    if not isinstance(media, dict):
        return None
    return media.get("schema")


def get_request_type(
    operation: dict[str, Any], names: Mapping[str, str] | None = None,
) -> str | None:
    """Resolve the request body type of an operation, if expressible."""
    request_body = operation.get("requestBody")
    if not isinstance(request_body, dict):
        return None
    schema = _select_media_schema(request_body.get("content"))
    if not schema:
        return None
    return resolve_sdk_type(schema, names)


def get_response_type(
    operation: dict[str, Any], names: Mapping[str, str] | None = None,
) -> str:
    """Resolve the result type of an operation.

    A declared 204 always means no value, whatever the other responses
    carry. Otherwise the first of 200/201/202 with usable content wins.
    Falls back to Any when none has any.
    """
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return ANY_TYPE
    # YAML loads unquoted status codes as ints.
    by_status = {str(status): response for status, response in responses.items()}

    if NO_CONTENT_STATUS in by_status:
        return NONE_TYPE

    for status in SUCCESS_STATUSES:
        response = by_status.get(status)
        if not isinstance(response, dict):
            continue
        schema = _select_media_schema(response.get("content"))
        if not schema:
            continue
        resolved = resolve_sdk_type(schema, names)
        if resolved:
            return resolved

    return ANY_TYPE
