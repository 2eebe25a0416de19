"""Build Jinja2 template contexts from a parsed OpenAPI document.

Walks the operations in document order to produce one stub context per
operation plus the index entries, and walks components/schemas to
produce the type declarations.
"""

from __future__ import annotations

import keyword
from pathlib import PurePosixPath
from typing import Any, Collection, Mapping

from .config import DEFAULT_EXCLUDED_OPERATIONS, METHOD_ORDER
from .loader import get_paths, get_schemas
from .log import get_logger
from .naming import (
    assign_schema_identifiers,
    deduplicate_function_names,
    derive_endpoint_layout,
    safe_identifier,
)
from .schema_parser import (
    get_request_type,
    get_response_type,
    is_object_like,
    map_structural,
    parse_object_schema,
    parse_schema,
)

logger = get_logger("context")


def _escape_docstring(text: str) -> str:
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    # A trailing quote would run into the closing triple quote.
    if text.endswith('"'):
        head = text[:-1]
        if (len(head) - len(head.rstrip("\\"))) % 2 == 0:
            text = head + '\\"'
    return text


def _doc_lines(text: Any, escape: bool = True) -> list[str]:
    """Split free text into stripped lines, escaped for a docstring body."""
    if not isinstance(text, str) or not text.strip():
        return []
    lines = [line.rstrip() for line in text.strip().splitlines()]
    return [_escape_docstring(line) for line in lines] if escape else lines


def _indent(lines: list[str], prefix: str = "    ") -> list[str]:
    return [f"{prefix}{line}" if line else "" for line in lines]


def _iter_operations(spec: dict[str, Any]):
    """Yield (route, method, operation) in document order."""
    for route, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            continue
        for method in METHOD_ORDER:
            operation = path_item.get(method)
            if isinstance(operation, dict):
                yield str(route), method, operation


def schema_identifiers(spec: dict[str, Any]) -> dict[str, str]:
    """Identifier each declared schema gets in the types module."""
    return assign_schema_identifiers(
        str(name) for name, node in get_schemas(spec).items() if isinstance(node, dict)
    )


def build_context(
    spec: dict[str, Any],
    excluded: Collection[tuple[str, str]] = DEFAULT_EXCLUDED_OPERATIONS,
) -> dict[str, Any]:
    """Build the stub and index context for every operation in the spec."""
    selected: list[tuple[str, str, dict[str, Any]]] = []
    matched: set[tuple[str, str]] = set()

    for route, method, operation in _iter_operations(spec):
        if (route, method) in excluded:
            logger.debug("Skipping excluded operation %s %s", method.upper(), route)
            matched.add((route, method))
            continue
        selected.append((route, method, operation))

    for route, method in sorted(set(excluded) - matched):
        logger.warning(
            "Excluded operation %s %s is not in the spec; nothing was skipped for it",
            method.upper(), route,
        )

    names = schema_identifiers(spec)
    layouts = deduplicate_function_names(
        derive_endpoint_layout(route, method, operation)
        for route, method, operation in selected
    )

    operations: list[dict[str, Any]] = []
    for (route, method, operation), layout in zip(selected, layouts):
        version_dir = safe_identifier(layout.version)
        topic_dir = safe_identifier(layout.topic)
        name = layout.function_name

        summary = operation.get("summary") or operation.get("description")
        doc = _doc_lines(summary)

        operations.append({
            "name": name,
            "method": method,
            "method_upper": method.upper(),
            "route": route,
            "version": layout.version,
            "topic": layout.topic,
            "module": f"{version_dir}.{topic_dir}.{name}",
            "path": PurePosixPath("api", version_dir, topic_dir, f"{name}.py"),
            "request_type": get_request_type(operation, names),
            "response_type": get_response_type(operation, names),
            "doc_summary": doc[0] if doc else "",
            "doc_rest": _indent(doc[1:]),
            "error_message": f"Not implemented: {name} ({method.upper()} {route})",
        })

    return {
        "operations": operations,
        "index": [{"name": op["name"], "module": op["module"]} for op in operations],
        "operation_count": len(operations),
    }


def _is_class_field(name: str) -> bool:
    """Whether a property name can be written as a TypedDict class attribute."""
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not (name.startswith("__") and not name.endswith("__"))
    )


def _build_declaration(
    name: str, node: dict[str, Any], names: Mapping[str, str],
) -> dict[str, Any]:
    ident = names[name]
    doc = _doc_lines(node.get("description"))
    comment = [
        f"# {line}" if line else "#"
        for line in _doc_lines(node.get("description"), escape=False)
    ]

    if not is_object_like(node):
        return {
            "kind": "alias",
            "name": ident,
            "comment_lines": comment,
            "value": repr(map_structural(parse_schema(node), names)),
        }

    schema = parse_object_schema(node)

    fields = []
    for prop_name, prop_schema in schema.properties.items():
        annotation = map_structural(prop_schema, names)
        if prop_name not in schema.required:
            annotation = f"NotRequired[{annotation}]"
        fields.append({
            "name": prop_name,
            "key": repr(prop_name),
            "annotation": annotation,
            "quoted": repr(annotation),
        })

    extra_items = None
    if schema.additional is not None:
        extra_items = repr(map_structural(schema.additional, names))

    functional = not all(_is_class_field(f["name"]) for f in fields)
    return {
        "kind": "functional" if functional else "class",
        "name": ident,
        "comment_lines": comment if functional else [],
        "doc_summary": doc[0] if doc and not functional else "",
        "doc_rest": _indent(doc[1:]) if not functional else [],
        "fields": fields,
        "extra_items": extra_items,
    }


def build_types_context(spec: dict[str, Any]) -> dict[str, Any]:
    """Build the context for the types module from components/schemas."""
    names = schema_identifiers(spec)
    declarations: list[dict[str, Any]] = []
    for name, node in get_schemas(spec).items():
        if not isinstance(node, dict):
            logger.warning("Skipping schema %r: not a mapping", name)
            continue
        name = str(name)
        if names[name] != safe_identifier(name):
            logger.warning(
                "Schema %r collides with another schema name; declared as %s",
                name, names[name],
            )
        declarations.append(_build_declaration(name, node, names))

    return {
        "declarations": declarations,
        "declaration_count": len(declarations),
    }
