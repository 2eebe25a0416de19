"""Derive where a stub lives and what it is called.

Layout: api/{version}/{topic}/{functionName}
  - version: first path segment like v0, v1, ... (default v0)
  - topic: camelCased first tag (default misc)
  - functionName: lower-case method + PascalCase of the path after the
    version segment, with {param} segments spelled as by-param

Examples:
  GET    /v0/markets                 [Markets] -> v0/markets/getMarkets
  GET    /v0/markets/{id}            [Markets] -> v0/markets/getMarketsById
  POST   /v0/markets/{id}/resolve    [Markets] -> v0/markets/postMarketsByIdResolve
  GET    /v0/{id}                    [Markets] -> v0/markets/getById
  GET    /v0                         [Config]  -> v0/config/getConfig
  DELETE /users/{username}           (no tags) -> v0/misc/deleteUsersByUsername
"""

from __future__ import annotations

import keyword
import re
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Iterable

_VERSION_RE = re.compile(r"^v[0-9]+")
_PARAM_SEGMENT_RE = re.compile(r"^\{([^}]+)\}$")

DEFAULT_VERSION = "v0"
DEFAULT_TOPIC = "misc"

# Names the generated types module imports itself; schemas must not shadow them.
_RESERVED_NAMES = frozenset({
    "Any", "Literal", "NotRequired", "TypeAlias", "TypedDict", "Types",
})


@dataclass(frozen=True)
class EndpointLayout:
    version: str
    topic: str
    function_name: str


def to_camel_case(value: str) -> str:
    """Convert free-form text ("Market Bets", "by-id") to camelCase."""
    cleaned = re.sub(r"[\s\-]+", "_", value.strip())
    cleaned = re.sub(r"[^a-zA-Z0-9_]", "_", cleaned)
    parts = [p.lower() for p in cleaned.split("_") if p]
    if not parts:
        return ""
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


def to_pascal_case(value: str) -> str:
    """Convert free-form text to PascalCase."""
    camel = to_camel_case(value)
    return camel[:1].upper() + camel[1:]


def safe_identifier(name: str) -> str:
    """Turn an arbitrary name into a usable Python identifier.

    Identifiers that are already valid pass through untouched, so schema
    names like ``MarketResponse`` stay as they are.
    """
    ident = re.sub(r"\W", "_", name, flags=re.ASCII) or "_"
    if ident[0].isdigit():
        ident = f"_{ident}"
    if keyword.iskeyword(ident) or ident in _RESERVED_NAMES:
        ident = f"{ident}_"
    return ident


def _first_tag(operation: dict[str, Any]) -> str | None:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags:
        return str(tags[0])
    return None


def derive_endpoint_layout(
    route: str, method: str, operation: dict[str, Any],
) -> EndpointLayout:
    """Derive the version/topic/function-name layout for one operation."""
    segments = [s for s in route.split("/") if s]

    version_index = next(
        (i for i, s in enumerate(segments) if _VERSION_RE.match(s)), None,
    )
    if version_index is None:
        version = DEFAULT_VERSION
        after_version = segments
    else:
        version = segments[version_index]
        after_version = segments[version_index + 1:]

    tag = _first_tag(operation)
    topic = to_camel_case(tag) if tag is not None else DEFAULT_TOPIC

    tokens = []
    for segment in after_version:
        match = _PARAM_SEGMENT_RE.match(segment)
        tokens.append(f"by-{match.group(1)}" if match else segment)

    slug = "_".join(tokens) if tokens else (tag or DEFAULT_TOPIC)
    function_name = f"{method.lower()}{to_pascal_case(slug)}"

    return EndpointLayout(version=version, topic=topic, function_name=function_name)


def deduplicate_function_names(
    layouts: Iterable[EndpointLayout],
) -> list[EndpointLayout]:
    """Make function names unique across one run.

    The first occurrence of a name is kept as is; the Nth (N >= 2) gets
    the suffix N. Input order decides which occurrence is first. If a
    suffixed name is already taken by another route (getFoo2 from /foo2),
    counting continues until a free name is found, so the suffix can run
    ahead of the occurrence count: the second getFoo then becomes getFoo3
    rather than a second getFoo2.
    """
    seen: Counter[str] = Counter()
    taken: set[str] = set()
    unique: list[EndpointLayout] = []
    for layout in layouts:
        name = layout.function_name
        seen[name] += 1
        candidate = name if seen[name] == 1 else f"{name}{seen[name]}"
        while candidate in taken:
            seen[name] += 1
            candidate = f"{name}{seen[name]}"
        taken.add(candidate)
        if candidate != name:
            layout = replace(layout, function_name=candidate)
        unique.append(layout)
    return unique


def assign_schema_identifiers(names: Iterable[str]) -> dict[str, str]:
    """Map each schema name to a distinct Python identifier.

    Names that sanitise to the same identifier (``user-info`` and
    ``user_info``) are resolved like function names: the first keeps it,
    later ones get the suffix 2, 3, ... skipping identifiers in use.
    """
    seen: Counter[str] = Counter()
    taken: set[str] = set()
    identifiers: dict[str, str] = {}
    for name in names:
        ident = safe_identifier(name)
        seen[ident] += 1
        candidate = ident if seen[ident] == 1 else f"{ident}{seen[ident]}"
        while candidate in taken:
            seen[ident] += 1
            candidate = f"{ident}{seen[ident]}"
        taken.add(candidate)
        identifiers[name] = candidate
    return identifiers
