"""Load and minimally validate an OpenAPI document.

YAML and JSON are both accepted; nothing beyond the presence of
``paths`` is checked.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .log import get_logger

logger = get_logger("loader")


class SdkGenError(Exception):
    """Base class for errors that abort a generation run."""


class SpecNotFound(SdkGenError):
    """The OpenAPI document does not exist."""


class InvalidSpec(SdkGenError):
    """The OpenAPI document could not be parsed or has no ``paths``."""


class InvalidOptions(SdkGenError):
    """The generator options cannot produce an importable SDK."""


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load the OpenAPI document from disk."""
    spec_file = Path(path)
    if not spec_file.is_file():
        raise SpecNotFound(f"OpenAPI spec not found at {spec_file.resolve()}")

    try:
        raw = spec_file.read_text(encoding="utf-8")
        if spec_file.suffix.lower() == ".json":
            doc = json.loads(raw)
        else:
            doc = yaml.safe_load(raw)
    except (ValueError, yaml.YAMLError) as exc:
        raise InvalidSpec(f"Could not parse {spec_file}: {exc}") from exc

    if not isinstance(doc, dict) or doc.get("paths") is None:
        raise InvalidSpec("Parsed OpenAPI document is missing a 'paths' object")

    logger.debug("Loaded %s (%d paths)", spec_file, len(get_paths(doc)))
    return doc


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    paths = spec.get("paths")
    return paths if isinstance(paths, dict) else {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the spec."""
    components = spec.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, dict) else {}
