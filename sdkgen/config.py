"""Generator defaults and per-run options.

Every default can be overridden from the command line (see cli.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_SPEC_PATH = Path("backend/docs/openapi.yaml")
DEFAULT_OUT_DIR = Path("sdk")
DEFAULT_FILENAME = "__init__.py"
DEFAULT_TYPES_OUT_DIR = Path("sdk")
DEFAULT_TYPES_FILENAME = "types.py"

# (route, method) pairs that are maintained by hand and never generated.
DEFAULT_EXCLUDED_OPERATIONS: frozenset[tuple[str, str]] = frozenset({
    ("/health", "get"),
})

# Traversal order for the methods of one path item. Collision suffixes
# depend on it, so it must stay fixed.
METHOD_ORDER: tuple[str, ...] = (
    "get", "put", "post", "delete", "options", "head", "patch", "trace",
)

# Success statuses checked for a result type, in order of preference.
SUCCESS_STATUSES: tuple[str, ...] = ("200", "201", "202", "204")
NO_CONTENT_STATUS = "204"

PREFERRED_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class GeneratorOptions:
    """Where to read the document from and where to put the output."""

    spec_path: Path = DEFAULT_SPEC_PATH
    out_dir: Path = DEFAULT_OUT_DIR
    filename: str = DEFAULT_FILENAME
    types_out_dir: Path = DEFAULT_TYPES_OUT_DIR
    types_filename: str = DEFAULT_TYPES_FILENAME
    excluded_operations: frozenset[tuple[str, str]] = DEFAULT_EXCLUDED_OPERATIONS

    @property
    def types_module(self) -> str:
        """Module name the stubs import the type declarations under."""
        return Path(self.types_filename).stem
