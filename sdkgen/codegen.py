"""Render templates and write generated output.

Takes the contexts from context_builder and produces the types module,
one stub module per operation and the index module re-exporting them.
"""

from __future__ import annotations

import json
import keyword
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import jinja2

from .config import GeneratorOptions
from .context_builder import build_context, build_types_context
from .loader import InvalidOptions
from .log import get_logger

TEMPLATE_DIR = Path(__file__).parent / "templates"

logger = get_logger("codegen")


@dataclass(frozen=True)
class GeneratedModule:
    path: Path
    contents: str


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    # Double-quoted Python string literal.
    env.filters["pystr"] = json.dumps
    return env


def render_operation(
    env: jinja2.Environment, op: dict[str, Any], *, source: str, types_module: str,
) -> str:
    """Render one stub module."""
    template = env.get_template("operation.py.j2")
    return template.render(op=op, source=source, types_module=types_module)


def render_index(
    env: jinja2.Environment, entries: list[dict[str, Any]], *, source: str,
) -> str:
    """Render the index module re-exporting every stub."""
    template = env.get_template("index.py.j2")
    return template.render(entries=entries, source=source)


def render_types(
    env: jinja2.Environment, context: dict[str, Any], *, source: str,
) -> str:
    """Render the types module for components/schemas."""
    template = env.get_template("types.py.j2")
    return template.render(source=source, **context)


def generate(spec: dict[str, Any], options: GeneratorOptions) -> list[GeneratedModule]:
    """Produce every module for one run, in write order.

    Nothing is written here; the result depends only on ``spec`` and
    ``options``.
    """
    types_module = options.types_module
    if not types_module.isidentifier() or keyword.iskeyword(types_module):
        raise InvalidOptions(
            f"Types filename {options.types_filename!r} is not an importable module name"
        )

    env = _environment()
    source = Path(options.spec_path).as_posix()

    if Path(options.types_out_dir) != Path(options.out_dir):
        logger.warning(
            "Stubs import %s from %s; it is being written to %s instead",
            options.types_filename, options.out_dir, options.types_out_dir,
        )

    types_context = build_types_context(spec)
    modules = [
        GeneratedModule(
            path=Path(options.types_out_dir) / options.types_filename,
            contents=render_types(env, types_context, source=source),
        )
    ]

    context = build_context(spec, excluded=options.excluded_operations)
    for op in context["operations"]:
        logger.debug("%s %s -> %s", op["method_upper"], op["route"], op["path"])
        modules.append(GeneratedModule(
            path=Path(options.out_dir) / op["path"],
            contents=render_operation(
                env, op, source=source, types_module=types_module,
            ),
        ))

    modules.append(GeneratedModule(
        path=Path(options.out_dir) / options.filename,
        contents=render_index(env, context["index"], source=source),
    ))

    logger.info(
        "Generated %d stubs and %d type declarations",
        context["operation_count"], types_context["declaration_count"],
    )
    return modules


def write_modules(modules: Iterable[GeneratedModule]) -> int:
    """Overwrite each module on disk, creating directories as needed."""
    count = 0
    for module in modules:
        module.path.parent.mkdir(parents=True, exist_ok=True)
        module.path.write_text(module.contents, encoding="utf-8")
        logger.debug("Wrote %s", module.path)
        count += 1
    return count
