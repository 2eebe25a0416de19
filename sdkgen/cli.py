"""CLI entry point for sdkgen."""

from __future__ import annotations

from pathlib import Path

import click

from .codegen import generate, write_modules
from .config import (
    DEFAULT_FILENAME,
    DEFAULT_OUT_DIR,
    DEFAULT_SPEC_PATH,
    DEFAULT_TYPES_FILENAME,
    DEFAULT_TYPES_OUT_DIR,
    GeneratorOptions,
)
from .loader import SdkGenError, load_spec
from .log import configure_logging


@click.command()
@click.option("--spec", "--spec-path", "spec_path", default=DEFAULT_SPEC_PATH, show_default=True,
              type=click.Path(path_type=Path), help="OpenAPI document (YAML or JSON).")
@click.option("--out", "--out-dir", "out_dir", default=DEFAULT_OUT_DIR, show_default=True,
              type=click.Path(file_okay=False, path_type=Path), help="Output directory for the stubs and index.")
@click.option("--filename", default=DEFAULT_FILENAME, show_default=True,
              help="Filename of the index module inside the output directory.")
@click.option("--types-out", "--types-out-dir", "types_out_dir", default=DEFAULT_TYPES_OUT_DIR, show_default=True,
              type=click.Path(file_okay=False, path_type=Path), help="Output directory for the types module.")
@click.option("--types-filename", default=DEFAULT_TYPES_FILENAME, show_default=True,
              help="Filename of the types module.")
@click.option("-v", "--verbose", is_flag=True, help="Log every generated file.")
def main(
    spec_path: Path,
    out_dir: Path,
    filename: str,
    types_out_dir: Path,
    types_filename: str,
    verbose: bool,
) -> None:
    """Scaffold typed SDK stubs from an OpenAPI document."""
    configure_logging(verbose=verbose)
    options = GeneratorOptions(
        spec_path=spec_path,
        out_dir=out_dir,
        filename=filename,
        types_out_dir=types_out_dir,
        types_filename=types_filename,
    )

    try:
        spec = load_spec(options.spec_path)
        modules = generate(spec, options)
    except SdkGenError as exc:
        raise click.ClickException(str(exc)) from exc

    written = write_modules(modules)
    click.echo(f"Wrote {written} files to {options.out_dir}")
