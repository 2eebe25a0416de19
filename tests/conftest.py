"""Shared fixtures for sdkgen tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest

from sdkgen.config import GeneratorOptions
from sdkgen.loader import load_spec

FIXTURES = Path(__file__).parent / "fixtures"
SPEC_PATH = FIXTURES / "openapi.yaml"


@pytest.fixture(scope="session")
def spec() -> dict[str, Any]:
    """The SocialPredict-shaped fixture document."""
    return load_spec(SPEC_PATH)


@pytest.fixture
def options(tmp_path: Path) -> GeneratorOptions:
    """Options writing stubs and types into one package under tmp_path."""
    out_dir = tmp_path / "generated_sdk"
    return GeneratorOptions(
        spec_path=Path("openapi.yaml"),
        out_dir=out_dir,
        types_out_dir=out_dir,
    )


@pytest.fixture(autouse=True)
def _reset_sdkgen_logger():
    """Undo configure_logging() from CLI tests so caplog sees records."""
    yield
    logger = logging.getLogger("sdkgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
