"""Tests for the loader module."""

import json
from pathlib import Path

import pytest

from sdkgen.loader import (
    InvalidSpec,
    SdkGenError,
    SpecNotFound,
    get_paths,
    get_schemas,
    load_spec,
)

FIXTURES = Path(__file__).parent / "fixtures"
SPEC_PATH = FIXTURES / "openapi.yaml"


class TestLoadSpec:
    """Test reading and validating the OpenAPI document."""

    def test_loads_yaml_fixture(self):
        spec = load_spec(SPEC_PATH)
        assert "/v0/markets" in spec["paths"]

    def test_preserves_document_order(self):
        spec = load_spec(SPEC_PATH)
        routes = list(spec["paths"])
        assert routes[:3] == ["/health", "/v0/login", "/v0/markets"]

    def test_loads_json(self, tmp_path):
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps({"paths": {"/v0/ping": {"get": {}}}}))
        assert load_spec(path)["paths"] == {"/v0/ping": {"get": {}}}

    def test_accepts_string_path(self):
        assert load_spec(str(SPEC_PATH))["paths"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SpecNotFound, match="not found"):
            load_spec(tmp_path / "missing.yaml")

    def test_missing_paths(self, tmp_path):
        path = tmp_path / "openapi.yaml"
        path.write_text("openapi: 3.0.3\ninfo:\n  title: x\n")
        with pytest.raises(InvalidSpec, match="paths"):
            load_spec(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "openapi.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(InvalidSpec):
            load_spec(path)

    def test_unparseable(self, tmp_path):
        path = tmp_path / "openapi.json"
        path.write_text("{not json")
        with pytest.raises(InvalidSpec, match="Could not parse"):
            load_spec(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "openapi.yaml"
        path.write_bytes(b"paths: {}\ninfo: \xff\xfe\n")
        with pytest.raises(InvalidSpec, match="Could not parse"):
            load_spec(path)

    def test_empty_paths_are_valid(self, tmp_path):
        path = tmp_path / "openapi.yaml"
        path.write_text("paths: {}\n")
        assert load_spec(path) == {"paths": {}}

    def test_errors_share_a_base(self):
        assert issubclass(SpecNotFound, SdkGenError)
        assert issubclass(InvalidSpec, SdkGenError)


class TestAccessors:
    """Test the tolerant accessors for paths and schemas."""

    def test_get_schemas(self):
        spec = load_spec(SPEC_PATH)
        assert "Bet" in get_schemas(spec)

    def test_get_schemas_without_components(self):
        assert get_schemas({"paths": {}}) == {}
        assert get_schemas({"paths": {}, "components": None}) == {}
        assert get_schemas({"paths": {}, "components": {"schemas": []}}) == {}

    def test_get_paths_non_mapping(self):
        assert get_paths({"paths": ["/x"]}) == {}
