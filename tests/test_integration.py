"""End-to-end: generate an SDK tree from the fixture spec and import it.

Proves the generated stubs, index and types are importable Python and
that the stubs keep their placeholder contract.
"""

from __future__ import annotations

import importlib
import sys
import typing

import pytest

from sdkgen.codegen import generate, write_modules
from sdkgen.runtime import GeneratedSdkContext

pytestmark = pytest.mark.integration


@pytest.fixture
def sdk(spec, options):
    """Write the generated tree to tmp_path and import it as a package."""
    write_modules(generate(spec, options))
    package = options.out_dir.name
    sys.path.insert(0, str(options.out_dir.parent))
    try:
        yield importlib.import_module(package)
    finally:
        sys.path.remove(str(options.out_dir.parent))
        for name in [m for m in sys.modules if m == package or m.startswith(f"{package}.")]:
            del sys.modules[name]


class TestGeneratedSdk:
    """Test the generated package as a consumer would use it."""

    def test_index_exports_every_stub(self, sdk):
        assert len(sdk.__all__) == 10
        for name in sdk.__all__:
            assert callable(getattr(sdk, name))

    def test_health_check_not_exported(self, sdk):
        assert not hasattr(sdk, "getHealth")

    async def test_stub_raises_not_implemented(self, sdk):
        with pytest.raises(NotImplementedError, match=r"getMarketsById \(GET /v0/markets/\{id\}\)"):
            await sdk.getMarketsById(GeneratedSdkContext())

    async def test_stub_params_optional_when_unresolved(self, sdk):
        with pytest.raises(NotImplementedError):
            await sdk.getStats(GeneratedSdkContext())

    def test_signature_types_resolve(self, sdk):
        types_module = importlib.import_module(f"{sdk.__name__}.types")
        hints = typing.get_type_hints(sdk.postLogin)
        assert hints["params"] is types_module.LoginRequest
        assert hints["return"] is types_module.LoginResponse
        assert hints["ctx"] is GeneratedSdkContext

    def test_no_value_result(self, sdk):
        hints = typing.get_type_hints(sdk.postMarketsByIdResolve)
        assert hints["return"] is type(None)

    def test_types_module_declarations(self, sdk):
        types_module = importlib.import_module(f"{sdk.__name__}.types")
        for name in ("Bet", "MarketResponse", "HeaderMap", "UserPositions"):
            assert hasattr(types_module, name), name
        assert types_module.Bet.__doc__.startswith("A wager placed by a user.")
        assert types_module.MarketStatus == 'Literal["active", "closed", "resolved"]'
