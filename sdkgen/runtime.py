"""Request transport shared by the generated SDK stubs.

Stubs import ``GeneratedSdkContext`` and ``sdk_request`` from here. The
helper builds the URL, attaches query parameters, JSON-encodes non-string
bodies and decodes the response, but adds no retry, auth or logging.
It never raises on a non-2xx status: callers inspect ``ok``/``status``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"


@dataclass
class GeneratedSdkContext:
    """Per-client settings passed as the first argument of every stub."""

    base_url: str | None = None
    # Injected transport, e.g. httpx.MockTransport in tests.
    transport: httpx.AsyncBaseTransport | None = None
    timeout: float = 30.0


@dataclass(frozen=True)
class SdkResponse:
    """Normalized response: decoded ``result`` is JSON, text or bytes."""

    ok: bool
    status: int
    result: Any


def _decode(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        return response.json()
    if content_type.startswith("text/"):
        return response.text
    return response.content


async def sdk_request(
    ctx: GeneratedSdkContext,
    path: str,
    method: str,
    *,
    query: Mapping[str, str | int | float | bool | None] | None = None,
    body: Any = None,
    headers: Mapping[str, str] | None = None,
) -> SdkResponse:
    """Perform one HTTP request against the backend."""
    url = httpx.URL(ctx.base_url or DEFAULT_BASE_URL).join(path)
    params = {k: v for k, v in (query or {}).items() if v is not None}
    request_headers = {"Content-Type": "application/json", **(headers or {})}

    content: str | None = None
    if body is not None:
        content = body if isinstance(body, str) else json.dumps(body)

    async with httpx.AsyncClient(transport=ctx.transport, timeout=ctx.timeout) as client:
        response = await client.request(
            method.upper(),
            url,
            params=params,
            headers=request_headers,
            content=content,
        )

    return SdkResponse(
        ok=response.is_success,
        status=response.status_code,
        result=_decode(response),
    )
