from __future__ import annotations

import httpx
from opentelemetry.context import Context

from cepweather.models.schemas import ZipcodeForward
from cepweather.observability.tracing import inject_headers
from cepweather.observability.upstream import instrument_upstream_call


async def forward_zipcode(client: httpx.AsyncClient, url: str, zipcode: str, *, ctx: Context) -> httpx.Response:
    """POST `{"cep": zipcode}` to the temperature service; the response body is fully read."""

    body = ZipcodeForward(cep=zipcode).model_dump_json().encode("utf-8")
    headers = inject_headers(ctx, {"Content-Type": "application/json"})
    return await instrument_upstream_call(
        upstream="temperature",
        fn=lambda: client.post(url, content=body, headers=headers),
    )
