from __future__ import annotations

import httpx
from opentelemetry.context import Context
from opentelemetry.trace import SpanKind
from pydantic import ValidationError

from cepweather.config import get_settings
from cepweather.errors import UpstreamError
from cepweather.models.schemas import ViaCepAddress
from cepweather.observability.tracing import inject_headers, start_span
from cepweather.observability.upstream import instrument_upstream_call


def viacep_url(zipcode: str) -> str:
    base = get_settings().viacep_base_url.rstrip("/")
    return f"{base}/ws/{zipcode}/json/"


async def get_location_by_zipcode(client: httpx.AsyncClient, zipcode: str, *, ctx: Context) -> str:
    """Resolve a zipcode to its locality name; "" means ViaCEP does not know it.

    Any non-200 answer or undecodable body is an UpstreamError.
    """

    url = viacep_url(zipcode)
    with start_span("viacep-api", ctx, kind=SpanKind.CLIENT) as span_ctx:
        response = await instrument_upstream_call(
            upstream="viacep",
            fn=lambda: client.get(url, headers=inject_headers(span_ctx)),
        )

        if response.status_code != 200:
            raise UpstreamError(f"unexpected status code: {response.status_code}")

        try:
            address = ViaCepAddress.validate_json(response.content)
        except ValidationError as exc:
            raise UpstreamError(f"invalid viacep response: {exc.errors()[0]['msg']}") from exc

    return address.get("localidade", "")
