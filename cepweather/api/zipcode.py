from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from opentelemetry.trace import SpanKind

from cepweather.config import get_settings
from cepweather.errors import ZipcodeError, error_text
from cepweather.observability.tracing import extract_context, start_span
from cepweather.services.http_client import get_http_client
from cepweather.services.proxy import forward_zipcode
from cepweather.services.validation import parse_zipcode

router = APIRouter(tags=["zipcode"])


@router.post("/")
async def handle_request(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    settings = get_settings()
    ctx = extract_context(request.headers)

    with start_span(settings.request_name_otel or "zipcode-request", ctx, kind=SpanKind.SERVER) as ctx:
        try:
            zipcode = parse_zipcode(await request.body())
        except ZipcodeError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        try:
            upstream = await forward_zipcode(client, settings.temperature_url, zipcode, ctx=ctx)
        except httpx.HTTPError as exc:
            raise HTTPException(status_code=500, detail=error_text(exc)) from exc

    # Relay the temperature service verbatim, errors included.
    if upstream.status_code != 200:
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            media_type=upstream.headers.get("content-type"),
        )
    return Response(content=upstream.content, status_code=200, media_type="application/json")
