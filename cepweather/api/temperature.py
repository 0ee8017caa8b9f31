from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from opentelemetry.trace import SpanKind

from cepweather.config import get_settings
from cepweather.errors import UpstreamError, ZipcodeError, error_text
from cepweather.models.schemas import TemperatureResponse
from cepweather.observability.tracing import extract_context, start_span
from cepweather.services.http_client import get_http_client
from cepweather.services.validation import parse_zipcode
from cepweather.services.viacep import get_location_by_zipcode
from cepweather.services.weather import get_temperature_by_location

router = APIRouter(tags=["temperature"])


@router.post("/", response_model=TemperatureResponse)
async def handle_request(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> TemperatureResponse:
    settings = get_settings()
    ctx = extract_context(request.headers)

    with start_span(settings.request_name_otel or "temperature-request", ctx, kind=SpanKind.SERVER) as ctx:
        try:
            zipcode = parse_zipcode(await request.body())
        except ZipcodeError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        try:
            location = await get_location_by_zipcode(client, zipcode, ctx=ctx)
        except (UpstreamError, httpx.HTTPError) as exc:
            raise HTTPException(status_code=500, detail=error_text(exc)) from exc

        if not location:
            raise HTTPException(status_code=404, detail="cannot find zipcode")

        try:
            temperature_c = await get_temperature_by_location(client, location, ctx=ctx)
        except httpx.HTTPError as exc:
            raise HTTPException(status_code=500, detail=error_text(exc)) from exc

    return TemperatureResponse.from_celsius(temperature_c)
