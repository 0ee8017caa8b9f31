import httpx
import pytest
from opentelemetry.context import Context

from cepweather.errors import UpstreamError
from cepweather.observability.tracing import extract_context
from cepweather.services.http_client import get_http_client
from cepweather.services.viacep import get_location_by_zipcode
from cepweather.services.weather import get_temperature_by_location


async def test_location_lookup_uses_templated_url(upstreams) -> None:
    location = await get_location_by_zipcode(get_http_client(), "01001000", ctx=Context())
    assert location == "São Paulo"

    (request,) = upstreams.requests_to("viacep.test")
    assert request.method == "GET"
    assert str(request.url) == "https://viacep.test/ws/01001000/json/"


async def test_location_lookup_returns_empty_when_field_missing(upstreams) -> None:
    upstreams.viacep_body = {"erro": "true"}
    assert await get_location_by_zipcode(get_http_client(), "99999999", ctx=Context()) == ""


async def test_location_lookup_non_200_is_an_error(upstreams) -> None:
    upstreams.viacep_status = 400
    with pytest.raises(UpstreamError, match="unexpected status code: 400"):
        await get_location_by_zipcode(get_http_client(), "01001000", ctx=Context())


@pytest.mark.parametrize("body", [b"<html>oops</html>", b'{"erro": true}', b'["x"]'])
async def test_location_lookup_decode_failure_is_an_error(upstreams, body: bytes) -> None:
    upstreams.viacep_body = body
    with pytest.raises(UpstreamError, match="invalid viacep response"):
        await get_location_by_zipcode(get_http_client(), "01001000", ctx=Context())


async def test_temperature_lookup_sends_query_and_api_key(upstreams) -> None:
    temp = await get_temperature_by_location(get_http_client(), "São Paulo", ctx=Context())
    assert temp == 25.0

    (request,) = upstreams.requests_to("weather.test")
    assert request.url.path == "/v1/current.json"
    assert request.url.params["q"] == "São Paulo"
    assert request.headers["key"] == "test-key"
    assert request.headers["accept"] == "application/json"


async def test_temperature_lookup_non_200_defaults_to_zero(upstreams) -> None:
    upstreams.weather_status = 403
    upstreams.weather_body = {"error": {"code": 2008, "message": "API key has been disabled."}}
    assert await get_temperature_by_location(get_http_client(), "São Paulo", ctx=Context()) == 0.0


async def test_temperature_lookup_unparseable_body_defaults_to_zero(upstreams) -> None:
    upstreams.weather_body = b"definitely not json"
    assert await get_temperature_by_location(get_http_client(), "São Paulo", ctx=Context()) == 0.0


async def test_temperature_lookup_transport_failure_raises(upstreams) -> None:
    async def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    with pytest.raises(httpx.ConnectError):
        await get_temperature_by_location(client, "São Paulo", ctx=Context())
    await client.aclose()


async def test_outbound_calls_carry_the_given_trace_context(upstreams, span_exporter, traceparent, trace_id) -> None:
    ctx = extract_context({"traceparent": traceparent})
    client = get_http_client()

    await get_location_by_zipcode(client, "01001000", ctx=ctx)
    await get_temperature_by_location(client, "São Paulo", ctx=ctx)

    assert len(upstreams.requests) == 2
    for request in upstreams.requests:
        assert trace_id in request.headers["traceparent"]

    names = {span.name for span in span_exporter.get_finished_spans()}
    assert {"viacep-api", "weather-api"} <= names
