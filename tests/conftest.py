from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from cepweather.config import get_settings
from cepweather.main import temperature_app, zipcode_app
from cepweather.services.http_client import set_http_client


class FakeUpstreams:
    """Answers for ViaCEP, WeatherAPI and the temperature service, keyed by host."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.viacep_status = 200
        self.viacep_body: Any = {"cep": "01001-000", "localidade": "São Paulo", "uf": "SP"}
        self.weather_status = 200
        self.weather_body: Any = {"location": {"name": "Sao Paulo"}, "current": {"temp_c": 25.0}}
        self.delay = 0.0
        # None routes temperature.test to the real temperature app.
        self.temperature_response: tuple[int, bytes, str] | None = None
        self.temperature_error: Exception | None = None
        self._temperature_transport = ASGITransport(app=temperature_app)

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    @staticmethod
    def _response(status: int, body: Any) -> httpx.Response:
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)

        host = request.url.host
        if host == "viacep.test":
            return self._response(self.viacep_status, self.viacep_body)
        if host == "weather.test":
            return self._response(self.weather_status, self.weather_body)
        if host == "temperature.test":
            if self.temperature_error is not None:
                raise self.temperature_error
            if self.temperature_response is not None:
                status, content, content_type = self.temperature_response
                return httpx.Response(status, content=content, headers={"content-type": content_type})
            return await self._temperature_transport.handle_async_request(request)
        return httpx.Response(599, content=b"unexpected host")


@pytest.fixture(scope="session")
def span_exporter() -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return exporter


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch, span_exporter: InMemorySpanExporter) -> Iterator[None]:
    monkeypatch.setenv("WEATHER_API_KEY", "test-key")
    monkeypatch.setenv("TEMPERATURE_URL", "http://temperature.test/")
    monkeypatch.setenv("VIACEP_BASE_URL", "https://viacep.test")
    monkeypatch.setenv("WEATHER_BASE_URL", "https://weather.test")
    monkeypatch.setenv("TRACING_ENABLED", "false")
    monkeypatch.delenv("REQUEST_NAME_OTEL", raising=False)
    monkeypatch.delenv("REQUEST_TIMEOUT_SECONDS", raising=False)
    get_settings.cache_clear()
    span_exporter.clear()

    yield

    set_http_client(None)
    get_settings.cache_clear()


@pytest.fixture
async def upstreams() -> AsyncIterator[FakeUpstreams]:
    fake = FakeUpstreams()
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))
    set_http_client(client)
    yield fake
    await client.aclose()


@pytest.fixture
async def temperature_client(upstreams: FakeUpstreams) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=temperature_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def zipcode_client(upstreams: FakeUpstreams) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=zipcode_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def trace_id() -> str:
    return "4bf92f3577b34da6a3ce929d0e0e4736"


@pytest.fixture
def traceparent(trace_id: str) -> str:
    return f"00-{trace_id}-00f067aa0ba902b7-01"
