"""OpenTelemetry setup and explicit context propagation.

Handlers extract a `Context` from the inbound headers and hand it to every
outbound call, which injects it back into its own headers. Nothing here
relies on the ambient "current" context.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from opentelemetry import propagate, trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.exceptions import HTTPException


TRACER_NAME = "cepweather"


def configure_tracing(service_name: str, otlp_endpoint: str = "") -> TracerProvider:
    """Install an SDK tracer provider for the service.

    Args:
        service_name: Name reported as `service.name` (e.g. "temperature")
        otlp_endpoint: Base URL of an OTLP/HTTP collector; spans are only
            exported when this is set

    Returns:
        Configured TracerProvider
    """
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.namespace": "cepweather",
        }
    )
    provider = TracerProvider(resource=resource)

    if otlp_endpoint:
        exporter = OTLPSpanExporter(endpoint=f"{otlp_endpoint.rstrip('/')}/v1/traces")
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    return provider


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)


def extract_context(headers: Mapping[str, str]) -> Context:
    return propagate.extract(headers, context=Context())


def inject_headers(ctx: Context, headers: dict[str, str] | None = None) -> dict[str, str]:
    """Return `headers` (or a new dict) with the propagation headers for `ctx` added."""

    carrier: dict[str, str] = dict(headers or {})
    propagate.inject(carrier, context=ctx)
    return carrier


@contextmanager
def start_span(name: str, ctx: Context, kind: SpanKind = SpanKind.INTERNAL) -> Iterator[Context]:
    """Start a child span of `ctx` and yield the context that carries it."""

    span = get_tracer().start_span(name, context=ctx, kind=kind)
    try:
        yield trace.set_span_in_context(span, ctx)
    except HTTPException as exc:
        span.set_attribute("http.response.status_code", exc.status_code)
        # Only 5xx marks the span as failed.
        if exc.status_code >= 500:
            span.set_status(Status(StatusCode.ERROR, str(exc.detail)))
        raise
    except Exception as exc:
        span.record_exception(exc)
        span.set_status(Status(StatusCode.ERROR, str(exc)))
        raise
    finally:
        span.end()
