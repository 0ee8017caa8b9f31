from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, Counter, Histogram, generate_latest


HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["service", "method", "path"],
)

UPSTREAM_REQUESTS_TOTAL = Counter(
    "upstream_requests_total",
    "Total outbound requests to upstream APIs",
    ["upstream", "status"],
)

UPSTREAM_REQUEST_DURATION_SECONDS = Histogram(
    "upstream_request_duration_seconds",
    "Outbound request duration in seconds",
    ["upstream"],
)


def observe_http_request(service: str, method: str, path: str, status_code: int, elapsed_seconds: float) -> None:
    HTTP_REQUESTS_TOTAL.labels(service=service, method=method, path=path, status=str(status_code)).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(service=service, method=method, path=path).observe(elapsed_seconds)


def observe_upstream_call(upstream: str, status: str, elapsed_seconds: float) -> None:
    """Record one outbound call; `status` is the HTTP status or "error" on transport failure."""

    UPSTREAM_REQUESTS_TOTAL.labels(upstream=upstream, status=status).inc()
    UPSTREAM_REQUEST_DURATION_SECONDS.labels(upstream=upstream).observe(elapsed_seconds)


def render_latest(registry: CollectorRegistry = REGISTRY) -> tuple[bytes, str]:
    return generate_latest(registry), CONTENT_TYPE_LATEST
