"""Observability helpers shared by both services.

Request IDs + structlog contextvars, Prometheus counters/histograms for
the `/metrics` endpoint, and OpenTelemetry context propagation.
"""
