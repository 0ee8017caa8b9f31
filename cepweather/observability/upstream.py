from __future__ import annotations

from collections.abc import Awaitable, Callable
from time import perf_counter

import httpx
import structlog

from cepweather.observability.metrics import observe_upstream_call


async def instrument_upstream_call(*, upstream: str, fn: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
    """Time an outbound call, update metrics, and emit a structured log event."""

    logger = structlog.get_logger("upstream")
    start = perf_counter()
    try:
        response = await fn()
    except Exception:
        elapsed = perf_counter() - start
        observe_upstream_call(upstream=upstream, status="error", elapsed_seconds=elapsed)
        logger.exception("upstream_call_failed", upstream=upstream, elapsed_ms=round(elapsed * 1000.0, 2))
        raise

    elapsed = perf_counter() - start
    observe_upstream_call(upstream=upstream, status=str(response.status_code), elapsed_seconds=elapsed)
    logger.info(
        "upstream_call",
        upstream=upstream,
        status_code=response.status_code,
        elapsed_ms=round(elapsed * 1000.0, 2),
    )
    return response
