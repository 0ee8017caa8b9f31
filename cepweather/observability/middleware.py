from __future__ import annotations

import asyncio
import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import PlainTextResponse

from cepweather.config import get_settings
from cepweather.observability.metrics import observe_http_request


def resolve_client_ip(scope: dict[str, Any]) -> str | None:
    """Client IP from proxy headers, falling back to the socket peer."""

    headers = Headers(scope=scope)
    for name in ("true-client-ip", "x-real-ip"):
        value = headers.get(name)
        if value:
            return value.strip()

    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",", 1)[0].strip()
        if first:
            return first

    client = scope.get("client")
    return client[0] if client else None


class RequestContextMiddleware:
    """Request IDs, real client IP, panic recovery, access logs, metrics and a request timeout."""

    def __init__(self, app: Callable[..., Any], service: str) -> None:
        self.app = app
        self.service = service
        # Avoid self-observing the observability endpoints.
        self._excluded_metric_paths = {"/metrics", "/health"}

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get("x-request-id") or str(uuid.uuid4())
        client_ip = resolve_client_ip(scope)
        if client_ip:
            client = scope.get("client")
            scope["client"] = (client_ip, client[1] if client else 0)

        path = scope.get("path")
        method = scope.get("method")

        structlog.contextvars.bind_contextvars(
            service=self.service,
            request_id=request_id,
            client_ip=client_ip,
            path=path,
            method=method,
        )
        logger = structlog.get_logger("access")

        timeout = get_settings().request_timeout_seconds

        start = perf_counter()
        status_code: int = 500
        response_started = False

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code, response_started

            if message.get("type") == "http.response.start":
                response_started = True
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id

            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("request_timeout", timeout_seconds=timeout)
            if not response_started:
                await PlainTextResponse("Gateway Timeout", status_code=504)(scope, receive, send_wrapper)
        except Exception:
            logger.exception("request_panic")
            if response_started:
                raise
            await PlainTextResponse("Internal Server Error", status_code=500)(scope, receive, send_wrapper)
        finally:
            elapsed = perf_counter() - start

            # Update metrics first so they update even if logging misbehaves.
            if path not in self._excluded_metric_paths:
                observe_http_request(
                    service=self.service,
                    method=method or "",
                    path=path or "",
                    status_code=status_code,
                    elapsed_seconds=elapsed,
                )

            logger.info(
                "http_request",
                status_code=status_code,
                elapsed_ms=round(elapsed * 1000.0, 2),
            )

            structlog.contextvars.clear_contextvars()
