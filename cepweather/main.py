from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import structlog
from fastapi import APIRouter, FastAPI

from cepweather.api.metrics import router as metrics_router
from cepweather.api.temperature import router as temperature_router
from cepweather.api.zipcode import router as zipcode_router
from cepweather.config import get_settings
from cepweather.observability.logging import configure_logging
from cepweather.observability.middleware import RequestContextMiddleware
from cepweather.observability.tracing import configure_tracing
from cepweather.services.http_client import close_http_client

logger = structlog.get_logger(__name__)

SERVICES: dict[str, tuple[str, APIRouter]] = {
    "temperature": ("Temperature by CEP", temperature_router),
    "zipcode": ("CEP gateway", zipcode_router),
}


def _lifespan(service: str) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = get_settings()
        configure_logging(settings.log_level)

        provider = None
        if settings.tracing_enabled:
            provider = configure_tracing(
                settings.otel_service_name or service,
                settings.otel_exporter_otlp_endpoint,
            )

        logger.info("service_started", service=service)
        try:
            yield
        finally:
            await close_http_client()
            if provider is not None:
                provider.shutdown()
            logger.info("service_stopped", service=service)

    return lifespan


def create_app(service: str) -> FastAPI:
    if service not in SERVICES:
        raise ValueError(f"unknown service: {service}")

    title, router = SERVICES[service]
    app = FastAPI(title=title, version="0.1.0", lifespan=_lifespan(service))
    app.add_middleware(RequestContextMiddleware, service=service)
    app.include_router(metrics_router)
    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


temperature_app = create_app("temperature")
zipcode_app = create_app("zipcode")
