from __future__ import annotations

from threading import Lock

import httpx

from cepweather.config import get_settings

_client: httpx.AsyncClient | None = None
# FastAPI runs sync dependencies in its threadpool.
_lock = Lock()


def set_http_client(client: httpx.AsyncClient | None) -> None:
    global _client
    with _lock:
        _client = client


def get_http_client() -> httpx.AsyncClient:
    """Process-wide connection pool shared by every request."""

    global _client
    with _lock:
        if _client is None:
            settings = get_settings()
            _client = httpx.AsyncClient(timeout=settings.http_client_timeout_seconds)
        return _client


async def close_http_client() -> None:
    global _client
    with _lock:
        client, _client = _client, None
    if client is not None:
        await client.aclose()
