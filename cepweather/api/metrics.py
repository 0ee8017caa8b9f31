from __future__ import annotations

from fastapi import APIRouter, Response

from cepweather.observability.metrics import render_latest


router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics() -> Response:
    payload, content_type = render_latest()
    return Response(content=payload, media_type=content_type)
