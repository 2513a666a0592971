"""HTTP endpoints: health, Prometheus exposition and message history."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from relay_api import metrics
from relay_api.http.errors import http_error
from relay_api.models import Message
from relay_api.server import RelayServer

LOGGER = logging.getLogger(__name__)

router = APIRouter()


def get_relay_server(request: Request) -> RelayServer:
    return request.app.state.relay_server


@router.get("/health")
async def get_health(server: RelayServer = Depends(get_relay_server)) -> dict[str, Any]:
    engine = server.engine
    return {
        "status": "ok",
        "online": len(engine.registry),
        "users": sorted(engine.registry.online_users()),
        "pending": engine.queue.total_pending(),
    }


@router.get("/metrics")
async def get_metrics() -> Response:
    body, content_type = metrics.render_latest()
    return Response(content=body, media_type=content_type)


@router.get("/api/v1/messages")
async def list_messages(
    user_id: Optional[str] = Query(default=None),
    peer: Optional[str] = Query(default=None),
    limit: int = Query(default=50),
    server: RelayServer = Depends(get_relay_server),
) -> dict[str, Any]:
    if not user_id:
        raise http_error(status.HTTP_400_BAD_REQUEST, "user_id is required")
    limit = max(1, min(limit, server.settings.history_max_limit))
    try:
        messages: list[Message] = await server.store.list_messages(user_id, peer=peer, limit=limit)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Failed to load history for %s", user_id)
        raise http_error(status.HTTP_503_SERVICE_UNAVAILABLE, "message history unavailable") from exc
    return {
        "items": [message.model_dump(by_alias=True, mode="json") for message in messages],
        "limit": limit,
    }
