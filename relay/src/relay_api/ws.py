"""WebSocket entrypoint for relay clients."""

from __future__ import annotations

from fastapi import APIRouter, WebSocket

router = APIRouter()


@router.websocket("/ws")
async def relay_endpoint(websocket: WebSocket) -> None:
    await websocket.app.state.relay_server.handle_websocket(websocket)
