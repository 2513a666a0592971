"""Application factory for the relay service."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from relay_api import __version__
from relay_api.api import router as api_router
from relay_api.config.settings import RelaySettings, get_settings
from relay_api.delivery import DeliveryEngine
from relay_api.server import RelayServer
from relay_api.storage import MessageStore
from relay_api.ws import router as ws_router

LOGGER = logging.getLogger(__name__)


def create_app(
    *,
    settings: Optional[RelaySettings] = None,
    store: Optional[MessageStore] = None,
    engine: Optional[DeliveryEngine] = None,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Relay", version=__version__)
    app.state.relay_server = RelayServer(settings=settings, engine=engine, store=store)

    app.include_router(ws_router)
    app.include_router(api_router)

    @app.on_event("startup")
    async def _startup() -> None:
        await app.state.relay_server.start()
        LOGGER.info("Relay started")

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.relay_server.stop()

    return app
