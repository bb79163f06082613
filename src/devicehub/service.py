"""FastAPI service module for devicehub.

This module keeps only the web-facing FastAPI wiring. Device control lives in
``device_service.py``; the app receives a DeviceService instance (or builds
one from the environment) and exposes it to routers as ``app.state.service``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request

from . import __version__
from .api import devices_router, hue_router
from .device_service import DeviceService, build_service

logger = logging.getLogger(__name__)


def create_app(service: Optional[DeviceService] = None) -> FastAPI:
    """Create the FastAPI application around ``service``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage device service startup and shutdown via FastAPI lifespan."""
        app.state.service = service or build_service()
        await app.state.service.start()
        try:
            yield
        finally:
            await app.state.service.stop()

    app = FastAPI(title="devicehub", version=__version__, lifespan=lifespan)

    # Health check endpoint for container monitoring
    @app.get("/api/health")
    async def health_check(request: Request) -> Dict[str, Any]:
        svc: DeviceService = request.app.state.service
        devices = svc.list_devices()
        return {
            "status": "healthy",
            "service": "devicehub",
            "version": __version__,
            "devices": {
                "total": len(devices),
                "online": len(svc.list_online_devices()),
            },
        }

    app.include_router(devices_router)
    app.include_router(hue_router)
    return app


def main() -> None:  # pragma: no cover
    """Run the FastAPI service under Uvicorn.

    Host and port come from DEVICEHUB_HOST / DEVICEHUB_PORT.
    """
    import uvicorn

    from .logging_config import configure_logging, get_uvicorn_log_config

    configure_logging()

    host = os.getenv("DEVICEHUB_HOST", "0.0.0.0")
    port = int(os.getenv("DEVICEHUB_PORT", "8000"))
    logger.info(f"Starting devicehub on {host}:{port}")

    uvicorn.run(
        create_app(),
        host=host,
        port=port,
        log_config=get_uvicorn_log_config(),
    )


if __name__ == "__main__":
    main()
