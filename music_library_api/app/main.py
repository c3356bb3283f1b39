"""
Main entrypoint for the Music Library API.

This module assembles the FastAPI application: logging, the document
store gateway, error handlers and the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, so it can be served
with uvicorn or another ASGI server, e.g.::

    uvicorn music_library_api.app.main:app --reload

The gateway is created here (or passed in by tests), stored on
``app.state`` and connected when the application starts.  If the store
cannot be reached at startup the error propagates and the server does
not come up.  Interactive documentation is served by FastAPI at
``/docs``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import DocumentGateway, build_gateway
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, gateway: Optional[DocumentGateway] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the environment-derived
        ``core.config.settings``.
    gateway : Optional[DocumentGateway]
        Document store to use.  When omitted one is built from
        ``settings.database_url``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the gateway can
    # report which store it uses.
    setup_logging(settings.log_level, settings.log_file or None)

    gateway = gateway if gateway is not None else build_gateway(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        gateway.connect()
        logger.info("%s %s ready", settings.project_name, settings.api_version)
        try:
            yield
        finally:
            gateway.close()

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        description="REST API for managing tracks and collections of tracks.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
