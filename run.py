"""Entry point for the Music Library API.

Serves the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``8080``); the document store is selected by ``DATABASE_URL``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from music_library_api.app.core.config import settings
from music_library_api.app.core.logging_config import normalise_level, uvicorn_log_config
from music_library_api.app.main import app


def build_config() -> Config:
    """Uvicorn configuration sharing the application's log setup."""
    return Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=normalise_level(settings.log_level),
        log_config=uvicorn_log_config(settings.log_level),
    )


async def main() -> None:
    """Run the API server until it is stopped."""
    server = Server(build_config())
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
