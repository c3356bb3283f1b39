"""
Error taxonomy and its mapping onto HTTP responses.

Services raise the exceptions defined here; ``register_exception_handlers``
turns them into responses so that endpoint functions stay free of
``try``/``except`` boilerplate.

* ``ClientInputError`` -> 400 (malformed id or body)
* ``NotFoundError``    -> 404
* ``StoreError``       -> 500, with a fixed message; the cause is logged
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INVALID_PAYLOAD = "Invalid JSON payload"


class MusicLibraryError(Exception):
    """Base class for all errors raised by the service layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(MusicLibraryError):
    """The request cannot be served as sent (bad id, bad body)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(MusicLibraryError):
    """The addressed document does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class StoreError(MusicLibraryError):
    """The document store failed.

    ``message`` is safe to show to clients; the driver exception is
    kept as ``__cause__`` for the log.
    """


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


async def handle_library_error(request: Request, exc: MusicLibraryError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
    return _error_response(exc.status_code, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Body decoding problems are client errors (400), not FastAPI's 422.
    logger.debug("Rejected payload for %s %s: %s", request.method, request.url.path, exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the service error handlers to ``app``."""
    app.add_exception_handler(MusicLibraryError, handle_library_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
