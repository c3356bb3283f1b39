"""
Logging for the API process.

Everything logs through the root logger: the service modules, the
store gateways and, via ``uvicorn_log_config``, uvicorn's own
``uvicorn``/``uvicorn.error``/``uvicorn.access`` loggers.  A store
failure reaches clients only as a fixed message, so the traceback
written here is the one record of its cause.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def normalise_level(level: str) -> str:
    """Map ``LOG_LEVEL`` onto a canonical lowercase level name.

    Aliases such as ``WARN`` or ``FATAL`` become ``warning``/``critical``;
    unknown names fall back to ``info``.  uvicorn only accepts the
    canonical names.
    """
    numeric = getattr(logging, str(level).upper(), None)
    if numeric not in (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL):
        numeric = logging.INFO
    return logging.getLevelName(numeric).lower()


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Send records to stderr (and ``logfile``) at ``level``.

    The level is applied on every call, so a later ``create_app`` with
    different settings takes effect.  Handlers are only attached once;
    when the root logger already has handlers (uvicorn, pytest) they
    are left in place.
    """
    root = logging.getLogger()
    root.setLevel(normalise_level(level).upper())
    if root.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


def uvicorn_log_config(level: str) -> Dict[str, Any]:
    """``dictConfig`` mapping for uvicorn's ``log_config`` option.

    uvicorn's loggers get no handlers of their own and propagate to the
    root logger, so server and access lines share ``LOG_FORMAT`` and
    the ``LOG_FILE`` handler.
    """
    name = normalise_level(level).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {
            logger_name: {"handlers": [], "level": name, "propagate": True}
            for logger_name in UVICORN_LOGGERS
        },
    }
