"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts against a local SQLite file without any setup.  Point
``DATABASE_URL`` (or the legacy ``MONGO_URI``) at a MongoDB server to
use a real document database instead.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Music Library API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # Routes are served at the root by default (``/tracks``).  Set e.g.
    # ``API_PREFIX=/api/v1`` to mount them under a versioned prefix.
    api_prefix: str = os.getenv("API_PREFIX", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Either a ``mongodb://`` / ``mongodb+srv://`` URI or a path to a
    # SQLite file.  Relative paths are resolved against the project root
    # by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", os.getenv("MONGO_URI", "music_library.db"))
    database_name: str = os.getenv("DATABASE_NAME", "music_library")
    mongo_timeout_ms: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

    # When enabled, updating or deleting an id that matches no document
    # answers 404 instead of pretending the write succeeded.
    strict_missing: bool = _env_flag("STRICT_MISSING")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
