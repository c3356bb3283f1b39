"""Shared fixtures for the Music Library API tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from music_library_api.app.core.config import Settings
from music_library_api.app.core.db import SQLiteGateway
from music_library_api.app.main import create_app


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "library.db"


@pytest.fixture()
def gateway(db_path: Path) -> SQLiteGateway:
    """A connected SQLite document store in a temporary directory."""
    gw = SQLiteGateway(str(db_path))
    gw.connect()
    return gw


@pytest.fixture()
def client(gateway: SQLiteGateway, db_path: Path):
    app = create_app(Settings(database_url=str(db_path)), gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def strict_client(gateway: SQLiteGateway, db_path: Path):
    """Client for an app that answers 404 on update/delete of missing ids."""
    app = create_app(Settings(database_url=str(db_path), strict_missing=True), gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def track_payload() -> dict:
    return {
        "title": "Amazing Grace",
        "author": "J. Newton",
        "lyrics": "Amazing grace, how sweet the sound...",
        "category": "hymn",
        "tags": ["worship"],
        "projectionStyle": {"fontSize": 32, "textColor": "#FFFFFF", "backgroundColor": "#000000"},
    }
