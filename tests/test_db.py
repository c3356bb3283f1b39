"""Tests for the document store gateways."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from music_library_api.app.core.config import Settings
from music_library_api.app.core.db import (
    MATCH_ALL,
    Eq,
    Filter,
    MongoGateway,
    SQLiteGateway,
    build_gateway,
    get_database_path,
    is_mongo_url,
)
from music_library_api.app.core.errors import StoreError

# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def test_filter_by_id() -> None:
    oid = ObjectId()
    flt = Filter.by_id(oid)
    assert flt.conditions == (Eq("_id", oid),)
    assert flt.id_value() == oid
    assert flt.to_mongo() == {"_id": oid}


def test_filter_where_matches_all_conditions() -> None:
    flt = Filter.where(title="Hymn", author="Anon")
    assert flt.matches({"title": "Hymn", "author": "Anon", "lyrics": ""})
    assert not flt.matches({"title": "Hymn", "author": "Someone"})
    assert flt.id_value() is None


def test_empty_filter_matches_everything() -> None:
    assert MATCH_ALL.matches({})
    assert MATCH_ALL.to_mongo() == {}


# ---------------------------------------------------------------------------
# SQLiteGateway
# ---------------------------------------------------------------------------


def test_connect_creates_documents_table(gateway: SQLiteGateway) -> None:
    import sqlite3

    conn = sqlite3.connect(gateway.path)
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert "documents" in tables


def test_insert_and_find_one_round_trip(gateway: SQLiteGateway) -> None:
    stamp = datetime(2026, 10, 19, 12, 30, 0, 123000, tzinfo=timezone.utc)
    oid = ObjectId()
    ref = ObjectId()
    doc = {"_id": oid, "title": "Abide", "tags": ["a", "b"], "refs": [ref], "createdAt": stamp}

    assert gateway.insert_one("tracks", doc) == oid

    found = gateway.find_one("tracks", Filter.by_id(oid))
    assert found == doc
    assert isinstance(found["_id"], ObjectId)
    assert found["refs"] == [ref]
    assert found["createdAt"].tzinfo is not None


def test_insert_assigns_id_when_missing(gateway: SQLiteGateway) -> None:
    oid = gateway.insert_one("tracks", {"title": "x"})
    assert isinstance(oid, ObjectId)
    assert gateway.find_one("tracks", Filter.by_id(oid))["title"] == "x"


def test_insert_duplicate_id_is_store_error(gateway: SQLiteGateway) -> None:
    oid = ObjectId()
    gateway.insert_one("tracks", {"_id": oid})
    with pytest.raises(StoreError):
        gateway.insert_one("tracks", {"_id": oid})


def test_find_one_missing_returns_none(gateway: SQLiteGateway) -> None:
    assert gateway.find_one("tracks", Filter.by_id(ObjectId())) is None


def test_collections_are_separate(gateway: SQLiteGateway) -> None:
    oid = gateway.insert_one("tracks", {"title": "x"})
    assert gateway.find_one("collections", Filter.by_id(oid)) is None
    assert list(gateway.find_many("collections")) == []


def test_find_many_keeps_insertion_order(gateway: SQLiteGateway) -> None:
    ids = [gateway.insert_one("tracks", {"n": n}) for n in range(5)]
    assert [doc["_id"] for doc in gateway.find_many("tracks")] == ids


def test_find_many_applies_field_filter(gateway: SQLiteGateway) -> None:
    gateway.insert_one("tracks", {"category": "hymn"})
    gateway.insert_one("tracks", {"category": "chorus"})
    found = list(gateway.find_many("tracks", Filter.where(category="hymn")))
    assert [doc["category"] for doc in found] == ["hymn"]


def test_update_one_replaces_document_and_keeps_id(gateway: SQLiteGateway) -> None:
    oid = gateway.insert_one("tracks", {"title": "old", "lyrics": "la"})
    matched = gateway.update_one("tracks", Filter.by_id(oid), {"_id": ObjectId(), "title": "new"})
    assert matched == 1
    assert gateway.find_one("tracks", Filter.by_id(oid)) == {"_id": oid, "title": "new"}


def test_update_one_missing_matches_nothing(gateway: SQLiteGateway) -> None:
    assert gateway.update_one("tracks", Filter.by_id(ObjectId()), {"title": "x"}) == 0
    assert list(gateway.find_many("tracks")) == []


def test_delete_one_counts(gateway: SQLiteGateway) -> None:
    oid = gateway.insert_one("tracks", {"title": "x"})
    assert gateway.delete_one("tracks", Filter.by_id(oid)) == 1
    assert gateway.delete_one("tracks", Filter.by_id(oid)) == 0
    assert gateway.find_one("tracks", Filter.by_id(oid)) is None


def test_uninitialised_store_raises_store_error(tmp_path: Path) -> None:
    gw = SQLiteGateway(str(tmp_path / "empty.db"))
    with pytest.raises(StoreError):
        gw.find_one("tracks", Filter.by_id(ObjectId()))
    with pytest.raises(StoreError):
        list(gw.find_many("tracks"))


# ---------------------------------------------------------------------------
# MongoGateway
# ---------------------------------------------------------------------------


@pytest.fixture()
def mongo_client() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def mongo_collection(mongo_client: MagicMock) -> MagicMock:
    # client[database][collection] resolves to the same mock for any name.
    return mongo_client.__getitem__.return_value.__getitem__.return_value


@pytest.fixture()
def mongo_gateway(mongo_client: MagicMock) -> MongoGateway:
    return MongoGateway("mongodb://db.test:27017", "music_library", client=mongo_client)


def test_mongo_connect_pings(mongo_gateway: MongoGateway, mongo_client: MagicMock) -> None:
    mongo_gateway.connect()
    mongo_client.admin.command.assert_called_once_with("ping")


def test_mongo_connect_failure_is_store_error(mongo_gateway: MongoGateway, mongo_client: MagicMock) -> None:
    mongo_client.admin.command.side_effect = PyMongoError("no servers")
    with pytest.raises(StoreError) as excinfo:
        mongo_gateway.connect()
    assert isinstance(excinfo.value.__cause__, PyMongoError)


def test_mongo_insert_one(mongo_gateway: MongoGateway, mongo_collection: MagicMock) -> None:
    oid = ObjectId()
    mongo_collection.insert_one.return_value.inserted_id = oid
    assert mongo_gateway.insert_one("tracks", {"_id": oid, "title": "x"}) == oid
    mongo_collection.insert_one.assert_called_once_with({"_id": oid, "title": "x"})


def test_mongo_find_one_uses_id_filter(mongo_gateway: MongoGateway, mongo_collection: MagicMock) -> None:
    oid = ObjectId()
    mongo_collection.find_one.return_value = {"_id": oid}
    assert mongo_gateway.find_one("tracks", Filter.by_id(oid)) == {"_id": oid}
    mongo_collection.find_one.assert_called_once_with({"_id": oid})


def test_mongo_find_many_iterates_and_closes_cursor(mongo_gateway: MongoGateway, mongo_collection: MagicMock) -> None:
    cursor = MagicMock()
    cursor.__iter__.return_value = iter([{"n": 1}, {"n": 2}])
    mongo_collection.find.return_value = cursor

    assert list(mongo_gateway.find_many("tracks")) == [{"n": 1}, {"n": 2}]
    mongo_collection.find.assert_called_once_with({})
    cursor.close.assert_called_once()


def test_mongo_update_one_replaces_without_id(mongo_gateway: MongoGateway, mongo_collection: MagicMock) -> None:
    oid = ObjectId()
    mongo_collection.replace_one.return_value.matched_count = 1
    assert mongo_gateway.update_one("tracks", Filter.by_id(oid), {"_id": oid, "title": "y"}) == 1
    mongo_collection.replace_one.assert_called_once_with({"_id": oid}, {"title": "y"})


def test_mongo_delete_one(mongo_gateway: MongoGateway, mongo_collection: MagicMock) -> None:
    mongo_collection.delete_one.return_value.deleted_count = 0
    assert mongo_gateway.delete_one("tracks", Filter.by_id(ObjectId())) == 0


def test_mongo_driver_errors_become_store_errors(mongo_gateway: MongoGateway, mongo_collection: MagicMock) -> None:
    mongo_collection.find_one.side_effect = PyMongoError("timeout")
    with pytest.raises(StoreError):
        mongo_gateway.find_one("tracks", Filter.by_id(ObjectId()))


def test_mongo_close_closes_client(mongo_gateway: MongoGateway, mongo_client: MagicMock) -> None:
    mongo_gateway.close()
    mongo_client.close.assert_called_once()


# ---------------------------------------------------------------------------
# Gateway selection
# ---------------------------------------------------------------------------


def test_is_mongo_url() -> None:
    assert is_mongo_url("mongodb://localhost:27017")
    assert is_mongo_url("mongodb+srv://cluster.example.net")
    assert not is_mongo_url("music_library.db")


def test_get_database_path_keeps_absolute(tmp_path: Path) -> None:
    path = str(tmp_path / "x.db")
    assert get_database_path(path) == path


def test_build_gateway_defaults_to_sqlite(tmp_path: Path) -> None:
    gw = build_gateway(Settings(database_url=str(tmp_path / "x.db")))
    assert isinstance(gw, SQLiteGateway)
    assert gw.path == str(tmp_path / "x.db")


def test_build_gateway_selects_mongo() -> None:
    gw = build_gateway(Settings(database_url="mongodb://localhost:27017", database_name="testdb"))
    try:
        assert isinstance(gw, MongoGateway)
        assert gw.database == "testdb"
    finally:
        gw.close()
