"""
Document store integration.

This module defines the ``DocumentGateway`` protocol the service layer
talks to and two implementations of it:

* ``SQLiteGateway`` keeps every document as an extended-JSON body in a
  single SQLite table.  It needs no server and is the default.
* ``MongoGateway`` forwards to a MongoDB database through ``pymongo``.

Filters are typed ``Filter`` values made of field-equality conditions
rather than raw dictionaries, so both backends interpret them the same
way.  Any backend failure surfaces as ``StoreError``.

The gateway is created once by the application factory and handed to
the services; nothing in this module keeps a process-wide client.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Protocol, Tuple

from bson import ObjectId, json_util
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .config import Settings
from .errors import StoreError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

# Datetimes come back timezone aware (UTC), matching ``MongoClient(tz_aware=True)``.
JSON_OPTIONS = json_util.JSONOptions(tz_aware=True, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Eq:
    """Condition ``document[field] == value``."""

    field: str
    value: Any


@dataclass(frozen=True)
class Filter:
    """Conjunction of equality conditions.  No conditions matches everything."""

    conditions: Tuple[Eq, ...] = ()

    @classmethod
    def by_id(cls, oid: ObjectId) -> "Filter":
        return cls((Eq("_id", oid),))

    @classmethod
    def where(cls, **fields: Any) -> "Filter":
        return cls(tuple(Eq(name, value) for name, value in fields.items()))

    def matches(self, document: Document) -> bool:
        return all(document.get(c.field) == c.value for c in self.conditions)

    def id_value(self) -> Optional[Any]:
        """Return the ``_id`` the filter pins, if any."""
        for condition in self.conditions:
            if condition.field == "_id":
                return condition.value
        return None

    def to_mongo(self) -> Document:
        return {c.field: c.value for c in self.conditions}


MATCH_ALL = Filter()


class DocumentGateway(Protocol):
    """CRUD capabilities the services need from a document store."""

    def connect(self) -> None:
        ...

    def close(self) -> None:
        ...

    def insert_one(self, collection: str, document: Document) -> ObjectId:
        ...

    def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        ...

    def find_many(self, collection: str, filter: Filter = MATCH_ALL) -> Iterator[Document]:
        ...

    def update_one(self, collection: str, filter: Filter, replacement: Document) -> int:
        """Replace the first matching document, keeping its ``_id``.

        Returns the number of matched documents (0 or 1).
        """
        ...

    def delete_one(self, collection: str, filter: Filter) -> int:
        ...


class SQLiteGateway:
    """Document store on top of a single SQLite table.

    Each operation opens its own connection, so one instance can be
    shared by all request threads.  Documents of every logical
    collection live in ``documents`` keyed by ``(collection, doc_id)``;
    ``rowid`` order is insertion order, which is what ``find_many``
    returns.
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        self.path = path
        # Seconds a writer waits for another writer's lock before failing.
        self.timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.path, timeout=self.timeout)
        except sqlite3.Error as exc:
            raise StoreError("Could not open the document store") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def connect(self) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS documents (
                        collection TEXT NOT NULL,
                        doc_id TEXT NOT NULL,
                        body TEXT NOT NULL,
                        PRIMARY KEY (collection, doc_id)
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise StoreError("Could not initialise the document store") from exc
        finally:
            conn.close()
        logger.info("Using SQLite document store at %s", self.path)

    def close(self) -> None:
        # Connections are per operation; nothing is held open.
        pass

    @staticmethod
    def _encode(document: Document) -> str:
        return json_util.dumps(document, json_options=JSON_OPTIONS)

    @staticmethod
    def _decode(body: str) -> Document:
        return json_util.loads(body, json_options=JSON_OPTIONS)

    @classmethod
    def _matching(cls, conn: sqlite3.Connection, collection: str, filter: Filter) -> Iterator[Tuple[int, Document]]:
        query = "SELECT rowid, body FROM documents WHERE collection = ?"
        params: list = [collection]
        oid = filter.id_value()
        if oid is not None:
            query += " AND doc_id = ?"
            params.append(str(oid))
        query += " ORDER BY rowid"
        for row in conn.execute(query, params):
            document = cls._decode(row["body"])
            if filter.matches(document):
                yield row["rowid"], document

    @classmethod
    def _first_match(cls, conn: sqlite3.Connection, collection: str, filter: Filter) -> Optional[Tuple[int, Document]]:
        # Close the SELECT before the caller writes through the same connection.
        matches = cls._matching(conn, collection, filter)
        try:
            return next(matches, None)
        finally:
            matches.close()

    def insert_one(self, collection: str, document: Document) -> ObjectId:
        document = dict(document)
        oid = document.setdefault("_id", ObjectId())
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO documents (collection, doc_id, body) VALUES (?, ?, ?)",
                    (collection, str(oid), self._encode(document)),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Insert into {collection} failed") from exc
        finally:
            conn.close()
        return oid

    def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        conn = self._connect()
        try:
            match = self._first_match(conn, collection, filter)
            return match[1] if match is not None else None
        except sqlite3.Error as exc:
            raise StoreError(f"Lookup in {collection} failed") from exc
        finally:
            conn.close()

    def find_many(self, collection: str, filter: Filter = MATCH_ALL) -> Iterator[Document]:
        conn = self._connect()
        try:
            for _rowid, document in self._matching(conn, collection, filter):
                yield document
        except sqlite3.Error as exc:
            raise StoreError(f"Scan of {collection} failed") from exc
        finally:
            conn.close()

    @staticmethod
    @contextmanager
    def _write_lock(conn: sqlite3.Connection) -> Iterator[None]:
        """Hold SQLite's write lock from the lookup through the write.

        Rowids are reused once the highest row is deleted, so a row found
        outside the lock may belong to another document by the time it
        is written.
        """
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()

    def update_one(self, collection: str, filter: Filter, replacement: Document) -> int:
        conn = self._connect()
        try:
            with self._write_lock(conn):
                match = self._first_match(conn, collection, filter)
                if match is None:
                    return 0
                current = match[1]
                document = dict(replacement)
                document["_id"] = current["_id"]
                cursor = conn.execute(
                    "UPDATE documents SET body = ? WHERE collection = ? AND doc_id = ?",
                    (self._encode(document), collection, str(current["_id"])),
                )
                return cursor.rowcount
        except sqlite3.Error as exc:
            raise StoreError(f"Update in {collection} failed") from exc
        finally:
            conn.close()

    def delete_one(self, collection: str, filter: Filter) -> int:
        conn = self._connect()
        try:
            with self._write_lock(conn):
                match = self._first_match(conn, collection, filter)
                if match is None:
                    return 0
                cursor = conn.execute(
                    "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                    (collection, str(match[1]["_id"])),
                )
                return cursor.rowcount
        except sqlite3.Error as exc:
            raise StoreError(f"Delete from {collection} failed") from exc
        finally:
            conn.close()


class MongoGateway:
    """``DocumentGateway`` backed by MongoDB.

    ``MongoClient`` pools connections and is safe to share between
    threads, so a single gateway serves every request.
    """

    def __init__(
        self,
        uri: str,
        database: str,
        timeout_ms: int = 5000,
        client: Optional[MongoClient] = None,
    ) -> None:
        self._client = client if client is not None else MongoClient(
            uri, tz_aware=True, serverSelectionTimeoutMS=timeout_ms
        )
        self._db = self._client[database]
        self.database = database

    def connect(self) -> None:
        try:
            self._client.admin.command("ping")
        except PyMongoError as exc:
            raise StoreError("Could not connect to MongoDB") from exc
        logger.info("Connected to MongoDB database %s", self.database)

    def close(self) -> None:
        self._client.close()

    def insert_one(self, collection: str, document: Document) -> ObjectId:
        try:
            return self._db[collection].insert_one(dict(document)).inserted_id
        except PyMongoError as exc:
            raise StoreError(f"Insert into {collection} failed") from exc

    def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        try:
            return self._db[collection].find_one(filter.to_mongo())
        except PyMongoError as exc:
            raise StoreError(f"Lookup in {collection} failed") from exc

    def find_many(self, collection: str, filter: Filter = MATCH_ALL) -> Iterator[Document]:
        try:
            cursor = self._db[collection].find(filter.to_mongo())
            try:
                for document in cursor:
                    yield document
            finally:
                cursor.close()
        except PyMongoError as exc:
            raise StoreError(f"Scan of {collection} failed") from exc

    def update_one(self, collection: str, filter: Filter, replacement: Document) -> int:
        document = {k: v for k, v in replacement.items() if k != "_id"}
        try:
            return self._db[collection].replace_one(filter.to_mongo(), document).matched_count
        except PyMongoError as exc:
            raise StoreError(f"Update in {collection} failed") from exc

    def delete_one(self, collection: str, filter: Filter) -> int:
        try:
            return self._db[collection].delete_one(filter.to_mongo()).deleted_count
        except PyMongoError as exc:
            raise StoreError(f"Delete from {collection} failed") from exc


def is_mongo_url(url: str) -> bool:
    return url.startswith(("mongodb://", "mongodb+srv://"))


def get_database_path(database_url: str) -> str:
    """Resolve a SQLite location.

    Absolute paths are used as is; relative ones are resolved against
    the project root (the directory containing ``music_library_api``).
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def build_gateway(settings: Settings) -> DocumentGateway:
    """Create the gateway selected by ``settings.database_url``."""
    if is_mongo_url(settings.database_url):
        return MongoGateway(
            settings.database_url,
            settings.database_name,
            timeout_ms=settings.mongo_timeout_ms,
        )
    return SQLiteGateway(get_database_path(settings.database_url))
