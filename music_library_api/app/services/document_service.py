"""
Common CRUD logic for entities stored as documents.

``DocumentService`` implements create/list/get/update/delete once on
top of a ``DocumentGateway``; ``TrackService`` and ``CollectionService``
supply the collection name, the read schema and any field conversion.

Rules enforced here:

* ``_id``, ``createdAt`` and ``updatedAt`` are only ever written by
  this class.  ``createdAt`` survives updates and ``updatedAt`` moves
  forward on every successful update.
* Path ids are parsed before the store is touched, so a malformed id
  is a ``ClientInputError`` and never a ``NotFoundError``.
* Updates replace the whole document.  Concurrent updates of the same
  id are last-writer-wins.
* Updating or deleting an id that matches nothing succeeds unless the
  service runs with ``strict_missing``.
"""

import logging
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, ClassVar, Dict, Iterator, List, Type

from pydantic import BaseModel, ValidationError

from ..core.db import DocumentGateway, Filter
from ..core.errors import NotFoundError, StoreError
from ..core.identifiers import new_id, parse_id, utcnow

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class DocumentService:
    """Base class for services backed by one document collection."""

    collection_name: ClassVar[str]
    entity_label: ClassVar[str]
    entity_plural: ClassVar[str]
    read_schema: ClassVar[Type[BaseModel]]

    def __init__(self, gateway: DocumentGateway, strict_missing: bool = False) -> None:
        self.gateway = gateway
        self.strict_missing = strict_missing

    @contextmanager
    def _store_operation(self, message: str) -> Iterator[None]:
        """Re-raise gateway failures with a message fit for clients."""
        try:
            yield
        except StoreError as exc:
            raise StoreError(message) from exc

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.entity_label.capitalize()} not found")

    def _to_document(self, data: BaseModel) -> Document:
        return data.model_dump(by_alias=True)

    def _from_document(self, document: Document) -> BaseModel:
        payload = {k: v for k, v in document.items() if k != "_id"}
        payload["id"] = str(document["_id"])
        return self.read_schema.model_validate(payload)

    def _create(self, data: BaseModel) -> BaseModel:
        now = utcnow()
        document = self._to_document(data)
        document.update({"_id": new_id(), "createdAt": now, "updatedAt": now})
        with self._store_operation(f"Error inserting {self.entity_label}"):
            self.gateway.insert_one(self.collection_name, document)
        logger.info("Created %s %s", self.entity_label, document["_id"])
        return self._from_document(document)

    def _list(self) -> List[BaseModel]:
        with self._store_operation(f"Error fetching {self.entity_plural}"):
            documents = list(self.gateway.find_many(self.collection_name))
        items = []
        for document in documents:
            try:
                items.append(self._from_document(document))
            except (ValidationError, KeyError, TypeError):
                # Documents written by other tools may not fit the schema;
                # they are left out rather than failing the whole listing.
                logger.warning("Skipping malformed %s document %s", self.entity_label, document.get("_id"))
        return items

    def _get(self, raw_id: str) -> BaseModel:
        oid = parse_id(raw_id)
        with self._store_operation(f"Error fetching {self.entity_label}"):
            document = self.gateway.find_one(self.collection_name, Filter.by_id(oid))
        if document is None:
            raise self._not_found()
        try:
            return self._from_document(document)
        except (ValidationError, TypeError) as exc:
            raise StoreError(f"Error fetching {self.entity_label}") from exc

    def _update(self, raw_id: str, data: BaseModel) -> BaseModel:
        oid = parse_id(raw_id)
        by_id = Filter.by_id(oid)
        with self._store_operation(f"Error updating {self.entity_label}"):
            current = self.gateway.find_one(self.collection_name, by_id)
            now = utcnow()
            created_at = now
            if current is not None:
                created_at = current.get("createdAt") or now
                previous = current.get("updatedAt")
                if previous is not None and now <= previous:
                    now = previous + timedelta(milliseconds=1)
            replacement = self._to_document(data)
            replacement.update({"createdAt": created_at, "updatedAt": now})
            matched = self.gateway.update_one(self.collection_name, by_id, replacement)
        if matched:
            logger.info("Updated %s %s", self.entity_label, oid)
        elif self.strict_missing:
            raise self._not_found()
        else:
            logger.warning("Update of missing %s %s matched nothing; echoing the input", self.entity_label, oid)
        replacement["_id"] = oid
        return self._from_document(replacement)

    def _delete(self, raw_id: str) -> None:
        oid = parse_id(raw_id)
        with self._store_operation(f"Error deleting {self.entity_label}"):
            deleted = self.gateway.delete_one(self.collection_name, Filter.by_id(oid))
        if deleted:
            logger.info("Deleted %s %s", self.entity_label, oid)
        elif self.strict_missing:
            raise self._not_found()
        else:
            logger.info("Delete of missing %s %s matched nothing", self.entity_label, oid)