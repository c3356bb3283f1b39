"""
Service layer for collections.

Collections live in the ``collections`` document collection.  Their
``trackRefs`` are stored as ObjectIds, in the order given and with
duplicates kept.  Referenced tracks are not looked up: a collection can
be created with, or keep, references to tracks that do not exist, and
deleting a track leaves collections untouched.
"""

from typing import List

from bson import ObjectId
from pydantic import BaseModel

from ..schemas.collection import CollectionCreate, CollectionRead, CollectionUpdate
from .document_service import Document, DocumentService


class CollectionService(DocumentService):
    """Create, read, replace and delete collections."""

    collection_name = "collections"
    entity_label = "collection"
    entity_plural = "collections"
    read_schema = CollectionRead

    def _to_document(self, data: BaseModel) -> Document:
        document = super()._to_document(data)
        document["trackRefs"] = [ObjectId(ref) for ref in document.get("trackRefs", [])]
        return document

    def _from_document(self, document: Document) -> BaseModel:
        document = dict(document)
        document["trackRefs"] = [str(ref) for ref in document.get("trackRefs") or []]
        return super()._from_document(document)

    def create_collection(self, data: CollectionCreate) -> CollectionRead:
        return self._create(data)

    def list_collections(self) -> List[CollectionRead]:
        return self._list()

    def get_collection(self, collection_id: str) -> CollectionRead:
        return self._get(collection_id)

    def update_collection(self, collection_id: str, data: CollectionUpdate) -> CollectionRead:
        return self._update(collection_id, data)

    def delete_collection(self, collection_id: str) -> None:
        self._delete(collection_id)
