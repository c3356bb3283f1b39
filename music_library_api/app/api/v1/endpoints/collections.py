"""
Collection endpoints for API v1.

Same shape as the track endpoints.  ``trackRefs`` are accepted as long
as every element is a well-formed id; the referenced tracks do not have
to exist.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from music_library_api.app.api.deps import get_collection_service
from music_library_api.app.schemas.collection import CollectionCreate, CollectionRead, CollectionUpdate
from music_library_api.app.services.collection_service import CollectionService

router = APIRouter()


@router.post("", response_model=CollectionRead, status_code=status.HTTP_201_CREATED)
def create_collection(
    collection_in: CollectionCreate,
    service: CollectionService = Depends(get_collection_service),
) -> CollectionRead:
    return service.create_collection(collection_in)


@router.get("", response_model=List[CollectionRead])
def list_collections(service: CollectionService = Depends(get_collection_service)) -> List[CollectionRead]:
    return service.list_collections()


@router.get("/{collection_id}", response_model=CollectionRead)
def get_collection(
    collection_id: str,
    service: CollectionService = Depends(get_collection_service),
) -> CollectionRead:
    return service.get_collection(collection_id)


@router.put("/{collection_id}", response_model=CollectionRead)
def update_collection(
    collection_id: str,
    collection_in: CollectionUpdate,
    service: CollectionService = Depends(get_collection_service),
) -> CollectionRead:
    """Replace a collection, including its full ``trackRefs`` list."""
    return service.update_collection(collection_id, collection_in)


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_collection(
    collection_id: str,
    service: CollectionService = Depends(get_collection_service),
) -> None:
    """Delete a collection.  The referenced tracks are not touched."""
    service.delete_collection(collection_id)
    return None
