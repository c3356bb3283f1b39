"""
Track endpoints for API v1.

Handlers are plain functions: FastAPI runs them in its threadpool, so
a slow store call for one request never holds up another.  Errors
raised by ``TrackService`` are turned into 400/404/500 responses by the
handlers registered in ``core.errors``.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from music_library_api.app.api.deps import get_track_service
from music_library_api.app.schemas.track import TrackCreate, TrackRead, TrackUpdate
from music_library_api.app.services.track_service import TrackService

router = APIRouter()


@router.post("", response_model=TrackRead, status_code=status.HTTP_201_CREATED)
def create_track(
    track_in: TrackCreate,
    service: TrackService = Depends(get_track_service),
) -> TrackRead:
    """Create a new track.

    Any ``id`` or timestamps in the body are ignored; the stored track
    is returned with its new id and ``createdAt == updatedAt``.
    """
    return service.create_track(track_in)


@router.get("", response_model=List[TrackRead])
def list_tracks(service: TrackService = Depends(get_track_service)) -> List[TrackRead]:
    """Return all tracks.  Order follows the store and is not guaranteed."""
    return service.list_tracks()


@router.get("/{track_id}", response_model=TrackRead)
def get_track(track_id: str, service: TrackService = Depends(get_track_service)) -> TrackRead:
    """Retrieve a track by id.

    A malformed id answers 400; a well-formed id with no track answers
    404.
    """
    return service.get_track(track_id)


@router.put("/{track_id}", response_model=TrackRead)
def update_track(
    track_id: str,
    track_in: TrackUpdate,
    service: TrackService = Depends(get_track_service),
) -> TrackRead:
    """Replace a track.  All fields are overwritten; ``createdAt`` is kept."""
    return service.update_track(track_id, track_in)


@router.delete("/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_track(track_id: str, service: TrackService = Depends(get_track_service)) -> None:
    """Delete a track.  Deleting an unknown id also answers 204."""
    service.delete_track(track_id)
    return None
