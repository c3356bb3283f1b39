"""
Service layer for tracks.

Tracks are stored in the ``tracks`` document collection with the same
camelCase field names as the API.  See ``DocumentService`` for the
identifier, timestamp and missing-document rules.
"""

from typing import List

from ..schemas.track import TrackCreate, TrackRead, TrackUpdate
from .document_service import DocumentService


class TrackService(DocumentService):
    """Create, read, replace and delete tracks."""

    collection_name = "tracks"
    entity_label = "track"
    entity_plural = "tracks"
    read_schema = TrackRead

    def create_track(self, data: TrackCreate) -> TrackRead:
        """Store a new track under a fresh id and return it."""
        return self._create(data)

    def list_tracks(self) -> List[TrackRead]:
        """Return every track in store order (no sorting, may be empty)."""
        return self._list()

    def get_track(self, track_id: str) -> TrackRead:
        return self._get(track_id)

    def update_track(self, track_id: str, data: TrackUpdate) -> TrackRead:
        """Replace the track stored under ``track_id``.

        The returned track always carries ``track_id``, whatever the body
        contained.
        """
        return self._update(track_id, data)

    def delete_track(self, track_id: str) -> None:
        self._delete(track_id)
