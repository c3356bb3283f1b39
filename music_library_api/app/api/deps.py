"""
FastAPI dependencies that hand services to the endpoints.

The document gateway and settings are attached to ``app.state`` by
``create_app``; each request gets a service bound to them.
"""

from fastapi import Request

from ..services.collection_service import CollectionService
from ..services.track_service import TrackService


def get_track_service(request: Request) -> TrackService:
    state = request.app.state
    return TrackService(state.gateway, strict_missing=state.settings.strict_missing)


def get_collection_service(request: Request) -> CollectionService:
    state = request.app.state
    return CollectionService(state.gateway, strict_missing=state.settings.strict_missing)
