"""
Top-level router for version 1 of the API.

Aggregates the per-entity routers.  ``create_app`` mounts it under
``settings.api_prefix`` (empty by default, giving ``/tracks`` and
``/collections``).
"""

from fastapi import APIRouter

from .endpoints import collections, tracks

router = APIRouter()

router.include_router(tracks.router, prefix="/tracks", tags=["tracks"])
router.include_router(collections.router, prefix="/collections", tags=["collections"])
