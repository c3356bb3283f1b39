"""
Pydantic models for collections.

A collection is a named, ordered list of track references.  The
references are plain identifiers: duplicates are allowed, order is
kept, and nothing checks that the referenced tracks exist.  Each
element must still be a well-formed 24 character hex identifier.
"""

from datetime import datetime
from typing import Annotated, List

from pydantic import Field, StrictStr, StringConstraints

from .base import CamelModel

TrackRef = Annotated[str, StringConstraints(strict=True, pattern=r"^[0-9a-fA-F]{24}$")]


class CollectionBase(CamelModel):
    title: StrictStr = Field("", examples=["Sunday Set"])
    description: StrictStr = Field("", examples=["Songs for the morning service"])
    author: StrictStr = Field("", examples=["Worship team"])
    track_refs: List[TrackRef] = Field(default_factory=list, examples=[["652f1c2e9d3b4a0012345678"]])


class CollectionCreate(CollectionBase):
    """Schema for creating a collection."""
    pass


class CollectionUpdate(CollectionBase):
    """Schema for replacing a collection (full replacement)."""
    pass


class CollectionRead(CollectionBase):
    """Schema for reading a collection from the API."""

    id: str
    created_at: datetime
    updated_at: datetime
