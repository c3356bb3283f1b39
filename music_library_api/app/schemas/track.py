"""
Pydantic models for tracks.

A track is a single song with the metadata needed to project its
lyrics: title, author, lyrics, a free-form category, tags and a
``ProjectionStyle`` (font size and colours).  ``TrackCreate`` and
``TrackUpdate`` describe request bodies; ``TrackRead`` adds the
store-assigned ``id`` and timestamps.

Any ``id``, ``createdAt`` or ``updatedAt`` sent by a client is ignored
because those fields only exist on ``TrackRead``.
"""

from datetime import datetime
from typing import List

from pydantic import Field, StrictInt, StrictStr

from .base import CamelModel


class ProjectionStyle(CamelModel):
    """How a track is rendered on the projection screen."""

    font_size: StrictInt = Field(0, examples=[32])
    text_color: StrictStr = Field("", examples=["#FFFFFF"])
    background_color: StrictStr = Field("", examples=["#000000"])


class TrackBase(CamelModel):
    title: StrictStr = Field("", examples=["Amazing Grace"])
    author: StrictStr = Field("", examples=["J. Newton"])
    lyrics: StrictStr = Field("", examples=["Amazing grace, how sweet the sound..."])
    category: StrictStr = Field("", examples=["hymn"])
    tags: List[StrictStr] = Field(default_factory=list, examples=[["worship"]])
    projection_style: ProjectionStyle = Field(default_factory=ProjectionStyle)


class TrackCreate(TrackBase):
    """Schema for creating a track."""
    pass


class TrackUpdate(TrackBase):
    """Schema for replacing a track.

    Updates are full replacements: omitted fields are reset to their
    defaults rather than kept.
    """
    pass


class TrackRead(TrackBase):
    """Schema for reading a track from the API."""

    id: str = Field(..., examples=["652f1c2e9d3b4a0012345678"])
    created_at: datetime
    updated_at: datetime
