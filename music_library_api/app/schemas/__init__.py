"""
Pydantic schema definitions for API payloads.

Each entity kind (tracks, collections) defines its own models for
request and response bodies.  Stored documents use the same camelCase
field names as the wire format, with ``id`` kept as ``_id``.
"""
