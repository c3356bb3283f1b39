"""
Helpers around document identifiers.

Identifiers are BSON ObjectIds: 12 bytes, ordered by creation time and
unique without coordination.  On the wire they travel as 24 lowercase
hex characters.
"""

from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId

from .errors import ClientInputError

INVALID_ID = "Invalid ID"


def new_id() -> ObjectId:
    return ObjectId()


def parse_id(value: str) -> ObjectId:
    """Parse a path identifier.

    Raises ``ClientInputError`` for anything that is not exactly 24 hex
    characters, so a malformed id never reaches the store as a lookup.
    """
    if not isinstance(value, str) or len(value) != 24:
        raise ClientInputError(INVALID_ID)
    try:
        return ObjectId(value)
    except InvalidId as exc:
        raise ClientInputError(INVALID_ID) from exc


def utcnow() -> datetime:
    """Current UTC time truncated to milliseconds.

    BSON dates only carry milliseconds, so anything finer would be lost
    on the first round trip through the store.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)
