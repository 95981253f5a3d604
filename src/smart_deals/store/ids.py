"""Record identifiers and JSON conversion of stored documents."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bson import Decimal128, ObjectId


@dataclass(frozen=True)
class NativeId:
    """Identifier in the store's native ObjectId format."""

    value: ObjectId

    def as_key(self) -> ObjectId:
        return self.value


@dataclass(frozen=True)
class OpaqueId:
    """Plain string key, as used by records created before ObjectIds."""

    value: str

    def as_key(self) -> str:
        return self.value


RecordId = NativeId | OpaqueId


def parse_record_id(raw: Any) -> RecordId:
    """Resolve a client-supplied identifier.

    A valid 24-hex ObjectId string (or an ObjectId) becomes a NativeId;
    anything else is kept as an opaque string key.
    """
    if isinstance(raw, ObjectId):
        return NativeId(raw)
    text = str(raw)
    if ObjectId.is_valid(text):
        return NativeId(ObjectId(text))
    return OpaqueId(text)


def to_jsonable(value: Any) -> Any:
    """Convert a stored document (or part of one) into JSON-safe values."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal128):
        return str(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value
