"""Collection helpers shared by the class, student and attendance services.

Collections are plain lists of JSON-ready dicts keyed by their wire (camelCase) field names.
All helpers mutate in place and are meant to run inside ``DocumentStore.transaction()``.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from app.core.exceptions import ValidationError

Record = Dict[str, Any]

ACTION_CREATED = "created"
ACTION_UPDATED = "updated"


def utc_now_iso() -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-01-01T08:30:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def require_fields(payload: Record, required: Sequence[str]) -> None:
    missing = [name for name in required if payload.get(name) in (None, "")]
    if missing:
        raise ValidationError(required, missing)


def find_index(collection: List[Record], entity_id: str) -> int:
    for index, record in enumerate(collection):
        if record.get("id") == entity_id:
            return index
    return -1


def upsert_by_id(
    collection: List[Record],
    entity_id: str,
    build: Callable[[Optional[Record]], Record],
) -> Tuple[Record, str]:
    """Replace the record with ``entity_id`` in place, or append a new one.

    ``build`` receives the existing record (or None) and returns the full replacement.
    """
    index = find_index(collection, entity_id)
    if index >= 0:
        record = build(collection[index])
        collection[index] = record
        return record, ACTION_UPDATED
    record = build(None)
    collection.append(record)
    return record, ACTION_CREATED


def remove_where(collection: List[Record], predicate: Callable[[Record], bool]) -> List[Record]:
    """Drop every matching record, keeping the order of the rest. Returns the removed records."""
    kept: List[Record] = []
    removed: List[Record] = []
    for record in collection:
        (removed if predicate(record) else kept).append(record)
    collection[:] = kept
    return removed
