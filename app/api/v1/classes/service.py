import logging
from typing import Any, Dict, List, Optional

from app.core.repository import Record, remove_where, require_fields, upsert_by_id, utc_now_iso
from app.db.document_store import DocumentStore
from app.realtime.broadcaster import ChangeBroadcaster
from app.realtime.events import EntityDeleted, EntityKind, EntityUpdated

from .schemas import CLASS_REQUIRED_FIELDS, ClassResponse, ClassUpsert

logger = logging.getLogger(__name__)


def _class_to_response(record: Dict[str, Any]) -> ClassResponse:
    return ClassResponse.model_validate(record)


async def list_classes(store: DocumentStore) -> List[ClassResponse]:
    document = await store.load()
    return [_class_to_response(c) for c in document["classes"]]


async def upsert_class(
    store: DocumentStore,
    broadcaster: ChangeBroadcaster,
    payload: ClassUpsert,
) -> ClassResponse:
    """Create or replace a class by id. createdAt survives updates; updatedAt is always restamped."""
    data = payload.model_dump()
    require_fields(data, CLASS_REQUIRED_FIELDS)

    async with store.transaction() as document:
        now = utc_now_iso()

        def build(existing: Optional[Record]) -> Record:
            created_at = existing.get("createdAt") if existing else None
            return {
                "id": data["id"],
                "name": data["name"],
                "createdAt": created_at or now,
                "updatedAt": now,
            }

        record, action = upsert_by_id(document["classes"], data["id"], build)

    await broadcaster.publish(EntityUpdated(kind=EntityKind.CLASS, action=action, entity=record))
    return _class_to_response(record)


async def delete_class(
    store: DocumentStore,
    broadcaster: ChangeBroadcaster,
    class_id: str,
) -> Optional[ClassResponse]:
    """Delete a class and every student whose className equals its name. No-op if absent.

    Attendance rows are not touched here; they only go away with their student.
    """
    async with store.transaction() as document:
        removed = remove_where(document["classes"], lambda c: c.get("id") == class_id)
        cascaded = 0
        for school_class in removed:
            name = school_class.get("name")
            cascaded += len(remove_where(document["students"], lambda s: s.get("className") == name))

    if cascaded:
        logger.info(f"Deleted class {class_id!r} and {cascaded} student(s) in it")
    await broadcaster.publish(EntityDeleted(kind=EntityKind.CLASS, id=class_id))
    return _class_to_response(removed[0]) if removed else None
