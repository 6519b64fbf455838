import logging
from typing import Any, Dict, List, Optional

from app.core.repository import Record, remove_where, require_fields, upsert_by_id, utc_now_iso
from app.db.document_store import DocumentStore
from app.realtime.broadcaster import ChangeBroadcaster
from app.realtime.events import EntityDeleted, EntityKind, EntityUpdated

from .schemas import STUDENT_REQUIRED_FIELDS, StudentResponse, StudentUpsert

logger = logging.getLogger(__name__)


def _student_to_response(record: Dict[str, Any]) -> StudentResponse:
    return StudentResponse.model_validate(record)


async def list_students(store: DocumentStore) -> List[StudentResponse]:
    document = await store.load()
    return [_student_to_response(s) for s in document["students"]]


async def list_students_by_class_name(store: DocumentStore, class_name: str) -> List[StudentResponse]:
    document = await store.load()
    return [_student_to_response(s) for s in document["students"] if s.get("className") == class_name]


async def upsert_student(
    store: DocumentStore,
    broadcaster: ChangeBroadcaster,
    payload: StudentUpsert,
) -> StudentResponse:
    data = payload.model_dump(by_alias=True)
    require_fields(data, STUDENT_REQUIRED_FIELDS)

    async with store.transaction() as document:
        now = utc_now_iso()

        def build(existing: Optional[Record]) -> Record:
            return {
                "id": data["id"],
                "name": data["name"],
                "rollNumber": data.get("rollNumber") or None,
                "className": data["className"],
                "updatedAt": now,
            }

        record, action = upsert_by_id(document["students"], data["id"], build)

    await broadcaster.publish(EntityUpdated(kind=EntityKind.STUDENT, action=action, entity=record))
    return _student_to_response(record)


async def delete_student(
    store: DocumentStore,
    broadcaster: ChangeBroadcaster,
    student_id: str,
) -> Optional[StudentResponse]:
    """Delete a student and all attendance recorded against its id. No-op if absent."""
    async with store.transaction() as document:
        removed = remove_where(document["students"], lambda s: s.get("id") == student_id)
        cascaded = remove_where(document["attendance"], lambda a: a.get("studentId") == student_id)

    if cascaded:
        logger.info(f"Deleted student {student_id!r} and {len(cascaded)} attendance record(s)")
    await broadcaster.publish(EntityDeleted(kind=EntityKind.STUDENT, id=student_id))
    return _student_to_response(removed[0]) if removed else None
