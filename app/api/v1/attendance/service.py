"""Attendance records: upsert, delete, filtered listing and the date/prayer summary."""

from typing import Any, Dict, List, Optional

from app.core.repository import Record, remove_where, require_fields, upsert_by_id, utc_now_iso
from app.db.document_store import DocumentStore
from app.realtime.broadcaster import ChangeBroadcaster
from app.realtime.events import EntityDeleted, EntityKind, EntityUpdated

from .schemas import (
    ATTENDANCE_REQUIRED_FIELDS,
    AttendanceFilter,
    AttendanceResponse,
    AttendanceSummary,
    AttendanceUpsert,
)

# Filter attribute -> stored field name.
_FILTER_FIELDS = (
    ("date", "date"),
    ("class_name", "className"),
    ("prayer", "prayer"),
    ("student_id", "studentId"),
)


def _attendance_to_response(record: Dict[str, Any]) -> AttendanceResponse:
    return AttendanceResponse.model_validate(record)


def filter_attendance(records: List[Record], filters: Optional[AttendanceFilter] = None) -> List[Record]:
    if filters is None:
        return list(records)
    selected = records
    for attr, field in _FILTER_FIELDS:
        value = getattr(filters, attr)
        if value:
            selected = [r for r in selected if r.get(field) == value]
    return list(selected)


def group_by_date_and_prayer(records: List[Record]) -> Dict[str, Dict[str, List[Record]]]:
    summary: Dict[str, Dict[str, List[Record]]] = {}
    for record in records:
        summary.setdefault(record.get("date"), {}).setdefault(record.get("prayer"), []).append(record)
    return summary


async def list_attendance(
    store: DocumentStore,
    filters: Optional[AttendanceFilter] = None,
) -> List[AttendanceResponse]:
    document = await store.load()
    return [_attendance_to_response(a) for a in filter_attendance(document["attendance"], filters)]


async def summarize_attendance(
    store: DocumentStore,
    filters: Optional[AttendanceFilter] = None,
) -> AttendanceSummary:
    """Filtered records grouped by date, then prayer. Read-only."""
    document = await store.load()
    grouped = group_by_date_and_prayer(filter_attendance(document["attendance"], filters))
    return {
        day: {prayer: [_attendance_to_response(r) for r in records] for prayer, records in prayers.items()}
        for day, prayers in grouped.items()
    }


async def upsert_attendance(
    store: DocumentStore,
    broadcaster: ChangeBroadcaster,
    payload: AttendanceUpsert,
) -> AttendanceResponse:
    data = payload.model_dump(by_alias=True)
    require_fields(data, ATTENDANCE_REQUIRED_FIELDS)

    async with store.transaction() as document:
        now = utc_now_iso()

        def build(existing: Optional[Record]) -> Record:
            return {
                "id": data["id"],
                "studentId": data["studentId"],
                "studentName": data["studentName"],
                "className": data["className"],
                "prayer": data["prayer"],
                "date": data["date"],
                "status": data["status"],
                "reason": data.get("reason") or None,
                "timestamp": data.get("timestamp") or now,
                "updatedAt": now,
            }

        record, action = upsert_by_id(document["attendance"], data["id"], build)

    await broadcaster.publish(EntityUpdated(kind=EntityKind.ATTENDANCE, action=action, entity=record))
    return _attendance_to_response(record)


async def delete_attendance(
    store: DocumentStore,
    broadcaster: ChangeBroadcaster,
    attendance_id: str,
) -> Optional[AttendanceResponse]:
    async with store.transaction() as document:
        removed = remove_where(document["attendance"], lambda a: a.get("id") == attendance_id)

    await broadcaster.publish(EntityDeleted(kind=EntityKind.ATTENDANCE, id=attendance_id))
    return _attendance_to_response(removed[0]) if removed else None
