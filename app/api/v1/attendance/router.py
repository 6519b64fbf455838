"""Attendance API router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.dependencies import get_broadcaster, get_document_store
from app.core.exceptions import ServiceError
from app.core.schemas import DeleteResponse
from app.db.document_store import DocumentStore
from app.realtime.broadcaster import ChangeBroadcaster

from . import service
from .schemas import AttendanceFilter, AttendanceResponse, AttendanceSummary, AttendanceUpsert

router = APIRouter(prefix="/api/v1/attendance", tags=["attendance"])
summary_router = APIRouter(prefix="/api/v1/summary", tags=["attendance"])


def attendance_filter(
    date: Optional[str] = Query(None, description="Exact date, e.g. 2024-01-01"),
    class_name: Optional[str] = Query(None, alias="className"),
    prayer: Optional[str] = Query(None),
    student_id: Optional[str] = Query(None, alias="studentId"),
) -> AttendanceFilter:
    return AttendanceFilter(date=date, class_name=class_name, prayer=prayer, student_id=student_id)


@router.get("", response_model=List[AttendanceResponse])
async def list_attendance(
    filters: AttendanceFilter = Depends(attendance_filter),
    store: DocumentStore = Depends(get_document_store),
) -> List[AttendanceResponse]:
    try:
        return await service.list_attendance(store, filters)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=AttendanceResponse)
async def upsert_attendance(
    payload: AttendanceUpsert,
    store: DocumentStore = Depends(get_document_store),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> AttendanceResponse:
    """Save one attendance record, replacing any record with the same id."""
    try:
        return await service.upsert_attendance(store, broadcaster, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{attendance_id}", response_model=DeleteResponse)
async def delete_attendance(
    attendance_id: str,
    store: DocumentStore = Depends(get_document_store),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> DeleteResponse:
    try:
        await service.delete_attendance(store, broadcaster, attendance_id)
        return DeleteResponse()
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@summary_router.get("", response_model=AttendanceSummary)
async def summarize_attendance(
    filters: AttendanceFilter = Depends(attendance_filter),
    store: DocumentStore = Depends(get_document_store),
) -> AttendanceSummary:
    """Attendance grouped by date, then prayer."""
    try:
        return await service.summarize_attendance(store, filters)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
