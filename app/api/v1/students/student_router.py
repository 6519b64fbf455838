from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.core.dependencies import get_broadcaster, get_document_store
from app.core.exceptions import ServiceError
from app.core.schemas import DeleteResponse
from app.db.document_store import DocumentStore
from app.realtime.broadcaster import ChangeBroadcaster

from .schemas import StudentResponse, StudentUpsert
from . import service

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.get("", response_model=List[StudentResponse])
async def list_students(
    store: DocumentStore = Depends(get_document_store),
) -> List[StudentResponse]:
    try:
        return await service.list_students(store)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/class/{class_name}", response_model=List[StudentResponse])
async def list_students_by_class_name(
    class_name: str,
    store: DocumentStore = Depends(get_document_store),
) -> List[StudentResponse]:
    """Students whose className is exactly ``class_name``."""
    try:
        return await service.list_students_by_class_name(store, class_name)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=StudentResponse)
async def upsert_student(
    payload: StudentUpsert,
    store: DocumentStore = Depends(get_document_store),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> StudentResponse:
    try:
        return await service.upsert_student(store, broadcaster, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{student_id}", response_model=DeleteResponse)
async def delete_student(
    student_id: str,
    store: DocumentStore = Depends(get_document_store),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> DeleteResponse:
    """Delete a student together with its attendance records."""
    try:
        await service.delete_student(store, broadcaster, student_id)
        return DeleteResponse()
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
