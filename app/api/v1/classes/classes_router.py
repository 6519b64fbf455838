from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.core.dependencies import get_broadcaster, get_document_store
from app.core.exceptions import ServiceError
from app.core.schemas import DeleteResponse
from app.db.document_store import DocumentStore
from app.realtime.broadcaster import ChangeBroadcaster

from .schemas import ClassResponse, ClassUpsert
from . import service

router = APIRouter(prefix="/api/v1/classes", tags=["classes"])


@router.get("", response_model=List[ClassResponse])
async def list_classes(
    store: DocumentStore = Depends(get_document_store),
) -> List[ClassResponse]:
    try:
        return await service.list_classes(store)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=ClassResponse)
async def upsert_class(
    payload: ClassUpsert,
    store: DocumentStore = Depends(get_document_store),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> ClassResponse:
    """Create a class, or replace the one with the same id."""
    try:
        return await service.upsert_class(store, broadcaster, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{class_id}", response_model=DeleteResponse)
async def delete_class(
    class_id: str,
    store: DocumentStore = Depends(get_document_store),
    broadcaster: ChangeBroadcaster = Depends(get_broadcaster),
) -> DeleteResponse:
    """Delete a class and the students enrolled under its name."""
    try:
        await service.delete_class(store, broadcaster, class_id)
        return DeleteResponse()
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
