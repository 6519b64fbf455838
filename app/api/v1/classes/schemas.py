from typing import Optional

from pydantic import BaseModel, Field

from app.core.schemas import UpsertPayload

CLASS_REQUIRED_FIELDS = ("id", "name")


class ClassUpsert(UpsertPayload):
    """Create-or-replace payload. Required fields are checked by the service, not here."""

    id: Optional[str] = None
    name: Optional[str] = None


class ClassResponse(BaseModel):
    id: str
    name: str
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
