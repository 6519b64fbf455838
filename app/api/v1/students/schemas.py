from typing import Optional

from pydantic import BaseModel, Field

from app.core.schemas import UpsertPayload

STUDENT_REQUIRED_FIELDS = ("id", "name", "className")


class StudentUpsert(UpsertPayload):
    """Create-or-replace payload. className is matched by value against Class.name, never resolved."""

    id: Optional[str] = None
    name: Optional[str] = None
    roll_number: Optional[str] = Field(None, alias="rollNumber")
    class_name: Optional[str] = Field(None, alias="className")

class StudentResponse(BaseModel):
    id: str
    name: str
    roll_number: Optional[str] = Field(None, alias="rollNumber")
    class_name: str = Field(..., alias="className")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
