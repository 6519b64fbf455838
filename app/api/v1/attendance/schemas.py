from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.core.schemas import UpsertPayload

ATTENDANCE_REQUIRED_FIELDS = ("id", "studentId", "studentName", "className", "prayer", "date", "status")


class AttendanceUpsert(UpsertPayload):
    """Create-or-replace payload for one student's attendance at one prayer on one date.

    studentName and className are stored as given (a snapshot), not looked up from the student.
    """

    id: Optional[str] = None
    student_id: Optional[str] = Field(None, alias="studentId")
    student_name: Optional[str] = Field(None, alias="studentName")
    class_name: Optional[str] = Field(None, alias="className")
    prayer: Optional[str] = None
    date: Optional[str] = None
    status: Optional[str] = None
    reason: Optional[str] = None
    timestamp: Optional[str] = None


class AttendanceResponse(BaseModel):
    id: str
    student_id: str = Field(..., alias="studentId")
    student_name: str = Field(..., alias="studentName")
    class_name: str = Field(..., alias="className")
    prayer: str
    date: str
    status: str
    reason: Optional[str] = None
    timestamp: Optional[str] = None
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True


class AttendanceFilter(BaseModel):
    """Optional AND-combined filters. Unset or empty values do not filter."""

    date: Optional[str] = None
    class_name: Optional[str] = None
    prayer: Optional[str] = None
    student_id: Optional[str] = None


# date -> prayer -> records, both levels in order of first appearance.
AttendanceSummary = Dict[str, Dict[str, List[AttendanceResponse]]]
