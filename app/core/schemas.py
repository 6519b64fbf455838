from typing import Any

from pydantic import BaseModel, field_validator


class UpsertPayload(BaseModel):
    """Base for create-or-replace payloads.

    Numbers are accepted and stored as strings. A numeric zero counts as empty, so a
    required field sent as 0 is reported missing instead of being stored as "0".
    """

    @field_validator("*", mode="before")
    @classmethod
    def zero_is_empty(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v == 0:
            return None
        return v

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True


class DeleteResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    status: str
    app: str
    subscribers: int
