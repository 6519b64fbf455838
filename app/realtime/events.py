"""Change events published after a committed mutation, and their wire messages."""
from enum import Enum
from typing import Any, Dict, Union

from pydantic import BaseModel


class EntityKind(str, Enum):
    CLASS = "class"
    STUDENT = "student"
    ATTENDANCE = "attendance"


class ChangeAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ChangeMessage(BaseModel):
    """Wire shape pushed to subscribers, e.g. {"type": "class_updated", "data": {...}, "action": "created"}."""

    type: str
    data: Dict[str, Any]
    action: ChangeAction


class ConnectedMessage(BaseModel):
    type: str = "connected"
    message: str = "Connected to server"


class EntityUpdated(BaseModel):
    kind: EntityKind
    action: ChangeAction
    entity: Dict[str, Any]

    def to_message(self) -> ChangeMessage:
        return ChangeMessage(type=f"{self.kind.value}_updated", data=self.entity, action=self.action)


class EntityDeleted(BaseModel):
    kind: EntityKind
    id: str

    def to_message(self) -> ChangeMessage:
        return ChangeMessage(type=f"{self.kind.value}_deleted", data={"id": self.id}, action=ChangeAction.DELETED)


ChangeEvent = Union[EntityUpdated, EntityDeleted]
