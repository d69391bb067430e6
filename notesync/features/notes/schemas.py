"""Message schemas for the live notes WebSocket"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, model_validator

from notesync.features.notes.domain import EditField, ViewState


class EventType(str, Enum):
    """Client -> server event types"""
    SELECT = "select"
    CREATE = "create"
    DELETE = "delete"
    EDIT = "edit"
    COMPOSITION_START = "composition_start"
    COMPOSITION_END = "composition_end"
    NEW_TODO_TEXT = "new_todo_text"
    ADD_TODO = "add_todo"
    TOGGLE_TODO = "toggle_todo"
    DELETE_TODO = "delete_todo"
    SEARCH = "search"
    RELOAD = "reload"


_REQUIRED_FIELDS = {
    EventType.SELECT: ("note_id",),
    EventType.DELETE: ("note_id",),
    EventType.EDIT: ("field", "value"),
    EventType.COMPOSITION_END: ("field", "value"),
    EventType.NEW_TODO_TEXT: ("value",),
    EventType.TOGGLE_TODO: ("todo_id",),
    EventType.DELETE_TODO: ("todo_id",),
    EventType.SEARCH: ("value",),
}


class ClientEvent(BaseModel):
    """One user action sent over the socket"""
    type: EventType
    note_id: Optional[str] = None
    todo_id: Optional[str] = None
    field: Optional[EditField] = None
    value: Optional[str] = None

    @model_validator(mode="after")
    def _check_required(self) -> "ClientEvent":
        missing = [name for name in _REQUIRED_FIELDS.get(self.type, ()) if getattr(self, name) is None]
        if missing:
            raise ValueError(f"'{self.type.value}' event requires {', '.join(missing)}")
        return self


class StateMessage(BaseModel):
    type: Literal["state"] = "state"
    state: ViewState


class AlertMessage(BaseModel):
    """Blocking notification the client must show"""
    type: Literal["alert"] = "alert"
    message: str
