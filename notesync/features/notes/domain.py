"""Domain models for the notes view"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from notesync.models.note import Note, Todo


class EditField(str, Enum):
    """Editable text fields of a note"""
    TITLE = "title"
    CONTENT = "content"


class NoteGroupLabel(str, Enum):
    """Time buckets of the note list, in display order"""
    TODAY = "Today"
    YESTERDAY = "Yesterday"
    LAST_7_DAYS = "Last 7 Days"
    LAST_30_DAYS = "Last 30 Days"
    OLDER = "Older"

    @property
    def display_name(self) -> str:
        return _GROUP_DISPLAY_NAMES[self]


_GROUP_DISPLAY_NAMES: Dict[NoteGroupLabel, str] = {
    NoteGroupLabel.TODAY: "오늘",
    NoteGroupLabel.YESTERDAY: "어제",
    NoteGroupLabel.LAST_7_DAYS: "지난 7일",
    NoteGroupLabel.LAST_30_DAYS: "지난 30일",
    NoteGroupLabel.OLDER: "그 외",
}


NOTE_GROUP_ORDER: List[NoteGroupLabel] = list(NoteGroupLabel)


class EditBuffer(BaseModel):
    """In-progress title/content of the selected note plus input flags.

    Immutable: every transition returns a new buffer.
    """
    model_config = ConfigDict(frozen=True)

    note_id: Optional[str] = None
    title: str = ""
    content: str = ""
    composing: bool = False
    typing: bool = False

    @classmethod
    def for_note(cls, note: Optional[Note]) -> "EditBuffer":
        """Fresh buffer for a newly selected note (flags cleared)"""
        if note is None:
            return cls()
        return cls(note_id=note.id, title=note.title, content=note.content)

    @property
    def accepts_snapshot(self) -> bool:
        return not self.composing and not self.typing

    def with_keystroke(self, field: EditField, value: str) -> "EditBuffer":
        return self.model_copy(update={field.value: value, "typing": True})

    def with_composition_started(self) -> "EditBuffer":
        return self.model_copy(update={"composing": True})

    def with_composition_ended(self, field: EditField, value: str) -> "EditBuffer":
        return self.model_copy(update={field.value: value, "composing": False, "typing": True})

    def with_typing_elapsed(self) -> "EditBuffer":
        return self.model_copy(update={"typing": False})

    def with_snapshot(self, note: Note) -> "EditBuffer":
        """Take title/content from the snapshot unless the user is mid-input"""
        if not self.accepts_snapshot:
            return self
        return self.model_copy(update={"title": note.title, "content": note.content})

    def pending_changes(self, confirmed: Note) -> Dict[EditField, str]:
        """Fields whose buffered value differs from the confirmed note"""
        changes: Dict[EditField, str] = {}
        if self.title != confirmed.title:
            changes[EditField.TITLE] = self.title
        if self.content != confirmed.content:
            changes[EditField.CONTENT] = self.content
        return changes


class NoteListItem(BaseModel):
    """One row of the note list"""
    id: str
    title: str
    preview: str
    timestamp: str
    todo_count: int
    completed_count: int
    active: bool = False


class NoteGroup(BaseModel):
    label: NoteGroupLabel
    title: str
    notes: List[NoteListItem]


class NoteDetail(BaseModel):
    """The selected note as shown in the editor pane"""
    id: str
    title: str
    content: str
    created_at: str
    timestamp: str
    todos: List[Todo]
    todo_count: int
    completed_count: int


class ViewState(BaseModel):
    """Everything a client needs to render the notes screen"""
    loading: bool
    error_message: Optional[str] = None
    total_count: int
    search_term: str
    groups: List[NoteGroup]
    selected: Optional[NoteDetail] = None
    new_todo: str = ""
    composing: bool = False
    typing: bool = False
