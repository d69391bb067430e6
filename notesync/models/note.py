"""Note domain model"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator


class Todo(BaseModel):
    """Checklist item, stored nested inside its note"""
    id: str
    text: str
    completed: bool = False


class NoteBase(BaseModel):
    """Base note fields (persisted document shape)"""
    title: str = ""
    content: str = ""
    todos: List[Todo] = Field(default_factory=list)
    created_at: str = Field("", alias="createdAt")

    @field_validator("title", "content", "created_at", mode="before")
    @classmethod
    def _none_as_empty_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("todos", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_document(self) -> dict:
        """Serialize using the stored column names"""
        return self.model_dump(by_alias=True, mode="json", exclude={"id"})

    class Config:
        populate_by_name = True


class NoteCreate(NoteBase):
    """Note creation model"""
    pass


class NoteUpdate(BaseModel):
    """Note update model - all fields optional, only set fields are written"""
    title: Optional[str] = None
    content: Optional[str] = None
    todos: Optional[List[Todo]] = None

    def to_document(self) -> dict:
        # Set fields only; nested todos are always written whole
        return self.model_dump(include=self.model_fields_set, mode="json")


class Note(NoteBase):
    """Complete note model as delivered by the store"""
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    def todo_ids(self) -> set[str]:
        return {todo.id for todo in self.todos}

    def completed_count(self) -> int:
        return sum(1 for todo in self.todos if todo.completed)

    class Config:
        from_attributes = True
        populate_by_name = True
