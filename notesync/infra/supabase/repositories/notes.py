"""Notes repository"""
from typing import Any, Dict, List

from supabase import AsyncClient  # type: ignore

from notesync.models.note import Note, NoteCreate, NoteUpdate

from .base import BaseRepository

CREATED_AT_COLUMN = "createdAt"


class NoteRepository(BaseRepository[Note, NoteCreate, NoteUpdate]):
    """Repository for notes operations"""

    def __init__(self, client: AsyncClient, table_name: str = "notes"):
        super().__init__(client, table_name, Note)

    def _dump_create(self, data: NoteCreate) -> Dict[str, Any]:
        # Column names follow the document shape (camelCase createdAt)
        return data.to_document()

    def _dump_update(self, data: NoteUpdate) -> Dict[str, Any]:
        return data.to_document()

    async def find_all_newest_first(self) -> List[Note]:
        """All notes ordered by creation time, newest first"""
        return await self.find_all(order_by=CREATED_AT_COLUMN, desc=True)
