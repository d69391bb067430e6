"""Repository factory and exports"""
from supabase import AsyncClient  # type: ignore
from .notes import NoteRepository


class RepositoryFactory:
    """Factory for creating repository instances"""

    def __init__(self, client: AsyncClient, notes_table: str = "notes"):
        self._client = client
        self._notes_table = notes_table
        self._notes: NoteRepository = None

    @property
    def notes(self) -> NoteRepository:
        """Get notes repository"""
        if self._notes is None:
            self._notes = NoteRepository(self._client, self._notes_table)
        return self._notes


__all__ = [
    'RepositoryFactory',
    'NoteRepository',
]
