"""Domain models for the application"""
from .note import Note, NoteCreate, NoteUpdate, Todo

__all__ = [
    'Note', 'NoteCreate', 'NoteUpdate', 'Todo',
]
