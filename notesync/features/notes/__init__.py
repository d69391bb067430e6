"""Notes feature module"""

from notesync.features.notes.api import router
from notesync.features.notes.domain import EditBuffer, EditField, NoteGroupLabel, ViewState
from notesync.features.notes.errors import (
    NoteNotFoundError,
    NoteSyncError,
    StoreError,
    SubscriptionError,
)
from notesync.features.notes.live_view import LiveView
from notesync.features.notes.repository import SupabaseNoteStore
from notesync.features.notes.service import NoteViewController
from notesync.features.notes.store import NoteStore, NoteSubscription

__all__ = [
    "router",
    "EditBuffer",
    "EditField",
    "NoteGroupLabel",
    "ViewState",
    "NoteNotFoundError",
    "NoteSyncError",
    "StoreError",
    "SubscriptionError",
    "LiveView",
    "SupabaseNoteStore",
    "NoteViewController",
    "NoteStore",
    "NoteSubscription",
]
