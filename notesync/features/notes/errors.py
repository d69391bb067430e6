"""Errors raised by the notes feature"""


class NoteSyncError(Exception):
    """Base error for note synchronization"""


class SubscriptionError(NoteSyncError):
    """The live snapshot subscription could not be established or broke.

    Fatal to the view: it switches to the error state until reloaded.
    """


class StoreError(NoteSyncError):
    """A single create/update/delete call against the store failed"""

    def __init__(self, action: str, detail: str):
        self.action = action
        self.detail = detail
        super().__init__(f"Failed to {action}: {detail}")


class NoteNotFoundError(NoteSyncError, ValueError):
    """No note with the given id in the current snapshot"""

    def __init__(self, note_id: str):
        self.note_id = note_id
        super().__init__(f"Note {note_id} not found")
