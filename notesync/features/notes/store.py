"""Remote note store interface used by the view controller"""
from abc import ABC, abstractmethod
from typing import AsyncIterator, List

from notesync.models.note import Note, NoteCreate, NoteUpdate


class NoteSubscription(ABC):
    """Push-based, ordered stream of full-collection snapshots.

    Iterating yields one list of notes (newest first) per change in the
    collection. Iteration ends after `unsubscribe()`; a broken stream raises
    `SubscriptionError` from the iterator.
    """

    def __aiter__(self) -> AsyncIterator[List[Note]]:
        return self

    @abstractmethod
    async def __anext__(self) -> List[Note]:
        ...

    @abstractmethod
    async def unsubscribe(self) -> None:
        """Stop delivery and release the underlying channel. Idempotent."""


class NoteStore(ABC):
    """Create/update/delete of single notes plus the snapshot subscription"""

    @abstractmethod
    async def subscribe(self) -> NoteSubscription:
        """Open a snapshot subscription ordered by createdAt, newest first.

        Raises:
            SubscriptionError: If the subscription cannot be established
        """

    @abstractmethod
    async def create(self, data: NoteCreate) -> str:
        """Create a note and return the id assigned by the store"""

    @abstractmethod
    async def update(self, note_id: str, data: NoteUpdate) -> None:
        """Write the set fields of `data` to the note"""

    @abstractmethod
    async def delete(self, note_id: str) -> None:
        ...
