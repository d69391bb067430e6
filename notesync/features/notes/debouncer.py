"""Debounced commit of title/content edits"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Set

from notesync.features.notes.domain import EditBuffer, EditField
from notesync.models.note import Note

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_DELAY_SECONDS = 0.5

CommitFn = Callable[[str, Dict[EditField, str]], Awaitable[None]]


class EditDebouncer:
    """
    Commits buffered edits once the buffer has been quiet for `delay` seconds.

    `reschedule` is called after every change to the buffer or to the
    confirmed note. It always drops the pending commit first, so at most one
    commit is ever waiting, carrying the values captured by the most recent
    call.
    """

    def __init__(self, commit: CommitFn, delay: float = DEFAULT_COMMIT_DELAY_SECONDS):
        self._commit = commit
        self._delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def reschedule(self, buffer: EditBuffer, confirmed: Optional[Note]) -> bool:
        """
        Restart the quiet window for the current buffer.

        Returns:
            True if a commit is now scheduled
        """
        self.cancel()

        if confirmed is None or buffer.composing or buffer.note_id != confirmed.id:
            return False

        changes = buffer.pending_changes(confirmed)
        if not changes:
            return False

        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire, confirmed.id, changes)
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, note_id: str, changes: Dict[EditField, str]) -> None:
        self._handle = None
        logger.debug(f"Committing {sorted(f.value for f in changes)} for note {note_id}")
        task = asyncio.create_task(self._commit(note_id, changes))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def drain(self) -> None:
        """Wait for commits that already started"""
        if self._in_flight:
            await asyncio.wait(set(self._in_flight))
