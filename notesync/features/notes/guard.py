"""Typing-suppression guard"""

import asyncio
import logging
from typing import Callable, Optional

from notesync.features.notes.domain import EditBuffer
from notesync.models.note import Note

logger = logging.getLogger(__name__)

DEFAULT_TYPING_IDLE_SECONDS = 0.8


class TypingGuard:
    """
    Keeps snapshots from overwriting fields the user is typing into.

    The `typing` flag itself lives on the EditBuffer; this class owns the
    idle timer that clears it. Every keystroke restarts the timer, and when
    it fires `on_idle` is called so the owner can apply
    `EditBuffer.with_typing_elapsed()`.
    """

    def __init__(
        self,
        idle_seconds: float = DEFAULT_TYPING_IDLE_SECONDS,
        on_idle: Optional[Callable[[], None]] = None,
    ):
        self._idle_seconds = idle_seconds
        self._on_idle = on_idle
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def keystroke(self) -> None:
        """Restart the idle window"""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._idle_seconds, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        if self._on_idle is not None:
            self._on_idle()

    @staticmethod
    def reconcile(buffer: EditBuffer, note: Note) -> EditBuffer:
        """Apply a snapshot of the selected note to the buffer if allowed"""
        if not buffer.accepts_snapshot:
            logger.debug(
                f"Snapshot for note {note.id} not applied "
                f"(composing={buffer.composing}, typing={buffer.typing})"
            )
            return buffer
        return buffer.with_snapshot(note)
