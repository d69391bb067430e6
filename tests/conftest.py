"""Shared fixtures: an in-memory note store and controller helpers"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from notesync.features.notes.errors import StoreError, SubscriptionError
from notesync.features.notes.service import NoteViewController
from notesync.features.notes.store import NoteStore, NoteSubscription
from notesync.models.note import Note, NoteCreate, NoteUpdate, Todo

COMMIT_DELAY = 0.05
TYPING_IDLE = 0.1

FIXED_NOW = datetime(2025, 10, 14, 15, 30, tzinfo=timezone.utc)

_CLOSED = object()


class FakeSubscription(NoteSubscription):
    """Snapshots are pushed by the test"""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self.unsubscribed = False

    def push(self, notes: List[Note]) -> None:
        self._queue.put_nowait(list(notes))

    def fail(self, error: Exception) -> None:
        self._queue.put_nowait(error)

    async def __anext__(self) -> List[Note]:
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, Exception):
            raise item
        return item

    async def unsubscribe(self) -> None:
        if not self.unsubscribed:
            self.unsubscribed = True
            self._queue.put_nowait(_CLOSED)


class FakeNoteStore(NoteStore):
    """In-memory store that records every call.

    With `auto_publish`, each successful mutation pushes a fresh snapshot to
    every open subscription, like the real change feed.
    """

    def __init__(self, notes: Optional[List[Note]] = None, auto_publish: bool = False):
        self.notes = {note.id: note for note in notes or []}
        self.auto_publish = auto_publish
        self.calls: List[tuple] = []
        self.failing: set = set()
        self.subscribe_error: Optional[Exception] = None
        self.subscriptions: List[FakeSubscription] = []
        self.latency = 0.0
        self._next_id = 1

    def snapshot(self) -> List[Note]:
        return sorted(self.notes.values(), key=lambda note: note.created_at, reverse=True)

    def publish(self) -> None:
        for subscription in self.subscriptions:
            if not subscription.unsubscribed:
                subscription.push(self.snapshot())

    async def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if self.latency:
            await asyncio.sleep(self.latency)
        if operation in self.failing:
            raise StoreError(operation, "simulated failure")

    async def subscribe(self) -> FakeSubscription:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        subscription = FakeSubscription()
        self.subscriptions.append(subscription)
        subscription.push(self.snapshot())
        return subscription

    async def create(self, data: NoteCreate) -> str:
        await self._enter("create", data)
        note_id = f"note-{self._next_id}"
        self._next_id += 1
        self.notes[note_id] = Note(id=note_id, **data.model_dump())
        if self.auto_publish:
            self.publish()
        return note_id

    async def update(self, note_id: str, data: NoteUpdate) -> None:
        await self._enter("update", note_id, data.to_document())
        changes = {name: getattr(data, name) for name in data.model_fields_set}
        self.notes[note_id] = self.notes[note_id].model_copy(update=changes)
        if self.auto_publish:
            self.publish()

    async def delete(self, note_id: str) -> None:
        await self._enter("delete", note_id)
        self.notes.pop(note_id, None)
        if self.auto_publish:
            self.publish()

    def updates(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == "update"]


def make_note(
    note_id: str,
    title: str = "",
    content: str = "",
    created_at: Optional[datetime] = None,
    todos: Optional[List[Todo]] = None,
) -> Note:
    created = created_at or FIXED_NOW
    return Note(
        id=note_id,
        title=title,
        content=content,
        todos=todos or [],
        createdAt=created.isoformat(),
    )


@pytest.fixture
def sample_notes() -> List[Note]:
    """Three notes, newest first"""
    return [
        make_note("c", "Groceries", "eggs", FIXED_NOW),
        make_note("b", "Work", "standup notes", FIXED_NOW - timedelta(hours=3)),
        make_note("a", "Ideas", "", FIXED_NOW - timedelta(days=2)),
    ]


@pytest.fixture
def store(sample_notes) -> FakeNoteStore:
    return FakeNoteStore(sample_notes)


@pytest.fixture
def alerts() -> List[str]:
    return []


@pytest.fixture
def controller(store, alerts) -> NoteViewController:
    return NoteViewController(
        store,
        alert=alerts.append,
        commit_delay=COMMIT_DELAY,
        typing_idle=TYPING_IDLE,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def subscription_error() -> SubscriptionError:
    return SubscriptionError("Could not subscribe to notes: invalid API key")
