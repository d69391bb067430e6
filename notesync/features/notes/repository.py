"""Supabase-backed note store (Postgres rows + Realtime change feed)"""

import asyncio
import logging
from contextlib import suppress
from typing import Awaitable, Callable, List, Optional, Union
from uuid import uuid4

from realtime import RealtimePostgresChangesListenEvent, RealtimeSubscribeStates
from supabase import AsyncClient  # type: ignore

from notesync.config import Settings, get_settings
from notesync.features.notes.errors import StoreError, SubscriptionError
from notesync.features.notes.store import NoteStore, NoteSubscription
from notesync.infra.supabase.client import get_supabase_client
from notesync.infra.supabase.repositories import NoteRepository, RepositoryFactory
from notesync.models.note import Note, NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)

_CLOSED = object()


class SupabaseNoteSubscription(NoteSubscription):
    """Snapshot stream built from a Realtime postgres_changes channel.

    Every change event marks the collection dirty; a single refresher task
    re-reads the whole table after each mark, so snapshots come out in order
    and bursts of events coalesce into one read.
    """

    def __init__(self, client: AsyncClient, repository: NoteRepository, topic: str):
        self._client = client
        self._repository = repository
        self._topic = topic
        self._channel = None
        self._snapshots: asyncio.Queue = asyncio.Queue()
        self._dirty = asyncio.Event()
        self._refresher: Optional[asyncio.Task] = None
        self._closed = False

    async def open(self) -> None:
        self._channel = self._client.channel(self._topic)
        self._channel.on_postgres_changes(
            RealtimePostgresChangesListenEvent.All,
            callback=self._on_change,
            schema="public",
            table=self._repository.table_name,
        )
        await self._channel.subscribe(self._on_state)

        # Initial snapshot
        self._dirty.set()
        self._refresher = asyncio.create_task(self._refresh_loop())
        logger.info(f"Subscribed to {self._repository.table_name} on channel {self._topic}")

    def _on_change(self, payload) -> None:
        logger.debug(f"Change on {self._topic}: {payload}")
        self._dirty.set()

    def _on_state(self, state: RealtimeSubscribeStates, error: Optional[Exception]) -> None:
        if state in (RealtimeSubscribeStates.CHANNEL_ERROR, RealtimeSubscribeStates.TIMED_OUT):
            logger.error(f"Realtime channel {self._topic} failed: {state.value} {error}")
            self._fail(SubscriptionError(f"Realtime channel {state.value}: {error}"))

    def _fail(self, error: SubscriptionError) -> None:
        if not self._closed:
            self._snapshots.put_nowait(error)

    async def _refresh_loop(self) -> None:
        while True:
            await self._dirty.wait()
            self._dirty.clear()
            try:
                notes = await self._repository.find_all_newest_first()
            except Exception as e:
                logger.error(f"Error loading notes snapshot: {e}")
                self._fail(SubscriptionError(f"Failed to load notes: {e}"))
                return
            self._snapshots.put_nowait(notes)

    async def __anext__(self) -> List[Note]:
        if self._closed:
            raise StopAsyncIteration

        item: Union[List[Note], SubscriptionError, object] = await self._snapshots.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, SubscriptionError):
            raise item
        return item

    async def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True

        if self._refresher is not None:
            self._refresher.cancel()
            with suppress(asyncio.CancelledError):
                await self._refresher

        if self._channel is not None:
            await self._client.remove_channel(self._channel)

        self._snapshots.put_nowait(_CLOSED)
        logger.info(f"Unsubscribed from channel {self._topic}")


class SupabaseNoteStore(NoteStore):
    """NoteStore over the Supabase notes table"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Callable[[], Awaitable[AsyncClient]] = get_supabase_client,
    ):
        self._settings = settings or get_settings()
        self._client_factory = client_factory

    async def _repositories(self) -> RepositoryFactory:
        client = await self._client_factory()
        return RepositoryFactory(client, self._settings.notes_table)

    async def subscribe(self) -> SupabaseNoteSubscription:
        subscription = None
        try:
            client = await self._client_factory()
            repository = RepositoryFactory(client, self._settings.notes_table).notes
            subscription = SupabaseNoteSubscription(
                client,
                repository,
                topic=f"{repository.table_name}-{uuid4().hex[:8]}",
            )
            await subscription.open()
            return subscription
        except Exception as e:
            logger.error(f"Error subscribing to notes: {e}")
            if subscription is not None:
                await subscription.unsubscribe()
            raise SubscriptionError(f"Could not subscribe to notes: {e}") from e

    async def create(self, data: NoteCreate) -> str:
        try:
            repositories = await self._repositories()
            note = await repositories.notes.create(data)
        except Exception as e:
            logger.error(f"Error creating note: {e}")
            raise StoreError("create note", str(e)) from e

        logger.info(f"Note created: {note.id}")
        return note.id

    async def update(self, note_id: str, data: NoteUpdate) -> None:
        try:
            repositories = await self._repositories()
            updated = await repositories.notes.update(note_id, data)
        except Exception as e:
            logger.error(f"Error updating note {note_id}: {e}")
            raise StoreError("update note", str(e)) from e

        if updated is None:
            raise StoreError("update note", f"note {note_id} does not exist")

    async def delete(self, note_id: str) -> None:
        try:
            repositories = await self._repositories()
            deleted = await repositories.notes.delete(note_id)
        except Exception as e:
            logger.error(f"Error deleting note {note_id}: {e}")
            raise StoreError("delete note", str(e)) from e

        if not deleted:
            logger.info(f"Delete of note {note_id} matched no rows")
