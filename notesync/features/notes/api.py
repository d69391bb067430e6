"""Live notes WebSocket endpoint"""

import asyncio
import logging
from contextlib import suppress
from typing import Awaitable, Set, Union

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from notesync.config import Settings, get_settings
from notesync.features.notes.errors import NoteNotFoundError
from notesync.features.notes.live_view import LiveView
from notesync.features.notes.repository import SupabaseNoteStore
from notesync.features.notes.schemas import AlertMessage, ClientEvent, EventType, StateMessage
from notesync.features.notes.service import INVALID_EVENT, NOTE_NOT_FOUND, NoteViewController
from notesync.features.notes.store import NoteStore

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/notes", tags=["notes"])

_STATE = object()


def get_note_store(settings: Settings = Depends(get_settings)) -> NoteStore:
    return SupabaseNoteStore(settings)


class NoteSession:
    """
    One connected client: a controller, its live view, and an outbox.

    State pushes are coalesced: however many changes happen before the
    sender wakes up, the client gets one state message with the latest view.
    """

    def __init__(self, websocket: WebSocket, store: NoteStore, settings: Settings):
        self._websocket = websocket
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._state_queued = False
        self._actions: Set[asyncio.Task] = set()
        self.controller = NoteViewController(
            store,
            alert=self._push_alert,
            on_change=self._push_state,
            commit_delay=settings.commit_delay,
            typing_idle=settings.typing_idle,
        )
        self.live_view = LiveView(store, self.controller)

    def _push_state(self) -> None:
        if not self._state_queued:
            self._state_queued = True
            self._outbox.put_nowait(_STATE)

    def _push_alert(self, message: str) -> None:
        self._outbox.put_nowait(AlertMessage(message=message))

    async def _send_loop(self) -> None:
        while True:
            item: Union[AlertMessage, object] = await self._outbox.get()
            if item is _STATE:
                self._state_queued = False
                message = StateMessage(state=self.controller.view_state())
            else:
                message = item
            try:
                await self._websocket.send_json(message.model_dump(mode="json"))
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug(f"Stopped sending to closed socket: {e}")
                return

    def _spawn(self, action: Awaitable) -> None:
        task = asyncio.ensure_future(action)
        self._actions.add(task)
        task.add_done_callback(self._actions.discard)

    async def dispatch(self, event: ClientEvent) -> None:
        controller = self.controller

        if event.type == EventType.SELECT:
            controller.select_note(event.note_id)
        elif event.type == EventType.CREATE:
            self._spawn(controller.create_note())
        elif event.type == EventType.DELETE:
            self._spawn(controller.delete_note(event.note_id))
        elif event.type == EventType.EDIT:
            controller.edit(event.field, event.value)
        elif event.type == EventType.COMPOSITION_START:
            controller.start_composition()
        elif event.type == EventType.COMPOSITION_END:
            controller.end_composition(event.field, event.value)
        elif event.type == EventType.NEW_TODO_TEXT:
            controller.set_new_todo(event.value)
        elif event.type == EventType.ADD_TODO:
            self._spawn(controller.add_todo())
        elif event.type == EventType.TOGGLE_TODO:
            self._spawn(controller.toggle_todo(event.todo_id))
        elif event.type == EventType.DELETE_TODO:
            self._spawn(controller.delete_todo(event.todo_id))
        elif event.type == EventType.SEARCH:
            controller.set_search_term(event.value)
        elif event.type == EventType.RELOAD:
            await self.live_view.reload()

    async def run(self) -> None:
        sender = asyncio.create_task(self._send_loop())
        try:
            async with self.live_view:
                self._push_state()
                while True:
                    raw = await self._websocket.receive_text()
                    try:
                        event = ClientEvent.model_validate_json(raw)
                    except ValidationError as e:
                        logger.info(f"Rejected event: {e.errors()[0]['msg']}")
                        self._push_alert(f"{INVALID_EVENT}: {e.errors()[0]['msg']}")
                        continue

                    try:
                        await self.dispatch(event)
                    except NoteNotFoundError as e:
                        logger.info(str(e))
                        self._push_alert(NOTE_NOT_FOUND)
        except WebSocketDisconnect:
            logger.info("Notes session disconnected")
        finally:
            if self._actions:
                await asyncio.wait(set(self._actions))
            await self.controller.close()
            sender.cancel()
            with suppress(asyncio.CancelledError):
                await sender


@router.websocket("/live")
async def live_notes(
    websocket: WebSocket,
    store: NoteStore = Depends(get_note_store),
    settings: Settings = Depends(get_settings),
):
    """
    Live notes session.

    Sends a `state` message whenever the view changes and an `alert`
    message for every failed action. Accepts ClientEvent JSON objects.
    """
    await websocket.accept()
    session = NoteSession(websocket, store, settings)
    await session.run()
