"""View controller for the notes screen"""

import logging
import time
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from notesync.features.notes.debouncer import DEFAULT_COMMIT_DELAY_SECONDS, EditDebouncer
from notesync.features.notes.domain import EditBuffer, EditField, NoteDetail, ViewState
from notesync.features.notes.errors import NoteNotFoundError
from notesync.features.notes.guard import DEFAULT_TYPING_IDLE_SECONDS, TypingGuard
from notesync.features.notes.projector import NoteListProjector
from notesync.features.notes.store import NoteStore
from notesync.models.note import Note, NoteCreate, NoteUpdate, Todo
from notesync.utils.datetime_helper import format_detail_timestamp, now_iso

logger = logging.getLogger(__name__)

NEW_NOTE_TITLE = "새 메모"

LOAD_FAILED = "메모를 불러오는 중 문제가 발생했습니다. 연결 설정과 notes 테이블을 확인한 뒤 다시 불러오세요."
CREATE_FAILED = "메모 생성에 실패했습니다."
UPDATE_FAILED = "메모 업데이트에 실패했습니다."
DELETE_FAILED = "메모 삭제에 실패했습니다."
ADD_TODO_FAILED = "투두 추가에 실패했습니다."
TOGGLE_TODO_FAILED = "투두 업데이트에 실패했습니다."
DELETE_TODO_FAILED = "투두 삭제에 실패했습니다."
NOTE_NOT_FOUND = "메모를 찾을 수 없습니다."
INVALID_EVENT = "잘못된 요청입니다"


def generate_todo_id(existing_ids: Iterable[str]) -> str:
    """Millisecond timestamp id, bumped until unique within the note"""
    taken = set(existing_ids)
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def _log_alert(message: str) -> None:
    logger.warning(f"Alert: {message}")


class NoteViewController:
    """
    Keeps one user's view of the notes consistent with the live snapshot.

    Selection is either nothing or one note id. The selected note (`selected`)
    is the cached, confirmed copy; what the user is typing lives in `buffer`
    until the debouncer commits it. Store failures are logged and reported
    through `alert`; local state is left as it was so the user can retry.
    `on_change` is called after every state change.
    """

    def __init__(
        self,
        store: NoteStore,
        alert: Optional[Callable[[str], None]] = None,
        on_change: Optional[Callable[[], None]] = None,
        commit_delay: float = DEFAULT_COMMIT_DELAY_SECONDS,
        typing_idle: float = DEFAULT_TYPING_IDLE_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._alert = alert or _log_alert
        self._on_change = on_change
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._guard = TypingGuard(typing_idle, on_idle=self._on_typing_idle)
        self._debouncer = EditDebouncer(self._commit_fields, commit_delay)
        self._projector = NoteListProjector()

        self._notes: List[Note] = []
        self._selected: Optional[Note] = None
        self._buffer = EditBuffer()
        self._new_todo = ""
        self._search_term = ""
        self._loading = True
        self._error_message: Optional[str] = None

    # State

    @property
    def notes(self) -> List[Note]:
        return self._notes

    @property
    def selected(self) -> Optional[Note]:
        return self._selected

    @property
    def buffer(self) -> EditBuffer:
        return self._buffer

    @property
    def new_todo(self) -> str:
        return self._new_todo

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    @property
    def commit_pending(self) -> bool:
        return self._debouncer.pending

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _find(self, note_id: str) -> Optional[Note]:
        return next((note for note in self._notes if note.id == note_id), None)

    def _set_selection(self, note: Optional[Note]) -> None:
        self._selected = note
        self._buffer = EditBuffer.for_note(note)
        self._new_todo = ""
        self._guard.cancel()
        self._reschedule_commit()

    def _reschedule_commit(self) -> None:
        self._debouncer.reschedule(self._buffer, self._selected)

    # Subscription events

    def handle_snapshot(self, notes: Sequence[Note]) -> None:
        """Make the delivered snapshot the authoritative note list"""
        self._notes = list(notes)
        self._loading = False
        self._error_message = None

        if not self._notes:
            self._set_selection(None)
        else:
            current = self._find(self._selected.id) if self._selected else None
            if current is not None:
                self._selected = current
                self._buffer = self._guard.reconcile(self._buffer, current)
                self._reschedule_commit()
            else:
                self._set_selection(self._notes[0])

        self._changed()

    def handle_subscription_error(self, error: Exception) -> None:
        logger.error(f"Notes subscription failed: {error}")
        self._loading = False
        self._error_message = LOAD_FAILED
        self._changed()

    def begin_loading(self) -> None:
        """Back to the loading state ahead of a fresh subscription"""
        self._loading = True
        self._error_message = None
        self._changed()

    # Selection

    def select_note(self, note_id: str) -> Note:
        note = self._find(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)

        self._set_selection(note)
        self._changed()
        return note

    async def create_note(self) -> Optional[str]:
        """Create an empty note and select it; returns its id, or None on failure"""
        data = NoteCreate(title=NEW_NOTE_TITLE, content="", todos=[], created_at=now_iso())

        try:
            note_id = await self._store.create(data)
        except Exception as e:
            logger.error(f"Error creating note: {e}")
            self._alert(CREATE_FAILED)
            return None

        self._set_selection(Note(id=note_id, **data.model_dump()))
        self._changed()
        return note_id

    async def delete_note(self, note_id: str) -> bool:
        try:
            await self._store.delete(note_id)
        except Exception as e:
            logger.error(f"Error deleting note {note_id}: {e}")
            self._alert(DELETE_FAILED)
            return False

        if self._selected is not None and self._selected.id == note_id:
            remaining = [note for note in self._notes if note.id != note_id]
            self._set_selection(remaining[0] if remaining else None)

        self._changed()
        return True

    # Title / content input

    def edit(self, field: EditField, value: str) -> None:
        if self._selected is None:
            return
        self._buffer = self._buffer.with_keystroke(field, value)
        self._guard.keystroke()
        self._reschedule_commit()
        self._changed()

    def start_composition(self) -> None:
        if self._selected is None:
            return
        self._buffer = self._buffer.with_composition_started()
        self._guard.cancel()
        self._reschedule_commit()
        self._changed()

    def end_composition(self, field: EditField, value: str) -> None:
        if self._selected is None:
            return
        self._buffer = self._buffer.with_composition_ended(field, value)
        self._guard.keystroke()
        self._reschedule_commit()
        self._changed()

    def _on_typing_idle(self) -> None:
        self._buffer = self._buffer.with_typing_elapsed()
        self._changed()

    async def _commit_fields(self, note_id: str, changes: Dict[EditField, str]) -> None:
        confirmed = False
        for field, value in changes.items():
            try:
                await self._store.update(note_id, NoteUpdate(**{field.value: value}))
            except Exception as e:
                logger.error(f"Error updating {field.value} of note {note_id}: {e}")
                self._alert(UPDATE_FAILED)
                continue

            logger.info(f"Committed {field.value} of note {note_id}")
            if self._selected is not None and self._selected.id == note_id:
                self._selected = self._selected.model_copy(update={field.value: value})
                confirmed = True

        if confirmed:
            self._reschedule_commit()
            self._changed()

    # Checklist

    def set_new_todo(self, text: str) -> None:
        self._new_todo = text
        self._changed()

    async def _write_todos(self, note_id: str, todos: List[Todo], failure_message: str) -> bool:
        """Replace the whole checklist of the selected note in one update.

        The new list goes into the cached note before the write, so a second
        checklist action started meanwhile builds on it. A failed write is not
        rolled back; the next snapshot brings the stored list back.
        """
        self._selected = self._selected.model_copy(update={"todos": todos})
        self._changed()

        try:
            await self._store.update(note_id, NoteUpdate(todos=todos))
        except Exception as e:
            logger.error(f"Error writing checklist of note {note_id}: {e}")
            self._alert(failure_message)
            return False
        return True

    async def add_todo(self) -> Optional[Todo]:
        entry = self._new_todo
        text = entry.strip()
        note = self._selected
        if not text or note is None:
            return None

        todo = Todo(id=generate_todo_id(note.todo_ids()), text=text, completed=False)
        if not await self._write_todos(note.id, [*note.todos, todo], ADD_TODO_FAILED):
            return None

        # Entry text typed after this add started is kept
        if self._selected is not None and self._selected.id == note.id and self._new_todo == entry:
            self._new_todo = ""
            self._changed()
        return todo

    async def toggle_todo(self, todo_id: str) -> bool:
        note = self._selected
        if note is None:
            return False

        todos = [
            todo.model_copy(update={"completed": not todo.completed}) if todo.id == todo_id else todo
            for todo in note.todos
        ]
        return await self._write_todos(note.id, todos, TOGGLE_TODO_FAILED)

    async def delete_todo(self, todo_id: str) -> bool:
        note = self._selected
        if note is None:
            return False

        todos = [todo for todo in note.todos if todo.id != todo_id]
        return await self._write_todos(note.id, todos, DELETE_TODO_FAILED)

    # List

    def set_search_term(self, term: str) -> None:
        self._search_term = term
        self._changed()

    def view_state(self) -> ViewState:
        now = self._clock()
        selected = self._selected

        detail = None
        if selected is not None:
            detail = NoteDetail(
                id=selected.id,
                title=self._buffer.title,
                content=self._buffer.content,
                created_at=selected.created_at,
                timestamp=format_detail_timestamp(selected.created_at, now),
                todos=selected.todos,
                todo_count=len(selected.todos),
                completed_count=selected.completed_count(),
            )

        return ViewState(
            loading=self._loading,
            error_message=self._error_message,
            total_count=len(self._notes),
            search_term=self._search_term,
            groups=self._projector.project(
                self._notes, self._search_term, now, selected.id if selected else None
            ),
            selected=detail,
            new_todo=self._new_todo,
            composing=self._buffer.composing,
            typing=self._buffer.typing,
        )

    async def close(self) -> None:
        """Stop timers and wait for commits already in flight"""
        self._guard.cancel()
        self._debouncer.cancel()
        await self._debouncer.drain()
