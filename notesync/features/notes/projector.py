"""Search and time-grouping of the note list.

Everything here except `NoteListProjector` is a pure function of
(notes, search term, now).
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from notesync.features.notes.domain import (
    NOTE_GROUP_ORDER,
    NoteGroup,
    NoteGroupLabel,
    NoteListItem,
)
from notesync.models.note import Note
from notesync.utils.datetime_helper import (
    calendar_days_between,
    format_preview_timestamp,
    parse_iso,
)

UNTITLED = "제목 없음"
NO_CONTENT = "내용 없음"


def matches_search(note: Note, term: str) -> bool:
    """term must already be stripped and lower-cased"""
    base = f"{note.title or ''} {note.content or ''}".lower()
    if term in base:
        return True
    return any(term in todo.text.lower() for todo in note.todos)


def filter_notes(notes: Sequence[Note], search_term: str) -> List[Note]:
    term = (search_term or "").strip().lower()
    if not term:
        return list(notes)
    return [note for note in notes if matches_search(note, term)]


def note_group(created_at: str, now: datetime) -> NoteGroupLabel:
    created = parse_iso(created_at)
    if created is None:
        return NoteGroupLabel.OLDER

    diff_days = calendar_days_between(created, now)

    if diff_days <= 0:
        return NoteGroupLabel.TODAY
    if diff_days == 1:
        return NoteGroupLabel.YESTERDAY
    if diff_days <= 7:
        return NoteGroupLabel.LAST_7_DAYS
    if diff_days <= 30:
        return NoteGroupLabel.LAST_30_DAYS
    return NoteGroupLabel.OLDER


def _newest_first_key(note: Note) -> Tuple[int, float]:
    created = parse_iso(note.created_at)
    if created is None:
        return (1, 0.0)
    # Naive timestamps compare as local time
    return (0, -created.timestamp())


def group_notes(notes: Sequence[Note], now: datetime) -> List[Tuple[NoteGroupLabel, List[Note]]]:
    """Partition notes into the fixed buckets, newest first, empty buckets dropped"""
    buckets: Dict[NoteGroupLabel, List[Note]] = {label: [] for label in NOTE_GROUP_ORDER}

    for note in notes:
        buckets[note_group(note.created_at, now)].append(note)

    return [
        (label, sorted(buckets[label], key=_newest_first_key))
        for label in NOTE_GROUP_ORDER
        if buckets[label]
    ]


def to_list_item(note: Note, now: datetime, selected_id: Optional[str] = None) -> NoteListItem:
    return NoteListItem(
        id=note.id,
        title=note.title or UNTITLED,
        preview=note.content or NO_CONTENT,
        timestamp=format_preview_timestamp(note.created_at, now),
        todo_count=len(note.todos),
        completed_count=note.completed_count(),
        active=note.id == selected_id,
    )


def project_note_list(
    notes: Sequence[Note],
    search_term: str,
    now: datetime,
    selected_id: Optional[str] = None,
) -> List[NoteGroup]:
    """Filtered, grouped list view of a snapshot"""
    return [
        NoteGroup(
            label=label,
            title=label.display_name,
            notes=[to_list_item(note, now, selected_id) for note in members],
        )
        for label, members in group_notes(filter_notes(notes, search_term), now)
    ]


class NoteListProjector:
    """Memoizes `project_note_list` for the most recent inputs.

    Snapshots are replaced, never mutated, so the list identity stands in
    for its contents. The key also carries the calendar date, so buckets
    roll over at midnight.
    """

    def __init__(self):
        self._notes: Optional[Sequence[Note]] = None
        self._key = None
        self._groups: List[NoteGroup] = []

    def project(
        self,
        notes: Sequence[Note],
        search_term: str,
        now: datetime,
        selected_id: Optional[str] = None,
    ) -> List[NoteGroup]:
        key = ((search_term or "").strip().lower(), now.date(), selected_id)
        if notes is not self._notes or key != self._key:
            self._groups = project_note_list(notes, search_term, now, selected_id)
            self._notes = notes
            self._key = key
        return self._groups
