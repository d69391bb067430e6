"""Tests for the debounced edit commit"""

import asyncio

import pytest

from notesync.features.notes.debouncer import EditDebouncer
from notesync.features.notes.domain import EditBuffer, EditField
from tests.conftest import make_note

DELAY = 0.05


class RecordingCommit:
    def __init__(self, delay: float = 0.0):
        self.calls = []
        self.delay = delay

    async def __call__(self, note_id, changes):
        if self.delay:
            await asyncio.sleep(self.delay)
        self.calls.append((note_id, dict(changes)))


@pytest.fixture
def confirmed():
    return make_note("n1", "Title", "Body")


class TestEditDebouncer:
    @pytest.mark.asyncio
    async def test_rapid_edits_coalesce_into_one_commit(self, confirmed):
        commit = RecordingCommit()
        debouncer = EditDebouncer(commit, DELAY)
        buffer = EditBuffer.for_note(confirmed)

        for text in ["T", "Ti", "Tit", "Titl", "Title!"]:
            buffer = buffer.with_keystroke(EditField.TITLE, text)
            debouncer.reschedule(buffer, confirmed)
            await asyncio.sleep(DELAY / 5)

        assert commit.calls == []
        await asyncio.sleep(DELAY * 3)
        assert commit.calls == [("n1", {EditField.TITLE: "Title!"})]

    @pytest.mark.asyncio
    async def test_both_fields_in_one_commit(self, confirmed):
        commit = RecordingCommit()
        debouncer = EditDebouncer(commit, DELAY)
        buffer = (
            EditBuffer.for_note(confirmed)
            .with_keystroke(EditField.TITLE, "New")
            .with_keystroke(EditField.CONTENT, "Text")
        )

        assert debouncer.reschedule(buffer, confirmed)
        await asyncio.sleep(DELAY * 3)
        assert commit.calls == [("n1", {EditField.TITLE: "New", EditField.CONTENT: "Text"})]

    @pytest.mark.asyncio
    async def test_nothing_scheduled_without_changes(self, confirmed):
        debouncer = EditDebouncer(RecordingCommit(), DELAY)
        assert not debouncer.reschedule(EditBuffer.for_note(confirmed), confirmed)
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_composition_suppresses_scheduling(self, confirmed):
        commit = RecordingCommit()
        debouncer = EditDebouncer(commit, DELAY)
        buffer = EditBuffer.for_note(confirmed).with_keystroke(EditField.TITLE, "ㅎ")
        debouncer.reschedule(buffer, confirmed)

        # Starting a composition drops the pending commit
        assert not debouncer.reschedule(buffer.with_composition_started(), confirmed)
        await asyncio.sleep(DELAY * 3)
        assert commit.calls == []

    @pytest.mark.asyncio
    async def test_buffer_for_other_note_is_not_committed(self, confirmed):
        debouncer = EditDebouncer(RecordingCommit(), DELAY)
        other = make_note("n2", "x", "y")
        buffer = EditBuffer.for_note(other).with_keystroke(EditField.TITLE, "changed")
        assert not debouncer.reschedule(buffer, confirmed)
        assert not debouncer.reschedule(buffer, None)

    @pytest.mark.asyncio
    async def test_cancel_and_drain(self, confirmed):
        commit = RecordingCommit(delay=DELAY * 4)
        debouncer = EditDebouncer(commit, DELAY)
        buffer = EditBuffer.for_note(confirmed).with_keystroke(EditField.CONTENT, "draft")

        debouncer.reschedule(buffer, confirmed)
        debouncer.cancel()
        await asyncio.sleep(DELAY * 2)
        assert commit.calls == []

        debouncer.reschedule(buffer, confirmed)
        await asyncio.sleep(DELAY * 1.5)
        # Commit has started but not finished
        assert commit.calls == []
        await debouncer.drain()
        assert commit.calls == [("n1", {EditField.CONTENT: "draft"})]
