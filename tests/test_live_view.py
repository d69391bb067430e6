"""Tests for the live view subscription lifecycle"""

import asyncio

import pytest

from notesync.features.notes.errors import SubscriptionError
from notesync.features.notes.live_view import LiveView
from notesync.features.notes.service import LOAD_FAILED
from tests.conftest import FakeNoteStore, make_note


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


class TestLiveView:
    @pytest.mark.asyncio
    async def test_snapshots_flow_into_controller(self, controller, store):
        async with LiveView(store, controller) as view:
            await settle()
            assert view.active
            assert controller.selected.id == "c"

            store.notes["d"] = make_note("d", "Newest", created_at=None)
            store.publish()
            await settle()
            assert [note.id for note in controller.notes][0] in {"c", "d"}
            assert len(controller.notes) == 4

        assert store.subscriptions[0].unsubscribed
        assert not view.active

    @pytest.mark.asyncio
    async def test_released_when_body_raises(self, controller, store):
        with pytest.raises(RuntimeError):
            async with LiveView(store, controller):
                await settle()
                raise RuntimeError("session crashed")

        assert store.subscriptions[0].unsubscribed

    @pytest.mark.asyncio
    async def test_subscribe_failure_enters_error_state(self, controller, store, subscription_error):
        store.subscribe_error = subscription_error

        async with LiveView(store, controller) as view:
            assert not view.active
            assert controller.error_message == LOAD_FAILED
            assert not controller.loading

    @pytest.mark.asyncio
    async def test_broken_stream_enters_error_state(self, controller, store):
        async with LiveView(store, controller):
            await settle()
            store.subscriptions[0].fail(SubscriptionError("channel closed"))
            await settle()
            assert controller.error_message == LOAD_FAILED

    @pytest.mark.asyncio
    async def test_reload_recovers(self, controller, store, subscription_error):
        store.subscribe_error = subscription_error

        async with LiveView(store, controller) as view:
            assert controller.error_message == LOAD_FAILED

            store.subscribe_error = None
            await view.reload()
            await settle()

            assert view.active
            assert controller.error_message is None
            assert controller.selected.id == "c"

        assert all(sub.unsubscribed for sub in store.subscriptions)

    @pytest.mark.asyncio
    async def test_reload_releases_previous_subscription(self, controller, store):
        async with LiveView(store, controller) as view:
            await settle()
            await view.reload()
            await settle()
            assert store.subscriptions[0].unsubscribed
            assert not store.subscriptions[1].unsubscribed

    @pytest.mark.asyncio
    async def test_own_write_echo_round_trip(self, alerts):
        from notesync.features.notes.domain import EditField
        from notesync.features.notes.service import NoteViewController

        store = FakeNoteStore([make_note("n1", "Title", "Body")], auto_publish=True)
        controller = NoteViewController(store, alert=alerts.append, commit_delay=0.02, typing_idle=0.2)

        async with LiveView(store, controller):
            await settle()
            controller.edit(EditField.CONTENT, "Body text")
            # The echo of our own write lands while still typing
            await asyncio.sleep(0.08)
            assert store.notes["n1"].content == "Body text"
            assert controller.buffer.content == "Body text"
            assert controller.selected.content == "Body text"

        await controller.close()
        assert alerts == []
