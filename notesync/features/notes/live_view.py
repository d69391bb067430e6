"""Live view: the subscription owned by one mounted notes screen"""

import asyncio
import logging
from contextlib import suppress
from typing import Optional

from notesync.features.notes.errors import SubscriptionError
from notesync.features.notes.service import NoteViewController
from notesync.features.notes.store import NoteStore, NoteSubscription

logger = logging.getLogger(__name__)


class LiveView:
    """
    Feeds store snapshots into a controller for as long as the view is open.

    Use as an async context manager; the subscription is released on every
    exit path. A subscription that cannot be opened or that breaks puts the
    controller into its error state instead of raising, so the session can
    still offer reload and create-note.
    """

    def __init__(self, store: NoteStore, controller: NoteViewController):
        self._store = store
        self._controller = controller
        self._subscription: Optional[NoteSubscription] = None
        self._pump_task: Optional[asyncio.Task] = None

    @property
    def active(self) -> bool:
        return self._pump_task is not None and not self._pump_task.done()

    async def open(self) -> None:
        try:
            self._subscription = await self._store.subscribe()
        except SubscriptionError as e:
            self._controller.handle_subscription_error(e)
            return

        self._pump_task = asyncio.create_task(self._pump(self._subscription))

    async def _pump(self, subscription: NoteSubscription) -> None:
        try:
            async for snapshot in subscription:
                self._controller.handle_snapshot(snapshot)
        except SubscriptionError as e:
            self._controller.handle_subscription_error(e)
        except Exception as e:
            logger.exception(f"Unexpected error in notes subscription: {e}")
            self._controller.handle_subscription_error(e)

    async def close(self) -> None:
        pump_task, self._pump_task = self._pump_task, None
        subscription, self._subscription = self._subscription, None

        try:
            if pump_task is not None:
                pump_task.cancel()
                with suppress(asyncio.CancelledError):
                    await pump_task
        finally:
            if subscription is not None:
                await subscription.unsubscribe()

    async def reload(self) -> None:
        """Drop the current subscription and open a fresh one"""
        await self.close()
        self._controller.begin_loading()
        await self.open()

    async def __aenter__(self) -> "LiveView":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
