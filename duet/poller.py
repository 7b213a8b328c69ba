"""Presence poller: report our own status and watch the partner's."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from duet.client import GateClient, GateError
from duet.config import get_settings

logger = logging.getLogger("duet")

SleepFn = Callable[[float], Awaitable[None]]


class PresencePoller:
    """Cancellable periodic task polling partner presence.

    ``start`` marks the user online, checks the partner once and schedules a
    check every ``interval`` seconds. ``stop`` cancels the schedule and marks
    the user offline. ``sleep`` is injectable so tests can drive the clock.
    """

    def __init__(
        self,
        client: GateClient,
        user_id: str,
        interval: float | None = None,
        sleep: SleepFn = asyncio.sleep,
        on_change: Callable[[bool], None] | None = None,
    ) -> None:
        self.client = client
        self.user_id = user_id
        self.interval = interval if interval is not None else get_settings().PRESENCE_POLL_SECONDS
        self._sleep = sleep
        self._on_change = on_change
        self._task: asyncio.Task | None = None
        self.partner_online = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _update_status(self, is_online: bool) -> None:
        try:
            await self.client.set_status(self.user_id, is_online)
        except (GateError, httpx.HTTPError) as e:
            logger.warning("Error updating status: %s", e)

    async def check_partner(self) -> bool:
        """Fetch the partner's status once. Failures keep the last known state."""
        try:
            data = await self.client.partner_status(self.user_id)
        except (GateError, httpx.HTTPError, ValueError) as e:
            logger.warning("Error checking partner status: %s", e)
            return self.partner_online

        online = bool(data.get("is_online", False))
        if online != self.partner_online:
            self.partner_online = online
            if self._on_change:
                self._on_change(online)
        return online

    async def _run(self) -> None:
        while True:
            await self._sleep(self.interval)
            await self.check_partner()

    async def start(self) -> None:
        if self.running:
            return
        await self._update_status(True)
        await self.check_partner()
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.warning("Presence loop ended with an error: %s", e)
            self._task = None
        await self._update_status(False)

    def unload(self) -> asyncio.Task:
        """Fire-and-forget offline signal for process exit. Nothing waits for it."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        return asyncio.ensure_future(self._update_status(False))
