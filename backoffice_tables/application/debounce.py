from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

Sleeper = Callable[[float], Awaitable[None]]


class Debouncer:
    """Coalesces rapid calls; only the last value of a burst reaches ``callback``.

    Each ``push`` cancels the pending timer. ``callback`` runs on the event loop once
    ``wait_ms`` passes without a newer push. ``cancel`` drops the pending value.
    """

    def __init__(
        self,
        callback: Callable[[str], None],
        wait_ms: int = 300,
        sleeper: Sleeper | None = None,
    ) -> None:
        self.callback = callback
        self.wait_ms = max(0, wait_ms)
        self._sleep = sleeper or asyncio.sleep
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def push(self, value: str) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire_later(value))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _fire_later(self, value: str) -> None:
        await self._sleep(self.wait_ms / 1000)
        self.callback(value)
