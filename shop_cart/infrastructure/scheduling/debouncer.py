"""
Trailing-edge debouncer

Holds at most one pending callback. Every schedule() call cancels the pending
one and restarts the quiet period; only a callback that survives the full
delay runs. A callback that has already started is never cancelled.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

AsyncCallback = Callable[[], Awaitable[None]]


class Debouncer:
    """Single-slot, cancelable delayed task"""

    def __init__(self, delay: float, name: str = "debouncer"):
        if delay <= 0:
            raise ValueError("Debounce delay must be positive")
        self.delay = delay
        self.name = name
        self._pending: Optional[asyncio.Task] = None
        self._pending_callback: Optional[AsyncCallback] = None
        self._running: Set[asyncio.Task] = set()
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def pending(self) -> bool:
        """A callback is waiting for its quiet period to elapse"""
        return self._pending is not None and not self._pending.done()

    @property
    def running(self) -> bool:
        """A callback is currently executing"""
        return bool(self._running)

    def schedule(self, callback: AsyncCallback) -> None:
        """(Re)start the quiet period for callback"""
        self.cancel()
        self._pending_callback = callback
        self._pending = asyncio.get_running_loop().create_task(
            self._wait_then_run(callback), name=f"{self.name}-pending"
        )

    def cancel(self) -> bool:
        """Drop the pending callback; returns whether one was pending"""
        was_pending = self.pending
        if self._pending is not None:
            self._pending.cancel()
        self._pending = None
        self._pending_callback = None
        return was_pending

    async def flush(self) -> bool:
        """Run the pending callback now instead of waiting; returns whether one ran"""
        callback = self._pending_callback
        if not self.cancel() or callback is None:
            return False
        await self._execute(callback)
        return True

    async def drain(self) -> None:
        """Wait for callbacks that have already started"""
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    async def _wait_then_run(self, callback: AsyncCallback) -> None:
        await asyncio.sleep(self.delay)
        # Detach so a schedule() issued by the callback cannot cancel it
        self._pending = None
        self._pending_callback = None
        task = asyncio.current_task()
        self._running.add(task)
        try:
            await self._execute(callback)
        finally:
            self._running.discard(task)

    async def _execute(self, callback: AsyncCallback) -> None:
        try:
            await callback()
        except Exception:
            self._logger.exception("💥 %s callback failed", self.name)
