"""Trailing-edge debounce on the running asyncio loop."""
import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Runs a coroutine function once input has been quiet for `delay` seconds.

    Each `trigger()` resets the single pending timer. Only the timer is
    cancelled on reset; a call that already started runs to completion.
    """

    def __init__(self, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        self.delay = delay
        self._callback = callback
        self._timer: asyncio.TimerHandle | None = None
        # Running callbacks, kept referenced until done
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """Whether a timer is waiting to fire."""
        return self._timer is not None

    def trigger(self) -> None:
        """(Re)start the quiescence timer."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        task = asyncio.get_running_loop().create_task(self._run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self) -> None:
        try:
            await self._callback()
        except Exception:
            logger.exception("Debounced callback failed")

    async def wait(self) -> None:
        """Wait for callbacks that have already fired."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel the timer and any callbacks still running."""
        self.cancel()
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
        await self.wait()
        self._tasks.clear()
