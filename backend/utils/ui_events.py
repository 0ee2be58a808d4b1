"""
UI Event Utilities
==================
Small timing helpers used around the calculator, outside the engine:

- Debouncer: coalesces bursts of calls; only the last one within the
  delay window runs (snapshot saves while the user is typing)
- OnVisibleOnce: fires a callback the first time something is reported
  visible, then detaches (celebration animation gate)
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Callback = Callable[..., Union[None, Awaitable[None]]]


async def _invoke(callback: Callback, args: Tuple[Any, ...]) -> None:
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class Debouncer:
    """
    asyncio debouncer.

    Must be used from inside a running event loop. Each schedule() call
    cancels the pending one and restarts the delay with the new arguments.
    """

    def __init__(self, delay_seconds: float, callback: Callback):
        self.delay_seconds = max(0.0, delay_seconds)
        self.callback = callback
        self._task: Optional[asyncio.Task] = None
        self._pending_args: Optional[Tuple[Any, ...]] = None

    @property
    def pending(self) -> bool:
        return self._pending_args is not None

    def schedule(self, *args: Any) -> None:
        self._cancel_task()
        self._pending_args = args
        self._task = asyncio.get_running_loop().create_task(self._run_later())

    async def _run_later(self) -> None:
        await asyncio.sleep(self.delay_seconds)
        args = self._pending_args
        self._pending_args = None
        self._task = None
        if args is None:
            return
        try:
            await _invoke(self.callback, args)
        except Exception as e:
            logger.error(f"Debounced callback failed: {e}")

    async def flush(self) -> bool:
        """Run the pending call now. Returns False when nothing was pending."""
        self._cancel_task()
        args = self._pending_args
        self._pending_args = None
        if args is None:
            return False
        await _invoke(self.callback, args)
        return True

    def cancel(self) -> None:
        self._cancel_task()
        self._pending_args = None

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None


class OnVisibleOnce:
    """Calls `callback` on the first notify(True); later notifications are ignored."""

    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def notify(self, is_visible: bool) -> bool:
        if self._fired or not is_visible:
            return False
        self._fired = True
        self._callback()
        return True
