"""
Debouncer for estate searches.

Delays an action until input pauses, so a burst of filter edits results in a
single query.
"""

import asyncio
import logging
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


class Debouncer:
    """
    Runs at most one deferred action after a quiet period.

    Scheduling a new action always replaces the pending one (last write wins).
    Actions are plain callables run on the event loop thread.

    Attributes:
        delay_ms: Quiet period in milliseconds
    """

    def __init__(self, delay_ms: int = 100):
        """
        Initialize the debouncer.

        Args:
            delay_ms: Quiet period before a deferred action runs (default: 100)
        """
        self.delay_ms = delay_ms
        self._pending: Optional[asyncio.Task] = None
        self._disposed = False

    @property
    def pending(self) -> Optional[asyncio.Task]:
        """Task of the pending deferred action, or None."""
        if self._pending is not None and not self._pending.done():
            return self._pending
        return None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def schedule_deferred(self, action: Callable[[], Any]) -> None:
        """
        Schedule ``action`` after the quiet period, replacing any pending one.

        Must be called from a running event loop.

        Args:
            action: Callable to run once the delay elapses

        Raises:
            RuntimeError: If the debouncer has been disposed
        """
        if self._disposed:
            raise RuntimeError("Debouncer has been disposed")

        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._run_later(action))

    def run_immediately(self, action: Callable[[], Any]) -> Any:
        """
        Cancel the pending action and run ``action`` synchronously.

        Returns:
            Whatever ``action`` returns
        """
        if self._disposed:
            raise RuntimeError("Debouncer has been disposed")

        self.cancel()
        return action()

    def cancel(self) -> None:
        """Drop the pending deferred action, if any."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    def dispose(self) -> None:
        """Cancel the pending action and refuse further scheduling."""
        self.cancel()
        self._disposed = True

    async def _run_later(self, action: Callable[[], Any]) -> None:
        await asyncio.sleep(self.delay_ms / 1000)
        # Cleared first so the action itself may schedule again
        self._pending = None
        try:
            action()
        except Exception:
            logger.exception("Deferred action failed")
