"""
Per-key debounce for background analysis.

Each key (one pull request) has at most one pending delayed task. Scheduling
again for the same key cancels the pending task and replaces it, so only the
most recent event is analysed. The map is process-local and safe to lose on
restart.
"""

import asyncio
from typing import Awaitable, Callable, Dict, Optional, Set

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def debounce_key(owner: str, repo: str, pr_number: int) -> str:
    """Build the debounce key for a pull request, e.g. ``octo/app#42``."""
    return f"{owner}/{repo}#{pr_number}"


class Debouncer:
    """Cancellable delayed tasks keyed by a string."""

    def __init__(self, default_delay: float = 5.0):
        self.default_delay = default_delay
        self._pending: Dict[str, asyncio.Task] = {}
        # Strong references until done; the loop only keeps weak ones
        self._tasks: Set[asyncio.Task] = set()

    def schedule(
        self,
        key: str,
        callback: Callable[[], Awaitable[None]],
        delay: Optional[float] = None,
    ) -> asyncio.Task:
        """
        Run *callback* after *delay* seconds unless superseded.

        Returns immediately. Must be called from a running event loop.
        """
        existing = self._pending.pop(key, None)
        if existing is not None and not existing.done():
            existing.cancel()
            logger.debug("Superseded pending task for %s", key)

        wait = self.default_delay if delay is None else delay
        task = asyncio.create_task(self._run(key, wait, callback))
        self._pending[key] = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(
        self, key: str, delay: float, callback: Callable[[], Awaitable[None]]
    ) -> None:
        await asyncio.sleep(delay)

        # Past the delay: a newer schedule() must not cancel us mid-analysis.
        if self._pending.get(key) is asyncio.current_task():
            del self._pending[key]

        try:
            await callback()
        except Exception as e:
            logger.error("Debounced task for %s failed: %s", key, e, exc_info=True)

    def cancel(self, key: str) -> bool:
        """Cancel the pending task for *key*. Returns True if one was pending."""
        task = self._pending.pop(key, None)
        if task is None:
            return False
        task.cancel()
        return True

    def has_pending(self, key: str) -> bool:
        """Check whether a task for *key* is still waiting out its delay."""
        return key in self._pending

    @property
    def in_flight(self) -> int:
        """Number of tasks not yet finished, waiting or running."""
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Cancel every pending task and wait for them to unwind."""
        tasks = list(self._pending.values())
        self._pending.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


# Global singleton
_debouncer = Debouncer(default_delay=settings.ANALYSIS_DEBOUNCE_SECONDS)


def get_debouncer() -> Debouncer:
    """Get the global debouncer instance."""
    return _debouncer
