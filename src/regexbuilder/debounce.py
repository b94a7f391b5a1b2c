"""
Single-slot debounced scheduling.

Scheduling a task evicts any previously pending task that has not fired yet,
so only the most recent input ever produces a result. A task that is already
running is not interrupted.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 300


class Handle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None:
        """Prevent the callback from running."""
        ...


Scheduler = Callable[[float, Callable[[], None]], Handle]
"""Schedules a callback after a delay in seconds and returns a cancellable handle."""


def asyncio_scheduler(delay: float, callback: Callable[[], None]) -> Handle:
    """Schedule `callback` on the running asyncio event loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


class Debouncer:
    """Holds at most one pending task and fires it after a quiet window."""

    def __init__(self, window_ms: float = DEFAULT_DEBOUNCE_MS, scheduler: Scheduler | None = None) -> None:
        """
        Initialize the debouncer.

        Args:
            window_ms: Quiet period in milliseconds before a scheduled task fires.
            scheduler: The timer facility. Defaults to the running asyncio loop.

        """
        self.window_ms = window_ms
        self._scheduler = scheduler or asyncio_scheduler
        self._handle: Handle | None = None
        self._pending: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        """Check if a task is waiting to fire."""
        return self._pending is not None

    def schedule(self, task: Callable[[], None]) -> None:
        """Replace any pending task with `task` and restart the quiet window."""
        if self._handle is not None:
            self._handle.cancel()
            logger.debug("Discarded superseded pending task.")
        self._pending = task
        self._handle = self._scheduler(self.window_ms / 1000, self._fire)

    def cancel(self) -> None:
        """Drop the pending task, if any, without running it."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None

    def flush(self) -> bool:
        """
        Run the pending task immediately.

        Returns:
            True if a task was pending and has run.

        """
        if self._pending is None:
            return False
        if self._handle is not None:
            self._handle.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        task = self._pending
        self._handle = None
        self._pending = None
        if task is not None:
            task()
