"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from dataclasses import dataclass

import pytest

from regexbuilder.library import MemoryStorage, PatternLibrary
from regexbuilder.types import PatternEntry


@dataclass
class FakeHandle:
    """A timer handle of the FakeScheduler."""

    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        """Prevent the callback from running."""
        self.cancelled = True


class FakeScheduler:
    """A manually advanced clock implementing the debouncer's scheduler interface."""

    def __init__(self) -> None:
        """Start the clock at zero with no timers."""
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        """Schedule a callback `delay` seconds from now."""
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[FakeHandle]:
        """Return timers that have neither fired nor been cancelled."""
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        """Move the clock forward and fire every due, uncancelled timer in order."""
        self.now += seconds
        for handle in sorted(self.active, key=lambda h: h.due):
            if handle.due <= self.now and not handle.cancelled:
                handle.cancelled = True
                handle.callback()


@pytest.fixture
def scheduler() -> FakeScheduler:
    """Provide a fresh manually advanced scheduler."""
    return FakeScheduler()


BUILTINS = (
    PatternEntry(id="email", name="Email Address", pattern=r"[\w.]+@[\w.]+", description="Matches email addresses", category="Common"),
    PatternEntry(id="ipv4", name="IPv4 Address", pattern=r"(?:\d{1,3}\.){3}\d{1,3}", description="Matches IPv4 addresses", category="Network"),
    PatternEntry(id="integer", name="Integer", pattern=r"-?\d+", description="Whole numbers"),
)


@pytest.fixture
def storage() -> MemoryStorage:
    """Provide empty in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def builtin_entries() -> tuple[PatternEntry, ...]:
    """Provide a small fixed built-in set."""
    return BUILTINS


@pytest.fixture
def library(storage: MemoryStorage, builtin_entries: tuple[PatternEntry, ...]) -> PatternLibrary:
    """Provide a library over the fixed built-in set and empty storage."""
    return PatternLibrary(storage, builtins=builtin_entries)
