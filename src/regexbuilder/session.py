"""
Interactive test session tying the editor, engine and renderer together.

Every change to the pattern, the flags or the sample text produces a new input
triple. Cheap outcomes (empty input, a pattern that does not compile) are
applied at once; everything else goes through the debouncer so that only the
latest triple is ever executed and displayed.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .debounce import DEFAULT_DEBOUNCE_MS, Debouncer, Scheduler
from .editor import PatternEditor
from .engine import MatchEngine
from .flags import decode, encode
from .highlight import render
from .match_state import compile_error
from .sharing import SharedPattern
from .types import FlagSet, MatchRun, PatternEntry, Span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResult:
    """A MatchRun together with the input triple that produced it and its spans."""

    pattern: str
    flags: FlagSet
    sample_text: str
    run: MatchRun
    spans: list[Span] = field(default_factory=list)


ResultListener = Callable[[SessionResult], None]


class TestSession:
    """Live pattern-testing state for one user."""

    __test__ = False  # Not a pytest test class despite the name

    def __init__(
        self,
        engine: MatchEngine | None = None,
        *,
        pattern: str = "",
        flags: FlagSet | None = None,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
        scheduler: Scheduler | None = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            engine: The Match Engine to execute runs with.
            pattern: Initial pattern, the first entry of the edit history.
            flags: Initial flag set. Defaults to global matching only.
            debounce_ms: Quiet period before a changed input is executed.
            scheduler: Timer facility for the debouncer (asyncio by default).

        """
        self.engine = engine or MatchEngine()
        self.editor = PatternEditor(pattern)
        self.flags = flags if flags is not None else FlagSet(global_=True)
        self.sample_text = ""
        self.result: SessionResult | None = None
        self._debouncer = Debouncer(debounce_ms, scheduler)
        self._listeners: list[ResultListener] = []

    @property
    def pattern(self) -> str:
        """Return the active pattern."""
        return self.editor.pattern

    @property
    def error(self) -> str | None:
        """Return the compile error message for the active pattern, if any."""
        return self.engine.validate(self.pattern, self.flags)

    @property
    def pending(self) -> bool:
        """Check if a run is waiting for the debounce window to elapse."""
        return self._debouncer.pending

    def subscribe(self, listener: ResultListener) -> None:
        """Register a callback invoked with every applied SessionResult."""
        self._listeners.append(listener)

    def set_pattern(self, value: str) -> None:
        """Apply a direct edit of the pattern text."""
        self.editor.set_pattern(value)
        self._input_changed()

    def insert_token(self, token: str) -> None:
        """Insert a token at the remembered caret."""
        self.editor.insert_token(token)
        self._input_changed()

    def undo(self) -> None:
        """Step back in the pattern history."""
        before = self.pattern
        if self.editor.undo() != before:
            self._input_changed()

    def redo(self) -> None:
        """Step forward in the pattern history."""
        before = self.pattern
        if self.editor.redo() != before:
            self._input_changed()

    def set_flags(self, flags: FlagSet | str) -> None:
        """Replace the flag set, given as a FlagSet or a flag string."""
        self.flags = decode(flags) if isinstance(flags, str) else flags
        self._input_changed()

    def set_sample_text(self, text: str) -> None:
        """Replace the sample text."""
        self.sample_text = text
        self._input_changed()

    def load_entry(self, entry: PatternEntry) -> None:
        """Load a library entry as a full pattern replacement, with its flags if it has any."""
        self.editor.load_pattern(entry.pattern)
        if entry.flags is not None:
            self.flags = decode(entry.flags)
        self._input_changed()

    def load_shared(self, shared: SharedPattern) -> None:
        """Load a pattern and flags decoded from a shareable link."""
        if shared.pattern:
            self.editor.load_pattern(shared.pattern)
        if shared.flags:
            self.flags = decode(shared.flags)
        self._input_changed()

    def share(self) -> SharedPattern:
        """Return the active pattern and flag string for link sharing."""
        return SharedPattern(pattern=self.pattern, flags=encode(self.flags))

    def flush(self) -> SessionResult | None:
        """Run any pending input immediately and return the latest result."""
        self._debouncer.flush()
        return self.result

    def close(self) -> None:
        """Discard any pending run."""
        self._debouncer.cancel()

    def _input_changed(self) -> None:
        pattern, flags, sample_text = self.pattern, self.flags, self.sample_text

        if not pattern or not sample_text:
            self._debouncer.cancel()
            self._apply(SessionResult(pattern, flags, sample_text, MatchRun.empty(), render(sample_text, [])))
            return

        error = self.engine.validate(pattern, flags)
        if error is not None:
            self._debouncer.cancel()
            self._apply(SessionResult(pattern, flags, sample_text, MatchRun.failed(compile_error(error))))
            return

        self._debouncer.schedule(lambda: self._execute(pattern, flags, sample_text))

    def _execute(self, pattern: str, flags: FlagSet, sample_text: str) -> None:
        run = self.engine.run(pattern, flags, sample_text)
        spans = render(sample_text, run.matches) if run.valid else []
        self._apply(SessionResult(pattern, flags, sample_text, run, spans))

    def _apply(self, result: SessionResult) -> None:
        self.result = result
        for listener in self._listeners:
            listener(result)
