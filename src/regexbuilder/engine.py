"""
The match-execution pipeline for RegexBuilder.

The engine never implements regex semantics itself. Compilation and matching are
delegated to a `Primitive`, by default one backed by the `regex` module, and the
engine only drives it: validation, the global-search loop with its zero-length
guard, timing, and turning runtime failures into invalid runs.
"""

import logging
import time
from typing import Protocol

import regex

from .errors import MatchExecutionError, PatternCompileError
from .flags import decode, encode, to_compile_flags
from .match_state import ERROR_TIMEOUT, RunState, compile_error, execution_error
from .types import FlagSet, Match, MatchRun

logger = logging.getLogger(__name__)

# Pattern truncation length for debug logging
_PATTERN_LOG_MAX_LENGTH = 50


class Matcher(Protocol):
    """A compiled pattern that can be executed from an arbitrary offset."""

    def exec_from(self, text: str, index: int) -> Match | None:
        """Return the first match at or after `index`, or None."""
        ...


class Primitive(Protocol):
    """The host's native regex facility."""

    def compile(self, pattern: str, flags: str) -> Matcher:
        """
        Compile a pattern with a flag string.

        Raises:
            PatternCompileError: If the pattern and flags do not compile.

        """
        ...


class RegexMatcher:
    """A `Matcher` wrapping a compiled `regex` pattern."""

    def __init__(self, compiled: regex.Pattern, *, sticky: bool = False, timeout: float | None = None) -> None:
        """
        Initialize the matcher.

        Args:
            compiled: The compiled `regex` pattern.
            sticky: If True, a match must start exactly at the search offset.
            timeout: Optional per-call time limit in seconds, enforced by `regex`.

        """
        self._compiled = compiled
        self._sticky = sticky
        self._timeout = timeout

    def exec_from(self, text: str, index: int) -> Match | None:
        """Search `text` from `index` and convert the result to a `Match`."""
        method = self._compiled.match if self._sticky else self._compiled.search
        try:
            found = method(text, index, timeout=self._timeout)
        except regex.error as e:
            raise MatchExecutionError(str(e)) from e
        if found is None:
            return None
        return Match(
            text=found.group(0),
            start_index=found.start(),
            end_index=found.end(),
            groups=tuple(found.groups()),
            named_groups=found.groupdict(),
        )


class RegexPrimitive:
    """The default `Primitive`, backed by the third-party `regex` module."""

    def __init__(self, timeout: float | None = None) -> None:
        """
        Initialize the primitive.

        Args:
            timeout: Optional time limit in seconds for each match call.

        """
        self.timeout = timeout

    def compile(self, pattern: str, flags: str) -> RegexMatcher:
        """Compile a pattern, translating `regex` errors into PatternCompileError."""
        flag_set = decode(flags)
        try:
            compiled = regex.compile(pattern, to_compile_flags(flag_set))
        except (regex.error, ValueError, RecursionError, OverflowError) as e:
            raise PatternCompileError(str(e)) from e
        return RegexMatcher(compiled, sticky=flag_set.sticky, timeout=self.timeout)


def _truncate(pattern: str) -> str:
    if len(pattern) > _PATTERN_LOG_MAX_LENGTH:
        return pattern[:_PATTERN_LOG_MAX_LENGTH] + "..."
    return pattern


class MatchEngine:
    """Validates patterns and executes them against sample text."""

    def __init__(self, primitive: Primitive | None = None) -> None:
        """
        Initialize the engine.

        Args:
            primitive: The matching primitive to drive. Defaults to `RegexPrimitive`.

        """
        self.primitive: Primitive = primitive or RegexPrimitive()
        self.state = RunState.IDLE
        self.last_run: MatchRun | None = None

    def validate(self, pattern: str, flags: FlagSet) -> str | None:
        """
        Check whether a pattern compiles under the given flags.

        Returns:
            The compiler's error message, or None if the pattern compiles.
            The empty pattern is always valid.

        """
        if not pattern:
            return None
        try:
            self.primitive.compile(pattern, encode(flags))
        except PatternCompileError as e:
            return str(e)
        return None

    def run(self, pattern: str, flags: FlagSet, sample_text: str) -> MatchRun:
        """
        Execute a pattern against sample text.

        Compile failures and runtime failures never propagate: both come back as
        an invalid MatchRun carrying a RunError.

        Args:
            pattern: The pattern to execute.
            flags: The flag set to compile and drive the pattern with.
            sample_text: The text to match against.

        Returns:
            The MatchRun for this (pattern, flags, sample_text) triple.

        """
        if not pattern or not sample_text:
            self.state = RunState.READY
            self.last_run = MatchRun.empty()
            return self.last_run

        log_context = {"pattern": _truncate(pattern), "flags": encode(flags)}
        self.state = RunState.VALIDATING
        try:
            matcher = self.primitive.compile(pattern, encode(flags))
        except PatternCompileError as e:
            logger.debug("Pattern '%s' failed to compile: %s", _truncate(pattern), e, extra=log_context)
            self.state = RunState.INVALID
            self.last_run = MatchRun.failed(compile_error(str(e)))
            return self.last_run

        self.state = RunState.EXECUTING
        start_time = time.perf_counter()
        try:
            matches = self._collect(matcher, sample_text, is_global=flags.global_)
        except TimeoutError:
            logger.warning("Pattern '%s' timed out against %d characters.", _truncate(pattern), len(sample_text), extra=log_context)
            run = MatchRun.failed(ERROR_TIMEOUT)
        except Exception as e:
            logger.warning("Pattern '%s' raised during matching: %s", _truncate(pattern), e, extra=log_context)
            run = MatchRun.failed(execution_error(str(e)))
        else:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            run = MatchRun(matches=tuple(matches), elapsed_time_ms=elapsed_ms)
            logger.debug("Pattern '%s' produced %d matches in %.3fms.", _truncate(pattern), run.count, elapsed_ms, extra=log_context)

        self.state = RunState.READY
        self.last_run = run
        return run

    @staticmethod
    def _collect(matcher: Matcher, text: str, *, is_global: bool) -> list[Match]:
        """Drive the matcher over the text, one search or a global scan."""
        if not is_global:
            found = matcher.exec_from(text, 0)
            return [found] if found is not None else []

        matches: list[Match] = []
        position = 0
        while position <= len(text):
            found = matcher.exec_from(text, position)
            if found is None:
                break
            matches.append(found)
            # An empty match must still move the scan forward by one position
            position = found.start_index + 1 if found.is_empty else found.end_index
        return matches
