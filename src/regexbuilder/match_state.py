"""
Match run lifecycle state management for RegexBuilder.

This module gives the Match Engine an explicit, type-safe state model so that
callers can tell a pattern that failed to compile apart from one that compiled
but blew up while matching, and both apart from a run that simply found nothing.

Architecture:
    RunState (Enum) → Represents WHERE the engine is for the current input
    RunError (Dataclass) → Represents WHY a run produced no usable matches
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class RunState(str, Enum):
    """
    Represents the lifecycle state of the Match Engine for one input triple.

    A triple is a (pattern, flags, sample text) combination. Every new triple
    restarts the machine from VALIDATING.

    State Transition Flow:
        IDLE → VALIDATING → [INVALID | EXECUTING] → READY

    """

    IDLE = "idle"
    """No input has been run yet."""

    VALIDATING = "validating"
    """The pattern is being compiled with the requested flags."""

    INVALID = "invalid"
    """The pattern failed to compile. Terminal for this triple."""

    EXECUTING = "executing"
    """The compiled pattern is being applied to the sample text."""

    READY = "ready"
    """A MatchRun is available and holds until the next triple arrives."""


@dataclass(frozen=True)
class RunError:
    """
    Represents why a match run did not produce a valid match list.

    Attributes:
        category: The high-level category of the failure.
        code: A machine-readable identifier for the specific failure.
        message: A human-readable explanation, usually the primitive's own message.

    """

    category: Literal["compile", "execution"]
    """
    The category of the failure:
    - compile: The pattern and flags could not be compiled
    - execution: The compiled pattern raised while matching
    """

    code: str
    """Machine-readable identifier (e.g., 'syntax', 'timeout', 'runtime')."""

    message: str | None = None
    """Human-readable explanation for display next to the pattern input."""

    def __str__(self) -> str:
        """Return a human-readable representation of the failure."""
        if self.message:
            return f"{self.category}:{self.code} ({self.message})"
        return f"{self.category}:{self.code}"


def compile_error(message: str) -> RunError:
    """Build the RunError for a pattern that failed to compile."""
    return RunError(category="compile", code="syntax", message=message)


def execution_error(message: str) -> RunError:
    """Build the RunError for a pattern that raised during matching."""
    return RunError(category="execution", code="runtime", message=message)


ERROR_TIMEOUT = RunError(
    category="execution",
    code="timeout",
    message="Matching exceeded the configured time limit",
)
"""Run error for a pattern whose execution was aborted by the match timeout."""
