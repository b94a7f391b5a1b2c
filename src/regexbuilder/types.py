"""Defines shared data structures and types for RegexBuilder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from regexbuilder.match_state import RunError

USER_ID_PREFIX = "user-"
"""Marker carried by the id of every user-authored library entry."""

DEFAULT_CATEGORY = "Other"
"""Bucket used when grouping library entries that have no category."""


@dataclass(frozen=True)
class FlagSet:
    """
    Six independent toggles controlling match behavior.

    `global_` carries a trailing underscore because `global` is a keyword.
    """

    global_: bool = False
    ignore_case: bool = False
    multiline: bool = False
    dot_all: bool = False
    unicode: bool = False
    sticky: bool = False


@dataclass(frozen=True)
class Match:
    """
    A single match of a pattern against the sample text.

    Attributes:
        text: The matched substring, always `sample_text[start_index:end_index]`.
        start_index: Offset of the first matched character.
        end_index: Offset one past the last matched character.
        groups: Capturing groups in declaration order. None marks a group that
            did not participate in the match.
        named_groups: Named capturing groups, keyed by group name.

    """

    text: str
    start_index: int
    end_index: int
    groups: tuple[str | None, ...] = ()
    named_groups: dict[str, str | None] = field(default_factory=dict, compare=False)

    @property
    def is_empty(self) -> bool:
        """Check if this is a zero-length match."""
        return self.start_index == self.end_index

    def to_dict(self) -> dict[str, Any]:
        """Convert the match to a JSON-serializable dictionary."""
        return {
            "text": self.text,
            "start_index": self.start_index,
            "end_index": self.end_index,
            "groups": list(self.groups),
            "named_groups": dict(self.named_groups),
        }


@dataclass(frozen=True)
class MatchRun:
    """The complete output of executing one pattern against one text under one flag set."""

    matches: tuple[Match, ...] = ()
    elapsed_time_ms: float = 0.0
    valid: bool = True
    error: RunError | None = None

    @classmethod
    def empty(cls) -> MatchRun:
        """Return the empty, valid run used for empty patterns or texts."""
        return cls()

    @classmethod
    def failed(cls, error: RunError) -> MatchRun:
        """Return an invalid run carrying the given error."""
        return cls(valid=False, error=error)

    @property
    def count(self) -> int:
        """Return the number of matches in the run."""
        return len(self.matches)

    def to_dict(self) -> dict[str, Any]:
        """Convert the run to a JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "valid": self.valid,
            "elapsed_time_ms": self.elapsed_time_ms,
            "matches": [m.to_dict() for m in self.matches],
        }
        if self.error is not None:
            result["error"] = {
                "category": self.error.category,
                "code": self.error.code,
                "message": self.error.message,
            }
        return result


@dataclass(frozen=True)
class Span:
    """A contiguous piece of the sample text, tagged as plain or highlighted."""

    kind: Literal["plain", "match"]
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class CaretRange:
    """Last known selection (or collapsed caret) offsets within the pattern text."""

    start: int
    end: int

    @classmethod
    def at(cls, position: int) -> CaretRange:
        """Return a collapsed caret at the given position."""
        return cls(position, position)

    def clamp(self, length: int) -> CaretRange:
        """Return this range clamped into a text of the given length, with start <= end."""
        start = min(max(self.start, 0), length)
        end = min(max(self.end, 0), length)
        if start > end:
            start, end = end, start
        return CaretRange(start, end)


@dataclass(frozen=True)
class BuiltIn:
    """Provenance of an entry shipped with the application. Read-only."""

    id: str


@dataclass(frozen=True)
class User:
    """Provenance of an entry created at runtime. Mutable and deletable."""

    id: str


Provenance = BuiltIn | User


def provenance_of(entry_id: str) -> Provenance:
    """Classify a library entry id as built-in or user-authored."""
    if entry_id.startswith(USER_ID_PREFIX):
        return User(entry_id)
    return BuiltIn(entry_id)


class PatternEntry(BaseModel):
    """A named pattern in the pattern library."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    pattern: str
    description: str = ""
    category: str | None = None
    flags: str | None = Field(default=None, description="Optional flag string to apply with the pattern.")

    @property
    def provenance(self) -> Provenance:
        """Return whether this entry is built-in or user-authored."""
        return provenance_of(self.id)

    @property
    def group(self) -> str:
        """Return the category bucket this entry is listed under."""
        return self.category or DEFAULT_CATEGORY
