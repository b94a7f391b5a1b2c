"""
Pattern editing with undo/redo and caret-aware token insertion.

The editor is headless: the input surface (a text widget, a TUI field, a test)
reports caret and selection changes through `track_caret`, and the editor keeps
the last known range so that quick-insert tokens land where the user last
interacted, even after the surface lost focus to the button being pressed.
"""

import logging
from dataclasses import dataclass, field

from .types import CaretRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuickInsertToken:
    """A pattern fragment offered as a one-click insertion."""

    label: str
    value: str
    description: str


QUICK_INSERT_TOKENS: tuple[QuickInsertToken, ...] = (
    QuickInsertToken("Any Character", ".", "Matches any single character except newline"),
    QuickInsertToken("Digit", r"\d", "Matches any digit (0-9)"),
    QuickInsertToken("Word Character", r"\w", "Matches any letter, digit, or underscore (a-z, A-Z, 0-9, _)"),
    QuickInsertToken("Whitespace", r"\s", "Matches any whitespace character (space, tab, newline, etc.)"),
    QuickInsertToken("Non-Digit", r"\D", "Matches any character that is not a digit"),
    QuickInsertToken("Non-Word", r"\W", "Matches any character that is not a word character"),
    QuickInsertToken("Non-Whitespace", r"\S", "Matches any character that is not whitespace"),
    QuickInsertToken("Start of Line", "^", "Matches the beginning of a line"),
    QuickInsertToken("End of Line", "$", "Matches the end of a line"),
    QuickInsertToken("Word Boundary", r"\b", "Matches a word boundary (between word and non-word characters)"),
    QuickInsertToken("Zero or More", "*", "Matches the preceding element zero or more times"),
    QuickInsertToken("One or More", "+", "Matches the preceding element one or more times"),
    QuickInsertToken("Zero or One", "?", "Matches the preceding element zero or one time (makes it optional)"),
    QuickInsertToken("Group", "()", "Creates a capturing group that can be referenced later"),
    QuickInsertToken("Non-Capturing Group", "(?:)", "Groups elements together without capturing the match"),
    QuickInsertToken("Positive Lookahead", "(?=)", "Matches a pattern only if it's followed by another pattern"),
    QuickInsertToken("Negative Lookahead", "(?!)", "Matches a pattern only if it's NOT followed by another pattern"),
)


@dataclass
class EditHistory:
    """
    Linear undo/redo timeline of pattern values.

    `entries[cursor]` is always the displayed pattern. Recording a value that
    differs from it drops everything after the cursor before appending.
    """

    entries: list[str] = field(default_factory=lambda: [""])
    cursor: int = 0

    @property
    def current(self) -> str:
        """Return the pattern at the cursor."""
        return self.entries[self.cursor]

    @property
    def can_undo(self) -> bool:
        """Check if there is an older entry to step back to."""
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        """Check if there is a newer entry to step forward to."""
        return self.cursor < len(self.entries) - 1

    def record(self, value: str) -> bool:
        """
        Append a value to the timeline if it differs from the current entry.

        Returns:
            True if a new entry was appended.

        """
        if value == self.current:
            return False
        del self.entries[self.cursor + 1 :]
        self.entries.append(value)
        self.cursor = len(self.entries) - 1
        return True

    def undo(self) -> str:
        """Step back one entry, if possible, and return the current pattern."""
        if self.can_undo:
            self.cursor -= 1
        return self.current

    def redo(self) -> str:
        """Step forward one entry, if possible, and return the current pattern."""
        if self.can_redo:
            self.cursor += 1
        return self.current


class PatternEditor:
    """Owns the pattern text, its edit history, and the remembered caret."""

    def __init__(self, pattern: str = "") -> None:
        """
        Initialize the editor.

        Args:
            pattern: The initial pattern. It becomes the first history entry.

        """
        self.history = EditHistory(entries=[pattern])
        self.caret: CaretRange | None = None

    @property
    def pattern(self) -> str:
        """Return the active pattern."""
        return self.history.current

    @property
    def can_undo(self) -> bool:
        """Check if undo would change the pattern."""
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        """Check if redo would change the pattern."""
        return self.history.can_redo

    def track_caret(self, start: int, end: int | None = None) -> CaretRange:
        """
        Remember the live caret or selection of the input surface.

        Call this on focus, blur, selection change, edit, and on the earliest
        pointer signal (hover or press) of an insert button, before the surface
        loses its selection.
        """
        self.caret = CaretRange(start, start if end is None else end).clamp(len(self.pattern))
        return self.caret

    def set_pattern(self, value: str, caret: CaretRange | None = None) -> str:
        """
        Record a direct edit of the pattern text.

        Args:
            value: The new pattern text.
            caret: The caret reported by the surface after the edit. Defaults
                to the end of the new text.

        Returns:
            The active pattern.

        """
        self.history.record(value)
        if caret is None:
            caret = CaretRange.at(len(value))
        self.track_caret(caret.start, caret.end)
        return self.pattern

    def insert_token(self, token: str) -> str:
        """
        Splice a token into the pattern at the remembered caret.

        A selected range is replaced by the token. Without a remembered caret
        the token is appended. Afterwards the caret sits right after the token,
        so chained insertions compose left to right.

        Returns:
            The active pattern.

        """
        current = self.pattern
        caret = (self.caret or CaretRange.at(len(current))).clamp(len(current))
        new_value = current[: caret.start] + token + current[caret.end :]
        self.history.record(new_value)
        self.caret = CaretRange.at(caret.start + len(token))
        logger.debug("Inserted %r at %d-%d.", token, caret.start, caret.end)
        return self.pattern

    def load_pattern(self, value: str) -> str:
        """Replace the whole pattern, e.g. with a library entry or a shared link."""
        return self.set_pattern(value)

    def undo(self) -> str:
        """Step back in the edit history without recording a new entry."""
        return self.history.undo()

    def redo(self) -> str:
        """Step forward in the edit history without recording a new entry."""
        return self.history.redo()
