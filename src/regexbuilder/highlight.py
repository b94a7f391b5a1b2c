"""
Projection of a match list onto the sample text.

The renderer splits the sample text into a sequence of `plain` and `match`
spans whose texts concatenate back to the sample text exactly.

Usage example:
    >>> spans = render("a12b34", [Match("12", 1, 3)])
    >>> [(s.kind, s.text) for s in spans]
    [('plain', 'a'), ('match', '12'), ('plain', 'b34')]
"""

from collections.abc import Iterable, Sequence

from .types import Match, Span


def render(sample_text: str, matches: Sequence[Match]) -> list[Span]:
    """
    Split `sample_text` into plain and highlighted spans.

    Matches must be ordered by start index and non-overlapping, which is what
    the Match Engine produces. Empty spans are omitted, so a zero-length match
    contributes nothing. With no matches the result is a single plain span over
    the whole text, even when the text is empty.

    Args:
        sample_text: The text the matches were computed against.
        matches: The ordered, non-overlapping match list.

    Returns:
        The ordered list of spans.

    """
    if not matches:
        return [Span("plain", 0, len(sample_text), sample_text)]

    spans: list[Span] = []
    last_index = 0
    for match in matches:
        if match.start_index > last_index:
            spans.append(Span("plain", last_index, match.start_index, sample_text[last_index : match.start_index]))
        if match.end_index > match.start_index:
            spans.append(Span("match", match.start_index, match.end_index, sample_text[match.start_index : match.end_index]))
        last_index = max(last_index, match.end_index)

    if last_index < len(sample_text):
        spans.append(Span("plain", last_index, len(sample_text), sample_text[last_index:]))
    return spans


def render_markup(spans: Iterable[Span], open_marker: str = "[", close_marker: str = "]") -> str:
    """Join spans back into text, wrapping every match span in the given markers."""
    parts: list[str] = []
    for span in spans:
        if span.kind == "match":
            parts.append(f"{open_marker}{span.text}{close_marker}")
        else:
            parts.append(span.text)
    return "".join(parts)
