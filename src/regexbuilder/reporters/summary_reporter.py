"""A reporter for logging concise match-run summaries."""

import logging

from regexbuilder.flags import encode
from regexbuilder.highlight import render_markup
from regexbuilder.session import SessionResult

logger = logging.getLogger(__name__)


class SummaryReporter:
    """Logs a human-readable summary of a session result."""

    def __init__(self, open_marker: str = "[", close_marker: str = "]") -> None:
        """
        Initialize the reporter.

        Args:
            open_marker: Text inserted before every highlighted match.
            close_marker: Text inserted after every highlighted match.

        """
        self.open_marker = open_marker
        self.close_marker = close_marker

    def generate(self, result: SessionResult) -> None:
        """Log the match count, timing, highlighted text and match details."""
        flags = encode(result.flags)
        logger.info("--- Results for /%s/%s ---", result.pattern, flags)

        run = result.run
        if not run.valid:
            message = run.error.message if run.error is not None else "Invalid regex pattern."
            logger.error("Invalid regex pattern. Please fix the pattern to see matches.")
            logger.error("  %s", message)
            return

        logger.info("%d %s (%.2fms)", run.count, "match" if run.count == 1 else "matches", run.elapsed_time_ms)
        if run.count == 0:
            if result.sample_text:
                logger.info("No matches found in the test text.")
            return

        logger.info("Highlighted: %s", render_markup(result.spans, self.open_marker, self.close_marker))
        for index, match in enumerate(run.matches, start=1):
            logger.info("Match %d: position %d - %d: %r", index, match.start_index, match.end_index, match.text)
            for group_index, group in enumerate(match.groups, start=1):
                logger.info("  Group %d: %s", group_index, group or "(empty)")
            for name, value in match.named_groups.items():
                logger.info("  Group '%s': %s", name, value or "(empty)")
