"""A reporter rendering highlighted match results in the terminal."""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from regexbuilder.flags import encode
from regexbuilder.session import SessionResult

MATCH_STYLES = ("black on yellow", "black on cyan")
"""Alternating background styles so adjacent matches stay distinguishable."""


class ConsoleReporter:
    """Prints the sample text with highlighted matches and a group breakdown."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the reporter with the console to print to."""
        self.console = console or Console()

    def highlight(self, result: SessionResult) -> Text:
        """Return the sample text as rich Text with every match span styled."""
        text = Text()
        match_index = 0
        for span in result.spans:
            if span.kind == "match":
                text.append(span.text, style=MATCH_STYLES[match_index % len(MATCH_STYLES)])
                match_index += 1
            else:
                text.append(span.text)
        return text

    def generate(self, result: SessionResult) -> None:
        """Print the highlighted text panel followed by one line per match."""
        title = Text(f"/{result.pattern}/{encode(result.flags)}")
        run = result.run
        if not run.valid:
            message = run.error.message if run.error is not None and run.error.message else str(run.error)
            self.console.print(Panel(Text(message, style="red"), title=title, border_style="red"))
            return

        subtitle = f"{run.count} {'match' if run.count == 1 else 'matches'} ({run.elapsed_time_ms:.2f}ms)"
        self.console.print(Panel(self.highlight(result), title=title, subtitle=subtitle, border_style="green"))

        for index, match in enumerate(run.matches, start=1):
            line = Text(f"{index}. [{match.start_index}-{match.end_index}] ")
            line.append(repr(match.text), style="bold")
            for group_index, group in enumerate(match.groups, start=1):
                line.append(f"  ${group_index}=")
                line.append("(empty)" if group is None else repr(group), style="dim" if group is None else "cyan")
            self.console.print(line)
