"""A reporter for machine-readable match-run output."""

import json
from typing import Any

from regexbuilder.flags import encode
from regexbuilder.session import SessionResult


class JsonReporter:
    """Serializes a session result, its spans and its input as JSON."""

    def __init__(self, indent: int | None = 2) -> None:
        """Initialize the reporter with the JSON indentation to use."""
        self.indent = indent

    def generate(self, result: SessionResult) -> str:
        """Return the JSON document for a session result."""
        document: dict[str, Any] = {
            "pattern": result.pattern,
            "flags": encode(result.flags),
            **result.run.to_dict(),
            "spans": [{"kind": s.kind, "start": s.start, "end": s.end, "text": s.text} for s in result.spans],
        }
        return json.dumps(document, indent=self.indent, ensure_ascii=False)
