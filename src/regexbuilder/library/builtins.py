"""Loading of the read-only built-in pattern set."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from regexbuilder.config import load_yaml
from regexbuilder.types import PatternEntry, User, provenance_of

logger = logging.getLogger(__name__)

BUILTIN_PATTERNS_FILE = Path(__file__).with_name("builtin_patterns.yaml")

_ENTRY_LIST = TypeAdapter(list[PatternEntry])


def load_builtin_patterns(path: Path | None = None) -> tuple[PatternEntry, ...]:
    """
    Load built-in patterns from a YAML file.

    Args:
        path: The YAML file to read. Defaults to the set shipped with the package.

    Raises:
        ValueError: If the file is not a list of pattern entries, or an entry
            carries a user-provenance id.

    """
    source = path or BUILTIN_PATTERNS_FILE
    try:
        entries = _ENTRY_LIST.validate_python(load_yaml(source) or [])
    except ValidationError as e:
        msg = f"Invalid built-in pattern file {source}: {e}"
        raise ValueError(msg) from e

    for entry in entries:
        if isinstance(provenance_of(entry.id), User):
            msg = f"Built-in pattern '{entry.id}' uses the reserved user id prefix."
            raise ValueError(msg)

    logger.debug("Loaded %d built-in patterns from %s", len(entries), source)
    return tuple(entries)


@lru_cache(maxsize=1)
def default_builtin_patterns() -> tuple[PatternEntry, ...]:
    """Return the shipped built-in patterns, loaded once per process."""
    return load_builtin_patterns()
