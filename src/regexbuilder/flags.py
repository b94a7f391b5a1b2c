"""Conversion between structured flag sets and flag strings."""

import regex

from .types import FlagSet

# Canonical order of the flag characters in an encoded flag string.
FLAG_CODES: tuple[tuple[str, str], ...] = (
    ("global_", "g"),
    ("ignore_case", "i"),
    ("multiline", "m"),
    ("dot_all", "s"),
    ("unicode", "u"),
    ("sticky", "y"),
)

# Flags that change how the pattern compiles. 'g' and 'y' only change how it is driven.
_COMPILE_FLAGS: dict[str, int] = {
    "ignore_case": regex.IGNORECASE,
    "multiline": regex.MULTILINE,
    "dot_all": regex.DOTALL,
    "unicode": regex.UNICODE,
}


def encode(flags: FlagSet) -> str:
    """
    Encode a flag set as a flag string in canonical order.

    Examples:
        >>> encode(FlagSet(global_=True, multiline=True))
        'gm'

    """
    return "".join(code for name, code in FLAG_CODES if getattr(flags, name))


def decode(flags_string: str) -> FlagSet:
    """
    Decode a flag string into a flag set.

    A flag is set iff its code character occurs anywhere in the string, so
    ordering, duplicates and unknown characters are all ignored.
    """
    return FlagSet(**{name: code in flags_string for name, code in FLAG_CODES})


def to_compile_flags(flags: FlagSet) -> int:
    """Translate a flag set into `regex` module compile flags."""
    result = 0
    for name, bit in _COMPILE_FLAGS.items():
        if getattr(flags, name):
            result |= bit
    return result
