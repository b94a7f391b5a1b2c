"""Exception hierarchy for RegexBuilder."""


class RegexBuilderError(Exception):
    """Base class for all RegexBuilder errors."""


class PatternCompileError(RegexBuilderError):
    """Raised by a matching primitive when a pattern and flags fail to compile."""


class ImportFormatError(RegexBuilderError):
    """Raised when a bulk pattern import is not a well-formed sequence of entries."""


class MatchExecutionError(RegexBuilderError):
    """Raised by a matcher when executing a compiled pattern fails."""
