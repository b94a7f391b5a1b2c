"""Custom logging utilities for the RegexBuilder application."""

import logging
import sys
import time
from logging import FileHandler
from pathlib import Path

from . import paths


class _UTCMicrosecondFormatter(logging.Formatter):
    """Formats timestamps in UTC with 6-digit microseconds and a 'Z' suffix."""

    converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with 6-digit microseconds and a 'Z' for UTC."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt, ct) if datefmt else time.strftime(self.default_time_format, ct)
        microseconds = int((record.created - int(record.created)) * 1_000_000)
        return f"{s}.{microseconds:06d}Z"


class ConsoleFormatter(_UTCMicrosecondFormatter):
    """A custom formatter for console output to provide clean, user-friendly logs."""

    def __init__(self, version: str) -> None:
        """
        Initialize the formatter with the application version.

        Args:
            version: The RegexBuilder application version.

        """
        super().__init__(
            fmt=f"%(asctime)s | RegexBuilder - {version} | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


class FileFormatter(_UTCMicrosecondFormatter):
    """
    A detailed formatter for debug log files, aimed at developers.

    Records logged with a `pattern` extra (and optionally `flags`) get the
    pattern appended as a `/pattern/flags` literal, so every line of a run can
    be traced back to the input that produced it.
    """

    def __init__(self) -> None:
        """Initialize the detailed file formatter."""
        super().__init__(
            fmt="%(asctime)s | %(name)-24s | %(funcName)-20s:%(lineno)-4d | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, appending the pattern under test when one is attached."""
        line = super().format(record)
        pattern = getattr(record, "pattern", None)
        if pattern is None:
            return line
        return f"{line} | /{pattern}/{getattr(record, 'flags', '')}"


def setup_logging(version: str, *, debug: bool = False, data_dir: Path | None = None) -> None:
    """
    Configure the root logger for the RegexBuilder application.

    This function sets up a dual-logging system:
    1.  Console: User-facing messages. Level is INFO by default, DEBUG if debug=True.
    2.  File (DEBUG): Developer-facing, detailed logs written to 'debug.log' in the
        log directory when debug=True.

    Args:
        version: The application version, included in console logs.
        debug: If True, enables detailed file logging and sets console level to DEBUG.
        data_dir: Overrides the data directory the log directory lives in.

    """
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    level = logging.DEBUG if debug else logging.INFO
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter(version))
    root_logger.addHandler(console_handler)

    if debug:
        try:
            log_dir = paths.get_log_dir(data_dir)
            paths.ensure_dir_exists(log_dir)
            log_file_path = log_dir / "debug.log"

            file_handler = FileHandler(log_file_path, mode="w", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(FileFormatter())
            root_logger.addHandler(file_handler)

            logging.getLogger().info(
                "Debug mode enabled. Console level set to DEBUG. Detailed logs will be written to %s",
                log_file_path,
            )
        except Exception:
            # Console logging keeps working without the file handler
            logging.getLogger().exception("Failed to create debug log file. Continuing with console logging only.")
