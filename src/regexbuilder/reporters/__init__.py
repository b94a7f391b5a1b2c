"""Exposes the reporters for use by other modules."""

from .console_reporter import ConsoleReporter
from .json_reporter import JsonReporter
from .summary_reporter import SummaryReporter

__all__ = ["ConsoleReporter", "JsonReporter", "SummaryReporter"]
