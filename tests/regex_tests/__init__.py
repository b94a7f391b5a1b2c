"""
Regex Library Test Suite for RegexBuilder.

These tests pin down the behaviour of the Python `regex` library that the
Match Engine builds on:

- Searching and anchoring from an offset (global and sticky iteration)
- Group reporting for participating and non-participating groups
- Flag translation (IGNORECASE, MULTILINE, DOTALL)
- Unicode text and offsets

Run tests with: pytest tests/regex_tests -v
"""
