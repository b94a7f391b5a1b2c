"""Tests for the Match Engine."""

import unittest
from unittest.mock import MagicMock

from regexbuilder.engine import MatchEngine, RegexPrimitive
from regexbuilder.errors import MatchExecutionError, PatternCompileError
from regexbuilder.flags import decode
from regexbuilder.match_state import ERROR_TIMEOUT, RunState
from regexbuilder.types import FlagSet, Match, MatchRun


class _EveryPositionMatcher:
    """A fake matcher that reports an empty match at whatever index it is asked for."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    def exec_from(self, text: str, index: int) -> Match | None:
        self.calls.append(index)
        return Match("", index, index)


class _RaisingMatcher:
    """A fake matcher that raises the given exception on execution."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def exec_from(self, text: str, index: int) -> Match | None:
        raise self.error


class _FakePrimitive:
    def __init__(self, matcher: object) -> None:
        self.matcher = matcher
        self.compiled: list[tuple[str, str]] = []

    def compile(self, pattern: str, flags: str) -> object:
        self.compiled.append((pattern, flags))
        return self.matcher


def _assert_non_overlapping(run: MatchRun) -> None:
    for current, following in zip(run.matches, run.matches[1:], strict=False):
        assert current.end_index <= following.start_index


class TestValidate(unittest.TestCase):
    """Test suite for MatchEngine.validate."""

    def setUp(self) -> None:
        """Create an engine over the regex primitive."""
        self.engine = MatchEngine()

    def test_empty_pattern_is_valid(self) -> None:
        """1. Empty: The empty pattern is always valid."""
        assert self.engine.validate("", FlagSet()) is None

    def test_valid_pattern(self) -> None:
        """2. Valid: A compilable pattern has no error."""
        assert self.engine.validate(r"\d+", FlagSet(global_=True)) is None

    def test_invalid_pattern_returns_message(self) -> None:
        """3. Invalid: An uncompilable pattern returns the compiler's message."""
        error = self.engine.validate("[abc", FlagSet())
        assert isinstance(error, str)
        assert error

    def test_validate_does_not_change_state(self) -> None:
        """4. State: Validation alone leaves the run state untouched."""
        self.engine.validate("(", FlagSet())
        assert self.engine.state == RunState.IDLE

    def test_deeply_nested_pattern_returns_message(self) -> None:
        """5. Nesting: A pattern too deep for the parser is reported, not raised."""
        pattern = "(" * 2000 + ")" * 2000
        error = self.engine.validate(pattern, FlagSet())
        assert isinstance(error, str)
        run = self.engine.run(pattern, FlagSet(global_=True), "abc")
        assert not run.valid
        assert run.error is not None
        assert run.error.category == "compile"


class TestRun(unittest.TestCase):
    """Test suite for MatchEngine.run with the regex primitive."""

    def setUp(self) -> None:
        """Create an engine over the regex primitive."""
        self.engine = MatchEngine()

    def test_zero_length_matches_make_progress(self) -> None:
        """1. Zero-Length: 'x*' global on 'abc' yields 4 empty matches at 0..3."""
        run = self.engine.run("x*", FlagSet(global_=True), "abc")
        assert run.valid
        assert [(m.start_index, m.end_index, m.text) for m in run.matches] == [(0, 0, ""), (1, 1, ""), (2, 2, ""), (3, 3, "")]

    def test_single_match_mode(self) -> None:
        """2. Single Match: Without 'g' only the first match is collected."""
        run = self.engine.run(r"\d+", FlagSet(), "a12b34")
        assert run.count == 1
        match = run.matches[0]
        assert (match.text, match.start_index, match.end_index) == ("12", 1, 3)

    def test_global_mode_with_groups(self) -> None:
        """3. Groups: '(\\d)(\\d)' global on '12 34' yields two matches with two groups each."""
        run = self.engine.run(r"(\d)(\d)", FlagSet(global_=True), "12 34")
        assert [m.groups for m in run.matches] == [("1", "2"), ("3", "4")]

    def test_non_participating_group_is_absent(self) -> None:
        """4. Absent Group: A group that does not participate is None."""
        run = self.engine.run(r"(a)|(b)", FlagSet(), "b")
        assert run.matches[0].groups == (None, "b")

    def test_named_groups(self) -> None:
        """5. Named Groups: Named groups are exposed by name and by position."""
        run = self.engine.run(r"(?P<year>\d{4})-(?P<month>\d{2})", FlagSet(), "on 2024-05")
        match = run.matches[0]
        assert match.named_groups == {"year": "2024", "month": "05"}
        assert match.groups == ("2024", "05")

    def test_mixed_empty_and_non_empty_matches(self) -> None:
        """6. Mixed: 'a*' on 'baaa' finds the empty match, the run, and the trailing empty match."""
        run = self.engine.run("a*", FlagSet(global_=True), "baaa")
        assert [(m.start_index, m.end_index) for m in run.matches] == [(0, 0), (1, 4), (4, 4)]
        _assert_non_overlapping(run)

    def test_matches_never_overlap(self) -> None:
        """7. Non-Overlap: Consecutive matches never overlap."""
        for pattern, text in [(r"\w+", "one two  three"), ("aa", "aaaaa"), (r"\b", "ab cd"), (".", "xyz")]:
            run = self.engine.run(pattern, FlagSet(global_=True), text)
            _assert_non_overlapping(run)
            for match in run.matches:
                assert text[match.start_index : match.end_index] == match.text

    def test_flags_are_applied(self) -> None:
        """8. Flags: Ignore-case and multiline change the result."""
        assert self.engine.run("hello", decode("g"), "Hello HELLO").count == 0
        assert self.engine.run("hello", decode("gi"), "Hello HELLO").count == 2
        assert self.engine.run(r"^\d", decode("g"), "1\n2\n3").count == 1
        assert self.engine.run(r"^\d", decode("gm"), "1\n2\n3").count == 3

    def test_sticky_requires_adjacent_matches(self) -> None:
        """9. Sticky: Matches must start exactly where the previous one ended."""
        assert self.engine.run("a", decode("gy"), "aab").count == 2
        assert self.engine.run("a", decode("gy"), "baa").count == 0
        assert self.engine.run("a", decode("y"), "ba").count == 0

    def test_empty_inputs_short_circuit(self) -> None:
        """10. Short Circuit: Empty pattern or text returns an empty valid run without compiling."""
        primitive = MagicMock()
        engine = MatchEngine(primitive)
        for pattern, text in [("", "abc"), ("a", ""), ("", "")]:
            run = engine.run(pattern, FlagSet(global_=True), text)
            assert run == MatchRun()
            assert run.elapsed_time_ms == 0.0
        primitive.compile.assert_not_called()

    def test_elapsed_time_is_recorded(self) -> None:
        """11. Timing: A successful run records a non-negative elapsed time."""
        run = self.engine.run(r"\w", FlagSet(global_=True), "abc")
        assert run.elapsed_time_ms >= 0.0
        assert run.error is None

    def test_log_records_carry_pattern_and_flags(self) -> None:
        """12. Logging: Run records carry the pattern and flag string for the debug log."""
        with self.assertLogs("regexbuilder.engine", level="DEBUG") as cm:
            self.engine.run(r"\w", FlagSet(global_=True, ignore_case=True), "abc")
        record = cm.records[-1]
        assert (record.pattern, record.flags) == (r"\w", "gi")


class TestStateMachine(unittest.TestCase):
    """Test suite for the engine's run state transitions."""

    def test_invalid_pattern(self) -> None:
        """1. Invalid: A compile failure ends in INVALID with a compile error."""
        engine = MatchEngine()
        run = engine.run("(unclosed", FlagSet(global_=True), "text")
        assert engine.state == RunState.INVALID
        assert not run.valid
        assert run.matches == ()
        assert run.error is not None
        assert run.error.category == "compile"
        assert engine.last_run is run

    def test_successful_run_is_ready(self) -> None:
        """2. Ready: A successful run ends in READY."""
        engine = MatchEngine()
        engine.run("a", FlagSet(), "a")
        assert engine.state == RunState.READY

    def test_new_input_restarts_from_validation(self) -> None:
        """3. Restart: A valid run after an invalid one leaves INVALID behind."""
        engine = MatchEngine()
        engine.run("(", FlagSet(), "x")
        assert engine.state == RunState.INVALID
        engine.run("x", FlagSet(), "x")
        assert engine.state == RunState.READY


class TestFakePrimitive(unittest.TestCase):
    """Test suite driving the engine loop with fake matchers."""

    def test_compiles_once_with_encoded_flags(self) -> None:
        """1. Compile Once: The primitive is compiled once with the canonical flag string."""
        primitive = _FakePrimitive(_EveryPositionMatcher())
        MatchEngine(primitive).run("p", decode("mg"), "ab")
        assert primitive.compiled == [("p", "gm")]

    def test_guard_terminates_on_empty_matches_everywhere(self) -> None:
        """2. Progress: A matcher matching empty everywhere is visited once per position."""
        matcher = _EveryPositionMatcher()
        run = MatchEngine(_FakePrimitive(matcher)).run("p", FlagSet(global_=True), "abcd")
        assert matcher.calls == [0, 1, 2, 3, 4]
        assert run.count == 5

    def test_non_global_searches_once_from_zero(self) -> None:
        """3. Single Search: Without 'g' the matcher is called exactly once at 0."""
        matcher = _EveryPositionMatcher()
        MatchEngine(_FakePrimitive(matcher)).run("p", FlagSet(), "abcd")
        assert matcher.calls == [0]

    def test_runtime_failure_becomes_invalid_run(self) -> None:
        """4. Runtime Failure: An exception while matching yields an invalid, empty run."""
        engine = MatchEngine(_FakePrimitive(_RaisingMatcher(RuntimeError("boom"))))
        with self.assertLogs("regexbuilder.engine", level="WARNING"):
            run = engine.run("p", FlagSet(global_=True), "abc")
        assert not run.valid
        assert run.matches == ()
        assert run.error is not None
        assert run.error.category == "execution"
        assert run.error.message == "boom"
        assert engine.state == RunState.READY

    def test_timeout_becomes_timeout_error(self) -> None:
        """5. Timeout: A TimeoutError from the primitive maps to the timeout run error."""
        engine = MatchEngine(_FakePrimitive(_RaisingMatcher(TimeoutError("regex timed out"))))
        with self.assertLogs("regexbuilder.engine", level="WARNING"):
            run = engine.run("p", FlagSet(), "abc")
        assert run.error == ERROR_TIMEOUT

    def test_matcher_error_becomes_execution_error(self) -> None:
        """6. Matcher Error: A MatchExecutionError is reported as a runtime execution error."""
        engine = MatchEngine(_FakePrimitive(_RaisingMatcher(MatchExecutionError("bad state"))))
        with self.assertLogs("regexbuilder.engine", level="WARNING"):
            run = engine.run("p", FlagSet(), "abc")
        assert run.error is not None
        assert (run.error.code, run.error.message) == ("runtime", "bad state")


class TestRegexPrimitive(unittest.TestCase):
    """Test suite for the regex-backed primitive."""

    def test_compile_error_is_wrapped(self) -> None:
        """1. Compile Error: regex errors surface as PatternCompileError."""
        with self.assertRaises(PatternCompileError):
            RegexPrimitive().compile("a{2,1}", "")

    def test_exec_from_respects_start_index(self) -> None:
        """2. Offset: Searching from an index skips earlier matches."""
        matcher = RegexPrimitive().compile(r"\d", "")
        found = matcher.exec_from("1a2", 1)
        assert found is not None
        assert (found.text, found.start_index) == ("2", 2)

    def test_exec_from_returns_none_without_match(self) -> None:
        """3. No Match: None is returned when nothing matches."""
        assert RegexPrimitive().compile("z", "").exec_from("abc", 0) is None


if __name__ == "__main__":
    unittest.main()
