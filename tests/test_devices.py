"""Tests for OutputSink and input sources."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from littleman.devices import InteractiveInput, OutputSink, ScriptedInput
from littleman.errors import InputExhausted, ValueRangeError
from littleman.value import Value


class TestOutputSink:
    """Test output buffering and line wrapping."""

    @pytest.fixture
    def sink(self):
        return OutputSink()

    def test_basic_line_wrapping(self, sink):
        for char in "abcde":
            sink.append_char(char)
        assert sink.lines_view(4) == ["abcd", "e"]

    @pytest.mark.parametrize("width", [1, 2, 4, 10])
    def test_numbers_on_separate_lines(self, sink, width):
        sink.append_number(Value(1))
        sink.append_number(Value(2))
        sink.append_number(Value(3))
        assert sink.lines_view(width) == ["1", "2", "3"]
        assert sink.read_all() == "1\n2\n3"

    def test_mixed_numbers_and_characters(self, sink):
        """Part of an ASCII table: no separator after a character."""
        sink.append_number(Value(33))
        sink.append_char(" ")
        sink.append_char("!")
        sink.append_number(Value(34))
        sink.append_char(" ")
        sink.append_char('"')
        assert sink.lines_view(4) == ["33 !", '34 "']

    def test_digit_character_is_not_a_number(self, sink):
        """Only a preceding OUT triggers the separator."""
        sink.append_char("5")
        sink.append_number(Value(6))
        assert sink.read_all() == "56"

    def test_negative_numbers(self, sink):
        sink.append_number(Value(-2))
        sink.append_number(Value(-3))
        assert sink.read_all() == "-2\n-3"

    def test_explicit_newlines(self, sink):
        for char in "ab\ncd":
            sink.append_char(char)
        assert sink.lines_view(4) == ["ab", "cd"]

    def test_width_resets_after_forced_break(self, sink):
        for char in "abcdefghij":
            sink.append_char(char)
        assert sink.lines_view(4) == ["abcd", "efgh", "ij"]

    def test_empty_buffer(self, sink):
        assert sink.lines_view(4) == [""]
        assert sink.read_all() == ""

    def test_view_does_not_mutate(self, sink):
        for char in "abcdefg":
            sink.append_char(char)
        sink.lines_view(2)
        sink.lines_view(3)
        assert sink.read_all() == "abcdefg"
        assert sink.lines_view(4) == ["abcd", "efg"]

    def test_view_reflects_later_appends(self, sink):
        sink.append_char("a")
        assert sink.lines_view(4) == ["a"]
        sink.append_char("b")
        assert sink.lines_view(4) == ["ab"]

    def test_invalid_width(self, sink):
        with pytest.raises(ValueError):
            sink.lines_view(0)

    def test_append_char_requires_single_character(self, sink):
        with pytest.raises(ValueError):
            sink.append_char("ab")

    def test_stream_receives_emissions(self):
        emitted = []
        sink = OutputSink(stream=emitted.append)
        sink.append_number(Value(1))
        sink.append_number(Value(2))
        sink.append_char("x")
        assert emitted == ["1", "\n2", "x"]
        assert sink.read_all() == "".join(emitted)


class TestScriptedInput:
    """Test the scripted FIFO input source."""

    def test_fifo_order(self):
        source = ScriptedInput([3, -5])
        assert source.read() == 3
        assert source.read() == -5

    def test_exhausted(self):
        source = ScriptedInput([1])
        source.read()
        with pytest.raises(InputExhausted):
            source.read()

    def test_empty(self):
        with pytest.raises(InputExhausted):
            ScriptedInput().read()

    def test_values_validated(self):
        with pytest.raises(ValueRangeError):
            ScriptedInput([1000])

    def test_push_and_remaining(self):
        source = ScriptedInput([Value(1)])
        source.push(2)
        assert source.remaining() == 2
        assert source.read() == 1
        assert source.read() == 2
        assert source.remaining() == 0


class TestInteractiveInput:
    """Test prompting with injected reader and writers."""

    def _make(self, lines):
        feed = iter(lines)
        prompts, errors = [], []
        source = InteractiveInput(
            prompt="? ",
            reader=lambda: next(feed, ""),
            writer=prompts.append,
            error_writer=errors.append,
        )
        return source, prompts, errors

    def test_valid_input(self):
        source, prompts, errors = self._make(["42\n"])
        assert source.read() == 42
        assert prompts == ["? "]
        assert errors == []

    def test_retries_until_valid(self):
        source, prompts, errors = self._make(["abc\n", "1000\n", " -7 \n"])
        assert source.read() == -7
        assert len(prompts) == 3
        assert errors == [
            "Please input a valid integer between -999 and 999",
            "Please input an integer between -999 and 999",
        ]

    def test_end_of_input(self):
        source, _, _ = self._make([])
        with pytest.raises(InputExhausted):
            source.read()
