"""Input and output devices attached to the accumulator.

OutputSink collects what OUT and OTC produce. Input sources feed INP:

    - ScriptedInput: a fixed queue of values, for tests and batch runs
    - InteractiveInput: prompts on a terminal until a valid number is typed
"""

import logging
import sys
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Iterable, Iterator, List, Optional

from .errors import InputExhausted, ValueRangeError
from .value import Value


logger = logging.getLogger(__name__)


class OutputSink:
    """Append-only output buffer.

    Two numbers emitted back to back are separated by a newline; characters
    are appended as they are.

    Attributes:
        stream: Optional callback receiving each emission as it is produced
    """

    def __init__(self, stream: Optional[Callable[[str], None]] = None):
        self._buffer: List[str] = []
        self._last_was_number = False
        self.stream = stream

    def append_char(self, character: str) -> None:
        if len(character) != 1:
            raise ValueError(f"Expected a single character, got {character!r}")
        self._buffer.append(character)
        self._last_was_number = False
        if self.stream is not None:
            self.stream(character)

    def append_number(self, value: Value) -> None:
        text = str(int(value))
        if self._last_was_number:
            text = "\n" + text
        self._buffer.append(text)
        self._last_was_number = True
        if self.stream is not None:
            self.stream(text)

    def read_all(self) -> str:
        return "".join(self._buffer)

    def iter_lines(self, max_width: int) -> Iterator[str]:
        """Yield the buffer split at newlines and every `max_width` characters.

        Recomputed from the full buffer on each call. An empty buffer yields
        a single empty line.
        """
        if max_width < 1:
            raise ValueError("max_width must be at least 1")
        row: List[str] = []
        for char in self.read_all():
            if char == "\n":
                yield "".join(row)
                row = []
                continue
            if len(row) >= max_width:
                yield "".join(row)
                row = []
            row.append(char)
        yield "".join(row)

    def lines_view(self, max_width: int) -> List[str]:
        return list(self.iter_lines(max_width))

    def __len__(self) -> int:
        return len(self.read_all())


# =============================================================================
# Input sources
# =============================================================================

class InputSource(ABC):
    """Supplies values to the INP instruction."""

    @abstractmethod
    def read(self) -> Value:
        """Return the next input value.

        Raises:
            InputExhausted: If no more input is available
        """


class ScriptedInput(InputSource):
    """First-in-first-out queue of pre-supplied values."""

    def __init__(self, values: Iterable[int] = ()):
        self._queue = deque(self._coerce(v) for v in values)

    @staticmethod
    def _coerce(value) -> Value:
        return value if isinstance(value, Value) else Value.new(int(value))

    def push(self, value) -> None:
        self._queue.append(self._coerce(value))

    def remaining(self) -> int:
        return len(self._queue)

    def read(self) -> Value:
        if not self._queue:
            raise InputExhausted("Scripted input is exhausted")
        return self._queue.popleft()


class InteractiveInput(InputSource):
    """Prompts for a number until a valid one is entered.

    Args:
        prompt: Text shown before each attempt
        reader: Returns one line of input, "" at end of input
        writer: Receives the prompt text
        error_writer: Receives validation messages
    """

    def __init__(
        self,
        prompt: str = "INP: Number input: ",
        reader: Optional[Callable[[], str]] = None,
        writer: Optional[Callable[[str], None]] = None,
        error_writer: Optional[Callable[[str], None]] = None,
    ):
        self.prompt = prompt
        self._reader = reader or sys.stdin.readline
        self._writer = writer or _write_stdout
        self._error_writer = error_writer or _write_stderr

    def read(self) -> Value:
        while True:
            self._writer(self.prompt)
            line = self._reader()
            if not line:
                raise InputExhausted("End of input reached while waiting for INP")
            try:
                return Value.new(int(line.strip()))
            except ValueRangeError:
                self._error_writer("Please input an integer between -999 and 999")
            except ValueError:
                self._error_writer("Please input a valid integer between -999 and 999")
            logger.debug("Rejected input %r", line.strip())


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _write_stderr(text: str) -> None:
    print(text, file=sys.stderr)
