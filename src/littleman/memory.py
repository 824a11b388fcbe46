"""Memory and registers of the Little Man Computer.

Memory is a fixed array of 100 Values, zero on creation. It can be filled
from a memory dump: a flat sequence of 2-byte big-endian signed words, one
per cell, starting at address 0.

Registers:
    - program_counter: Address of the next instruction to fetch
    - instruction_register: Opcode digit of the current instruction
    - address_register: Address (or opcode-9 sub-code) of the current instruction
    - accumulator: The single arithmetic register
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from .errors import AddressOutOfRange, DumpFormatError, ProgramTooLarge, ValueRangeError
from .value import ZERO, Value


MEMORY_SIZE = 100
WORD_BYTES = 2


@dataclass
class Registers:
    """CPU registers.

    Attributes:
        program_counter: Next address to fetch (0-based)
        instruction_register: Opcode digit of the last fetched word
        address_register: Last two digits of the last fetched word
        accumulator: Arithmetic register
    """
    program_counter: int = 0
    instruction_register: int = 0
    address_register: int = 0
    accumulator: Value = field(default_factory=Value)

    def snapshot(self) -> dict:
        """Plain-int copy of all registers for tracing."""
        return {
            "program_counter": self.program_counter,
            "instruction_register": self.instruction_register,
            "address_register": self.address_register,
            "accumulator": int(self.accumulator),
        }

    def reset(self) -> None:
        self.program_counter = 0
        self.instruction_register = 0
        self.address_register = 0
        self.accumulator = ZERO

    def __str__(self) -> str:
        return (
            f"PC: {self.program_counter:02}, Instruction: {self.instruction_register:01}, "
            f"Addr: {self.address_register:02}, Acc: {int(self.accumulator):03}"
        )


class Memory:
    """Fixed-size, zero-initialised array of Values.

    Indexing is bounds checked and raises AddressOutOfRange rather than
    IndexError, negative indices included.
    """

    def __init__(self, size: int = MEMORY_SIZE):
        self._cells: List[Value] = [ZERO] * size

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._cells)

    def __getitem__(self, address: int) -> Value:
        self._check_address(address)
        return self._cells[address]

    def __setitem__(self, address: int, value: Value) -> None:
        self._check_address(address)
        if not isinstance(value, Value):
            raise TypeError(f"Memory cells hold Value, got {type(value).__name__}")
        self._cells[address] = value

    def _check_address(self, address: int) -> None:
        if not 0 <= address < len(self._cells):
            raise AddressOutOfRange(address)

    def clear(self) -> None:
        self._cells = [ZERO] * len(self._cells)

    def snapshot(self) -> List[int]:
        return [int(cell) for cell in self._cells]

    def load_values(self, values: Iterable[Value], start: int = 0) -> int:
        """Place a sequence of words into memory starting at `start`.

        Returns:
            Number of cells written

        Raises:
            ProgramTooLarge: If the words don't fit (memory is left untouched)
        """
        words = [v if isinstance(v, Value) else Value(v) for v in values]
        if start < 0 or start + len(words) > len(self._cells):
            raise ProgramTooLarge(start + len(words), len(self._cells))
        self._cells[start:start + len(words)] = words
        return len(words)

    def load_bytes(self, data: bytes) -> int:
        """Load a memory dump.

        Bytes are consumed in pairs, high byte first. A short dump only
        touches the leading cells; a trailing odd byte is taken as a high
        byte with a zero low byte. Anything past the end of memory is
        ignored.

        Returns:
            Number of cells touched

        Raises:
            DumpFormatError: If a word is outside [-999, 999] (memory is left untouched)
        """
        data = bytes(data[:len(self._cells) * WORD_BYTES])
        if len(data) % WORD_BYTES:
            data += b"\x00"
        words = []
        for address in range(len(data) // WORD_BYTES):
            chunk = data[address * WORD_BYTES:(address + 1) * WORD_BYTES]
            try:
                words.append(Value.from_bytes(chunk))
            except ValueRangeError as e:
                raise DumpFormatError(address, e.value) from None
        self._cells[:len(words)] = words
        return len(words)

    def to_bytes(self, length: Optional[int] = None) -> bytes:
        """Serialise memory as a dump (all cells, or the first `length`)."""
        cells = self._cells if length is None else self._cells[:length]
        return values_to_bytes(cells)

    def __str__(self) -> str:
        rows = []
        for row_start in range(0, len(self._cells), 10):
            row = self._cells[row_start:row_start + 10]
            rows.append(" ".join(f"{int(cell):03}" for cell in row))
        return "\n".join(rows)


def values_to_bytes(values: Iterable[Value]) -> bytes:
    """Encode words as a memory dump."""
    return b"".join(v.to_bytes() for v in values)
