"""Value: the machine word of the Little Man Computer.

Every memory cell and the accumulator hold a Value, a signed integer in
[-999, 999]. Values are immutable. Arithmetic never fails: sums and
differences that leave the range wrap around on a 1999-wide modulus, so
999 + 1 becomes -999.

A word doubles as an instruction: the leading digit is the opcode and the
last two digits are the address (see `first_digit` / `last_two_digits`).
"""

import struct
from typing import Union

from .errors import DigitsOutOfRange, ValueRangeError


VALUE_MIN = -999
VALUE_MAX = 999
# Number of representable values
MODULUS = VALUE_MAX - VALUE_MIN + 1

_WORD = struct.Struct(">h")


class Value:
    """Immutable signed machine word in [-999, 999].

    Compares equal to a plain int holding the same number, so machine code
    can be checked against literal lists like ``[901, 399, 0]``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int = 0):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Value requires an int, got {type(value).__name__}")
        if value < VALUE_MIN or value > VALUE_MAX:
            raise ValueRangeError(value)
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError("Value is immutable")

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def new(cls, value: int) -> "Value":
        """Validated constructor, raises ValueRangeError outside [-999, 999]."""
        return cls(value)

    @classmethod
    def wrap(cls, value: int) -> "Value":
        """Build a Value from any integer, wrapping overflow.

        Above 999 subtracts 1999, below -999 adds 1999 (repeatedly, for
        integers further out than one modulus).
        """
        return cls(((value - VALUE_MIN) % MODULUS) + VALUE_MIN)

    @classmethod
    def from_digits(cls, opcode_digit: int, last_two: int) -> "Value":
        """Compose an instruction word from its opcode digit and address.

        Raises:
            DigitsOutOfRange: If opcode_digit is not 0-9 or last_two is not 0-99
        """
        if not 0 <= opcode_digit <= 9 or not 0 <= last_two <= 99:
            raise DigitsOutOfRange(opcode_digit, last_two)
        return cls(opcode_digit * 100 + last_two)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Value":
        """Decode a 2-byte big-endian signed word."""
        (word,) = _WORD.unpack(data)
        return cls(word)

    # =========================================================================
    # Digits
    # =========================================================================

    @property
    def first_digit(self) -> int:
        # Truncates toward zero: -150 -> -1
        quotient = abs(self._value) // 100
        return -quotient if self._value < 0 else quotient

    @property
    def last_two_digits(self) -> int:
        # Sign follows the value: -150 -> -50
        return self._value - self.first_digit * 100

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_zero(self) -> bool:
        return self._value == 0

    def is_negative(self) -> bool:
        return self._value < 0

    def is_non_negative(self) -> bool:
        return self._value >= 0

    # =========================================================================
    # Arithmetic (wrapping)
    # =========================================================================

    def __add__(self, other: Union["Value", int]) -> "Value":
        if isinstance(other, (Value, int)):
            return Value.wrap(self._value + int(other))
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other: Union["Value", int]) -> "Value":
        if isinstance(other, (Value, int)):
            return Value.wrap(self._value - int(other))
        return NotImplemented

    def __rsub__(self, other: int) -> "Value":
        if isinstance(other, int):
            return Value.wrap(other - self._value)
        return NotImplemented

    # =========================================================================
    # Conversions and comparisons
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Encode as a 2-byte big-endian signed word."""
        return _WORD.pack(self._value)

    def __int__(self) -> int:
        return self._value

    def __eq__(self, other) -> bool:
        if isinstance(other, Value):
            return self._value == other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == other
        return NotImplemented

    def __lt__(self, other) -> bool:
        if isinstance(other, (Value, int)):
            return self._value < int(other)
        return NotImplemented

    def __le__(self, other) -> bool:
        if isinstance(other, (Value, int)):
            return self._value <= int(other)
        return NotImplemented

    def __gt__(self, other) -> bool:
        if isinstance(other, (Value, int)):
            return self._value > int(other)
        return NotImplemented

    def __ge__(self, other) -> bool:
        if isinstance(other, (Value, int)):
            return self._value >= int(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __reduce__(self):
        return (Value, (self._value,))

    def __repr__(self) -> str:
        return f"Value({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __format__(self, format_spec: str) -> str:
        return format(self._value, format_spec)


ZERO = Value(0)
