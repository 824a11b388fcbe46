"""Tests for the Value machine word."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from littleman.errors import DigitsOutOfRange, EncodeError, ValueRangeError
from littleman.value import VALUE_MAX, VALUE_MIN, Value


class TestValueConstruction:
    """Test the validated constructor."""

    def test_default_is_zero(self):
        assert Value() == 0
        assert Value().is_zero()

    @pytest.mark.parametrize("number", [VALUE_MIN, -1, 0, 1, VALUE_MAX])
    def test_accepts_range(self, number):
        assert int(Value.new(number)) == number

    @pytest.mark.parametrize("number", [1000, -1000, 5000, -32768])
    def test_rejects_out_of_range(self, number):
        with pytest.raises(ValueRangeError) as excinfo:
            Value.new(number)
        assert excinfo.value.value == number

    def test_range_error_is_value_error(self):
        """ValueRangeError can be caught as a plain ValueError."""
        with pytest.raises(ValueError):
            Value(1000)

    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            Value(1.5)
        with pytest.raises(TypeError):
            Value(True)

    def test_immutable(self):
        value = Value(5)
        with pytest.raises(AttributeError):
            value._value = 6
        assert value == 5


class TestWrapOverflow:
    """Test wrapping arithmetic."""

    def test_wrap_stays_in_range(self):
        """Every integer in [-1998, 1998] wraps into the domain."""
        for number in range(-1998, 1999):
            wrapped = Value.wrap(number)
            assert VALUE_MIN <= int(wrapped) <= VALUE_MAX

    def test_wrap_identity_in_range(self):
        for number in range(VALUE_MIN, VALUE_MAX + 1):
            assert Value.wrap(number) == number

    @pytest.mark.parametrize("number,expected", [
        (1000, -999),
        (1011, -988),
        (1998, -1),
        (-1000, 999),
        (-1998, 1),
    ])
    def test_wrap_examples(self, number, expected):
        assert Value.wrap(number) == expected

    def test_wrap_far_out_of_range(self):
        assert Value.wrap(1999 * 3 + 5) == 5
        assert Value.wrap(-1999 * 2 - 5) == -5

    def test_add_wraps(self):
        assert Value(999) + Value(1) == -999
        assert Value(990) + Value(21) == -988

    def test_sub_wraps(self):
        assert Value(-999) - Value(1) == 999
        assert Value(-500) - Value(600) == 899

    def test_add_with_int(self):
        assert Value(10) + 5 == 15
        assert 5 + Value(10) == 15
        assert 5 - Value(10) == -5

    def test_arithmetic_returns_new_value(self):
        a = Value(1)
        b = a + Value(1)
        assert a == 1
        assert b == 2
        assert isinstance(b, Value)


class TestDigits:
    """Test opcode/address composition and decomposition."""

    def test_from_digits_round_trip(self):
        for opcode in range(10):
            for address in range(100):
                value = Value.from_digits(opcode, address)
                assert value.first_digit == opcode
                assert value.last_two_digits == address

    @pytest.mark.parametrize("opcode,address", [(10, 0), (-1, 0), (0, 100), (1, -1)])
    def test_from_digits_out_of_range(self, opcode, address):
        with pytest.raises(DigitsOutOfRange) as excinfo:
            Value.from_digits(opcode, address)
        assert isinstance(excinfo.value, EncodeError)

    def test_negative_digits_truncate_toward_zero(self):
        value = Value(-150)
        assert value.first_digit == -1
        assert value.last_two_digits == -50

    def test_small_negative(self):
        value = Value(-5)
        assert value.first_digit == 0
        assert value.last_two_digits == -5


class TestPredicatesAndComparison:
    """Test sign predicates, equality and ordering."""

    def test_predicates(self):
        assert Value(0).is_zero()
        assert Value(0).is_non_negative()
        assert not Value(0).is_negative()
        assert Value(-1).is_negative()
        assert not Value(-1).is_non_negative()
        assert Value(1).is_non_negative()

    def test_equality(self):
        assert Value(5) == Value(5)
        assert Value(5) == 5
        assert Value(5) != Value(6)
        assert Value(5) != "5"

    def test_hash_matches_int(self):
        assert hash(Value(42)) == hash(42)
        assert len({Value(1), Value(1), Value(2)}) == 2

    def test_ordering(self):
        assert Value(-1) < Value(0)
        assert Value(3) >= 3
        assert sorted([Value(3), Value(-2), Value(0)]) == [-2, 0, 3]

    def test_str_and_repr(self):
        assert str(Value(-42)) == "-42"
        assert repr(Value(7)) == "Value(7)"
        assert f"{Value(7):03}" == "007"


class TestByteEncoding:
    """Test 2-byte big-endian persistence."""

    def test_to_bytes(self):
        assert Value(901).to_bytes() == b"\x03\x85"
        assert Value(-5).to_bytes() == b"\xff\xfb"
        assert Value(0).to_bytes() == b"\x00\x00"

    def test_from_bytes(self):
        assert Value.from_bytes(b"\x03\x85") == 901
        assert Value.from_bytes(b"\xff\xfb") == -5

    def test_from_bytes_out_of_range(self):
        with pytest.raises(ValueRangeError):
            Value.from_bytes(b"\x03\xe8")
