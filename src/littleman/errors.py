"""Error taxonomy for the Little Man Computer.

Two families, so callers can tell a bad program from a bad environment:

    ProgramError       - the program (source, dump or machine code) is wrong
        ValueRangeError, ParseError, EncodeError, RuntimeFault,
        InputExhausted, DumpFormatError
    MachineIOError     - reading or writing a file failed
        DumpReadError, SourceReadError, DumpWriteError
"""

from typing import Optional


class LittleManError(Exception):
    """Base class for every error raised by the package."""


class ProgramError(LittleManError):
    """The program being assembled, loaded or run is invalid."""


class ValueRangeError(ProgramError, ValueError):
    """An integer does not fit in a machine word."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Value out of range: {value} (must be between -999 and 999)")


# =============================================================================
# Assembly: parsing
# =============================================================================

class ParseError(ProgramError):
    """A source line could not be parsed.

    Attributes:
        line: 1-based source line number
        token: The offending token
    """

    def __init__(self, message: str, line: int, token: str):
        self.line = line
        self.token = token
        super().__init__(f"Parse error on line {line}: {message}")


class InvalidOpcode(ParseError):
    def __init__(self, token: str, line: int):
        super().__init__(f"Invalid opcode: {token}", line, token)


class OperandOutOfRange(ParseError):
    def __init__(self, value: int, line: int):
        self.value = value
        super().__init__(f"Operand out of range: {value}", line, str(value))


# =============================================================================
# Assembly: encoding
# =============================================================================

class EncodeError(ProgramError):
    """The parsed program could not be turned into machine code."""


class LabelNotFound(EncodeError):
    def __init__(self, label: str, line: Optional[int] = None):
        self.label = label
        self.line = line
        where = f" (line {line})" if line is not None else ""
        super().__init__(f"Label not found: {label}{where}")


class DuplicateLabel(EncodeError):
    def __init__(self, label: str, line: int, first_line: int):
        self.label = label
        self.line = line
        self.first_line = first_line
        super().__init__(
            f"Label {label} on line {line} is already defined on line {first_line}"
        )


class DigitsOutOfRange(EncodeError):
    """Opcode digit or address does not fit the 1+2 digit instruction layout."""

    def __init__(self, opcode_digit: int, address: int):
        self.opcode_digit = opcode_digit
        self.address = address
        super().__init__(
            f"Cannot encode opcode {opcode_digit} with address {address}: "
            "opcode must be 0-9 and address 0-99"
        )


class DataOutOfRange(EncodeError):
    def __init__(self, value: int, line: Optional[int] = None):
        self.value = value
        self.line = line
        super().__init__(f"DAT: Value out of range: {value}")


class ProgramTooLarge(EncodeError):
    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program has {size} words but memory holds {capacity}")


# =============================================================================
# Execution
# =============================================================================

class RuntimeFault(ProgramError):
    """Unrecoverable fault during execution.

    Attributes:
        program_counter: PC at the time of the fault (after increment)
        opcode: Instruction register contents, if decoded
    """

    def __init__(self, message: str, program_counter: Optional[int] = None,
                 opcode: Optional[int] = None):
        self.program_counter = program_counter
        self.opcode = opcode
        super().__init__(message)


class ReservedOpcode(RuntimeFault):
    def __init__(self, program_counter: Optional[int] = None):
        super().__init__("Opcode 4 is not allowed!", program_counter, 4)


class UnhandledOpcode(RuntimeFault):
    def __init__(self, opcode: int, program_counter: Optional[int] = None):
        super().__init__(f"Unhandled opcode: {opcode}", program_counter, opcode)


class AddressOutOfRange(RuntimeFault):
    def __init__(self, address: int, program_counter: Optional[int] = None):
        self.address = address
        super().__init__(f"Address out of range: {address}", program_counter)


class MachineHalted(RuntimeFault):
    def __init__(self):
        super().__init__("Computer is halted")


class InputExhausted(ProgramError):
    """INP executed with no input left to read."""

    def __init__(self, message: str = "No input left for INP"):
        super().__init__(message)


class DumpFormatError(ProgramError):
    """A memory dump holds a word outside the machine's value domain."""

    def __init__(self, address: int, word: int):
        self.address = address
        self.word = word
        super().__init__(f"Memory dump word {word} at address {address} is out of range")


# =============================================================================
# Environment I/O
# =============================================================================

class MachineIOError(LittleManError, OSError):
    """Reading or writing a file failed."""

    def __init__(self, action: str, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to {action} {path}: {cause}")


class DumpReadError(MachineIOError):
    def __init__(self, path, cause: Exception):
        super().__init__("read memory dump", path, cause)


class SourceReadError(MachineIOError):
    def __init__(self, path, cause: Exception):
        super().__init__("read input file", path, cause)


class DumpWriteError(MachineIOError):
    def __init__(self, path, cause: Exception):
        super().__init__("write to output file", path, cause)
