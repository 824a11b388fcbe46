"""Instruction set of the Little Man Computer.

A machine word is decoded as ``opcode * 100 + address``:

    | Opcode | Mnemonic | Effect                                        |
    |--------|----------|-----------------------------------------------|
    | 0      | HLT      | Stop                                          |
    | 1      | ADD      | acc += mem[addr]                              |
    | 2      | SUB      | acc -= mem[addr]                              |
    | 3      | STA      | mem[addr] = acc                               |
    | 4      | -        | Reserved, faults                              |
    | 5      | LDA      | acc = mem[addr]                               |
    | 6      | BRA      | pc = addr                                     |
    | 7      | BRZ      | pc = addr if acc == 0                         |
    | 8      | BRP      | pc = addr if acc >= 0                         |
    | 9      | INP/OUT/OTC | I/O, selected by addr: 01, 02, 22          |
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from .errors import UnhandledOpcode
from .value import Value


class Opcode(IntEnum):
    HLT = 0
    ADD = 1
    SUB = 2
    STA = 3
    RESERVED = 4
    LDA = 5
    BRA = 6
    BRZ = 7
    BRP = 8
    IO = 9


class IOCode(IntEnum):
    """Sub-codes selected by the address digits under opcode 9."""
    INP = 1
    OUT = 2
    OTC = 22


class Mnemonic(Enum):
    """Assembly mnemonics.

    Each member carries the opcode digit it encodes to and, for the I/O
    mnemonics, the fixed sub-code. DAT is a raw data word and has neither.
    """
    HLT = (Opcode.HLT, None)
    ADD = (Opcode.ADD, None)
    SUB = (Opcode.SUB, None)
    STA = (Opcode.STA, None)
    LDA = (Opcode.LDA, None)
    BRA = (Opcode.BRA, None)
    BRZ = (Opcode.BRZ, None)
    BRP = (Opcode.BRP, None)
    INP = (Opcode.IO, IOCode.INP)
    OUT = (Opcode.IO, IOCode.OUT)
    OTC = (Opcode.IO, IOCode.OTC)
    DAT = (None, None)

    @property
    def opcode(self) -> Optional[Opcode]:
        return self.value[0]

    @property
    def io_code(self) -> Optional[IOCode]:
        return self.value[1]

    @classmethod
    def parse(cls, token: str) -> Optional["Mnemonic"]:
        """Look up a mnemonic by its exact (upper case) name."""
        return cls.__members__.get(token)


# Mnemonics whose operand is an address encoded into the word
ADDRESS_MNEMONICS = frozenset({
    Mnemonic.ADD, Mnemonic.SUB, Mnemonic.STA, Mnemonic.LDA,
    Mnemonic.BRA, Mnemonic.BRZ, Mnemonic.BRP,
})


@dataclass(frozen=True)
class Instruction:
    """A decoded machine word.

    Attributes:
        opcode: Leading digit
        address: Last two digits (memory address, or sub-code under opcode 9)
        io_code: Recognised opcode-9 sub-code, None otherwise
    """
    opcode: Opcode
    address: int
    io_code: Optional[IOCode] = None


def decode(word: Value) -> Instruction:
    """Split a word into opcode and address.

    Raises:
        UnhandledOpcode: If the leading digit is not 0-9 (negative words)
    """
    digit = word.first_digit
    try:
        opcode = Opcode(digit)
    except ValueError:
        raise UnhandledOpcode(digit) from None

    address = word.last_two_digits
    io_code = None
    if opcode is Opcode.IO:
        try:
            io_code = IOCode(address)
        except ValueError:
            # Unknown sub-codes execute as no-ops
            pass
    return Instruction(opcode, address, io_code)


def disassemble(word: Value) -> str:
    """Render a word as assembly text, falling back to DAT for non-instructions."""
    try:
        instruction = decode(word)
    except UnhandledOpcode:
        return f"DAT {int(word)}"

    if instruction.opcode is Opcode.HLT:
        return "HLT" if word.is_zero() else f"DAT {int(word)}"
    if instruction.opcode is Opcode.RESERVED:
        return f"DAT {int(word)}"
    if instruction.opcode is Opcode.IO:
        if instruction.io_code is None:
            return f"DAT {int(word)}"
        return instruction.io_code.name
    return f"{instruction.opcode.name} {instruction.address:02}"
