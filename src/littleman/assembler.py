"""Two-pass assembler for Little Man Computer assembly.

Source format, one instruction per line:

    [label] MNEMONIC [operand] [// comment]

Blank lines and lines starting with ``//`` are ignored. The first token is
a label unless it is itself a mnemonic. Operands are decimal literals or
label references.

Pipeline (each stage raises on the first error, nothing is returned
partially):
    tokenize          -> list of Line (EmptyLine or SourceInstruction)
    build_label_table -> label name to address
    encode            -> list of Value, loaded from address 0
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from .errors import (
    DataOutOfRange,
    DumpWriteError,
    DuplicateLabel,
    InvalidOpcode,
    LabelNotFound,
    OperandOutOfRange,
    ProgramTooLarge,
    SourceReadError,
    ValueRangeError,
)
from .isa import ADDRESS_MNEMONICS, Mnemonic
from .memory import MEMORY_SIZE, values_to_bytes
from .value import VALUE_MAX, VALUE_MIN, ZERO, Value


logger = logging.getLogger(__name__)

COMMENT_MARKER = "//"
_INTEGER = re.compile(r"^[+-]?[0-9]+$")


@dataclass(frozen=True)
class LabelRef:
    """Operand naming a label, resolved in pass 2."""
    name: str


Operand = Union[int, LabelRef]


@dataclass(frozen=True)
class EmptyLine:
    line_number: int


@dataclass(frozen=True)
class SourceInstruction:
    """A parsed instruction line.

    Attributes:
        line_number: 1-based line in the source text
        mnemonic: The instruction mnemonic
        label: Label defined on this line, if any
        operand: Literal value or label reference, if any
    """
    line_number: int
    mnemonic: Mnemonic
    label: Optional[str] = None
    operand: Optional[Operand] = None


Line = Union[EmptyLine, SourceInstruction]


# =============================================================================
# Pass 1: tokenize
# =============================================================================

def _split_tokens(text: str) -> List[str]:
    tokens = []
    for token in text.split():
        if token.startswith(COMMENT_MARKER):
            break
        tokens.append(token)
    return tokens


def parse_line(text: str, line_number: int) -> Line:
    """Parse one source line.

    Raises:
        InvalidOpcode: If neither the first nor the second token is a mnemonic
        OperandOutOfRange: If a literal operand is outside [-999, 999]
    """
    tokens = _split_tokens(text.strip())
    if not tokens:
        return EmptyLine(line_number)

    label = None
    mnemonic = Mnemonic.parse(tokens[0])
    if mnemonic is None:
        # First token is a label, the second must be the mnemonic
        label = tokens[0]
        if len(tokens) < 2:
            raise InvalidOpcode(tokens[0], line_number)
        mnemonic = Mnemonic.parse(tokens[1])
        if mnemonic is None:
            raise InvalidOpcode(tokens[1], line_number)

    operand_index = 2 if label is not None else 1
    operand: Optional[Operand] = None
    if len(tokens) > operand_index:
        operand = _parse_operand(tokens[operand_index], line_number)

    return SourceInstruction(line_number, mnemonic, label, operand)


def _parse_operand(token: str, line_number: int) -> Operand:
    if not _INTEGER.match(token):
        return LabelRef(token)
    value = int(token)
    if value < VALUE_MIN or value > VALUE_MAX:
        raise OperandOutOfRange(value, line_number)
    return value


def tokenize(source: str) -> List[Line]:
    """Parse every line of a program (pass 1)."""
    return [parse_line(text, number) for number, text in enumerate(source.splitlines(), 1)]


def instructions_only(lines: List[Line]) -> List[SourceInstruction]:
    return [line for line in lines if isinstance(line, SourceInstruction)]


# =============================================================================
# Label table
# =============================================================================

def build_label_table(instructions: List[SourceInstruction]) -> Dict[str, int]:
    """Map each label to the address its instruction is emitted at.

    Addresses are positions in the instruction list, with empty and comment
    lines already removed.

    Raises:
        DuplicateLabel: If a label is defined more than once
    """
    labels: Dict[str, int] = {}
    defined_on: Dict[str, int] = {}
    for address, instruction in enumerate(instructions):
        label = instruction.label
        if label is None:
            continue
        if label in labels:
            raise DuplicateLabel(label, instruction.line_number, defined_on[label])
        labels[label] = address
        defined_on[label] = instruction.line_number
    return labels


# =============================================================================
# Pass 2: encode
# =============================================================================

def _resolve_operand(instruction: SourceInstruction, labels: Dict[str, int]) -> int:
    operand = instruction.operand
    if operand is None:
        return 0
    if isinstance(operand, LabelRef):
        if operand.name not in labels:
            raise LabelNotFound(operand.name, instruction.line_number)
        return labels[operand.name]
    return operand


def encode_instruction(instruction: SourceInstruction, labels: Dict[str, int]) -> Value:
    """Encode one instruction as a machine word.

    Raises:
        LabelNotFound: If the operand names an undefined label
        DigitsOutOfRange: If an address operand is not 0-99
        DataOutOfRange: If a DAT operand is not a valid Value
    """
    operand = _resolve_operand(instruction, labels)
    mnemonic = instruction.mnemonic

    if mnemonic is Mnemonic.HLT:
        return ZERO
    if mnemonic in ADDRESS_MNEMONICS:
        return Value.from_digits(int(mnemonic.opcode), operand)
    if mnemonic is Mnemonic.DAT:
        try:
            return Value.new(operand)
        except ValueRangeError:
            raise DataOutOfRange(operand, instruction.line_number) from None
    # INP / OUT / OTC: the sub-code is fixed, any operand is ignored
    return Value.from_digits(int(mnemonic.opcode), int(mnemonic.io_code))


def encode(instructions: List[SourceInstruction], labels: Dict[str, int]) -> List[Value]:
    """Encode the instruction list in source order (pass 2).

    Raises:
        ProgramTooLarge: If the program does not fit in memory
    """
    if len(instructions) > MEMORY_SIZE:
        raise ProgramTooLarge(len(instructions), MEMORY_SIZE)
    return [encode_instruction(instruction, labels) for instruction in instructions]


# =============================================================================
# Entry points
# =============================================================================

def assemble(source: str) -> List[Value]:
    """Assemble a program into machine code.

    Returns:
        One Value per instruction, to be loaded from address 0

    Raises:
        ParseError: On an invalid mnemonic or operand literal
        EncodeError: On an unresolved label or unencodable operand
    """
    instructions = instructions_only(tokenize(source))
    labels = build_label_table(instructions)
    machine_code = encode(instructions, labels)
    logger.debug("Assembled %d words, %d labels", len(machine_code), len(labels))
    return machine_code


def assemble_to_bytes(source: str) -> bytes:
    """Assemble a program into a memory dump."""
    return values_to_bytes(assemble(source))


def assemble_file(program_path: Union[str, Path], output_path: Union[str, Path]) -> int:
    """Assemble a source file and write the dump.

    Returns:
        Number of words written

    Raises:
        SourceReadError: If the source cannot be read
        DumpWriteError: If the dump cannot be written
    """
    try:
        source = Path(program_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(program_path, e) from e

    machine_code = assemble(source)

    try:
        Path(output_path).write_bytes(values_to_bytes(machine_code))
    except OSError as e:
        raise DumpWriteError(output_path, e) from e
    logger.info("Wrote %d words to %s", len(machine_code), output_path)
    return len(machine_code)
