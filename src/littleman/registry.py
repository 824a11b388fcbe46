"""InstructionRegistry: opcode handlers for the Little Man Computer.

Every opcode digit maps to exactly one handler. The table is filled once,
then frozen, so the set of executable instructions cannot change at
runtime.

Handlers:
    HLT: Stop execution
    ADD: Add memory cell to accumulator (wrapping)
    SUB: Subtract memory cell from accumulator (wrapping)
    STA: Store accumulator in memory cell
    RESERVED: Opcode 4, always faults
    LDA: Load memory cell into accumulator
    BRA: Branch always
    BRZ: Branch if accumulator is zero
    BRP: Branch if accumulator is zero or positive
    IO: INP / OUT / OTC, selected by the address digits

Each handler is a function (Computer, Instruction) -> CycleResult that
mutates the computer's registers, memory and devices in place.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from .errors import ReservedOpcode, UnhandledOpcode
from .isa import Instruction, IOCode, Opcode

if TYPE_CHECKING:
    from .machine import Computer


logger = logging.getLogger(__name__)


class CycleResult(Enum):
    CONTINUE = "continue"
    HALTED = "halted"


Handler = Callable[["Computer", Instruction], CycleResult]


class InstructionRegistry:
    """Frozen table of opcode handlers.

    Attributes:
        _handlers: Opcode to handler function
        _frozen: Whether the table is locked against modifications
    """

    def __init__(self):
        self._handlers: Dict[Opcode, Handler] = {}
        self._frozen = False
        self._register_all_handlers()
        self.freeze()

    def _register_all_handlers(self) -> None:
        # Arithmetic
        self.register(Opcode.ADD, self._op_add)
        self.register(Opcode.SUB, self._op_sub)

        # Data movement
        self.register(Opcode.STA, self._op_sta)
        self.register(Opcode.LDA, self._op_lda)

        # Control flow
        self.register(Opcode.BRA, self._op_bra)
        self.register(Opcode.BRZ, self._op_brz)
        self.register(Opcode.BRP, self._op_brp)

        # Special
        self.register(Opcode.HLT, self._op_hlt)
        self.register(Opcode.RESERVED, self._op_reserved)
        self.register(Opcode.IO, self._op_io)

    def register(self, opcode: Opcode, handler: Handler) -> None:
        """Register a handler.

        Raises:
            RuntimeError: If the registry is frozen
            ValueError: If the opcode already has a handler
        """
        if self._frozen:
            raise RuntimeError("Cannot register handlers: registry is frozen")
        if opcode in self._handlers:
            raise ValueError(f"Handler already registered: {opcode.name}")
        self._handlers[opcode] = handler

    def freeze(self) -> None:
        self._frozen = True

    def is_frozen(self) -> bool:
        return self._frozen

    def opcodes(self) -> set:
        return set(self._handlers)

    def execute(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        """Run the handler for a decoded instruction.

        Raises:
            UnhandledOpcode: If no handler exists for the opcode
        """
        handler = self._handlers.get(instruction.opcode)
        if handler is None:
            raise UnhandledOpcode(int(instruction.opcode), computer.registers.program_counter)
        return handler(computer, instruction)

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def _op_add(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        regs = computer.registers
        regs.accumulator = regs.accumulator + computer.read_memory(instruction.address)
        return CycleResult.CONTINUE

    def _op_sub(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        regs = computer.registers
        regs.accumulator = regs.accumulator - computer.read_memory(instruction.address)
        return CycleResult.CONTINUE

    # =========================================================================
    # Data movement
    # =========================================================================

    def _op_sta(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        computer.write_memory(instruction.address, computer.registers.accumulator)
        return CycleResult.CONTINUE

    def _op_lda(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        computer.registers.accumulator = computer.read_memory(instruction.address)
        return CycleResult.CONTINUE

    # =========================================================================
    # Control flow
    # =========================================================================

    def _op_bra(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        computer.registers.program_counter = instruction.address
        logger.debug("BRA: Jumping to address %d", instruction.address)
        return CycleResult.CONTINUE

    def _op_brz(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        regs = computer.registers
        if regs.accumulator.is_zero():
            regs.program_counter = instruction.address
            logger.debug("BRZ: Jumping to address %d", instruction.address)
        return CycleResult.CONTINUE

    def _op_brp(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        regs = computer.registers
        if regs.accumulator.is_non_negative():
            regs.program_counter = instruction.address
        return CycleResult.CONTINUE

    # =========================================================================
    # Special
    # =========================================================================

    def _op_hlt(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        return CycleResult.HALTED

    def _op_reserved(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        raise ReservedOpcode(computer.registers.program_counter)

    def _op_io(self, computer: "Computer", instruction: Instruction) -> CycleResult:
        regs = computer.registers
        if instruction.io_code is IOCode.INP:
            regs.accumulator = computer.input_source.read()
        elif instruction.io_code is IOCode.OUT:
            computer.output.append_number(regs.accumulator)
        elif instruction.io_code is IOCode.OTC:
            # Only the low byte is used as the character code
            computer.output.append_char(chr(int(regs.accumulator) & 0xFF))
        else:
            logger.warning(
                "Ignoring unknown I/O sub-code %02d at address %d",
                instruction.address, regs.program_counter - 1,
            )
        return CycleResult.CONTINUE


# Singleton registry instance
_registry: Optional[InstructionRegistry] = None


def get_registry() -> InstructionRegistry:
    """Get the shared, frozen InstructionRegistry."""
    global _registry
    if _registry is None:
        _registry = InstructionRegistry()
    return _registry
