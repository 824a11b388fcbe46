"""Computer: fetch-decode-execute engine of the Little Man Computer.

Each clock cycle:
    FETCH   -> word = memory[pc]; pc += 1
    DECODE  -> instruction_register = first digit, address_register = last two
    EXECUTE -> registry handler for the opcode

The engine stops when HLT executes. Faults (reserved or unknown opcode,
address out of range, exhausted input) are raised to the caller and end
the run.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from .devices import InputSource, InteractiveInput, OutputSink
from .errors import AddressOutOfRange, DumpReadError, MachineHalted, UnhandledOpcode
from .isa import decode, disassemble
from .memory import Memory, Registers
from .registry import CycleResult, InstructionRegistry, get_registry
from .value import Value


logger = logging.getLogger(__name__)


@dataclass
class TraceEntry:
    """One executed clock cycle.

    Attributes:
        cycle: Cycle number (0-indexed)
        address: Address the word was fetched from
        word: Fetched machine word
        instruction: Disassembly of the word
        pre_state: Registers before the cycle
        post_state: Registers after the cycle
        result: Whether the machine continues or halted
    """
    cycle: int
    address: int
    word: int
    instruction: str
    pre_state: dict
    post_state: dict
    result: CycleResult


class Computer:
    """Little Man Computer: 100 cells of memory and a single accumulator.

    Attributes:
        memory: The 100-cell Memory
        registers: CPU Registers
        output: OutputSink fed by OUT and OTC
        input_source: InputSource read by INP
        registry: Opcode handler table
        trace: Recorded TraceEntry list (only filled when record_trace is set)
    """

    def __init__(
        self,
        input_source: Optional[InputSource] = None,
        output: Optional[OutputSink] = None,
        record_trace: bool = False,
        registry: Optional[InstructionRegistry] = None,
    ):
        self.memory = Memory()
        self.registers = Registers()
        self.output = output if output is not None else OutputSink()
        self.input_source = input_source if input_source is not None else InteractiveInput()
        self.registry = registry or get_registry()
        self.record_trace = record_trace
        self.trace: List[TraceEntry] = []
        self.halted = False
        self.cycle_count = 0

    # =========================================================================
    # Loading
    # =========================================================================

    def load_program(self, program: Iterable[Union[Value, int]]) -> int:
        """Load machine code at address 0 and reset the CPU.

        Returns:
            Number of cells written

        Raises:
            ProgramTooLarge: If the program does not fit (the machine is left untouched)
        """
        staged = Memory(len(self.memory))
        count = staged.load_values(program)
        self.memory = staged
        self.reset()
        return count

    def load_dump(self, data: bytes) -> int:
        """Load a binary memory dump.

        Returns:
            Number of cells touched
        """
        return self.memory.load_bytes(data)

    def load_dump_file(self, path: Union[str, Path]) -> int:
        """Load a memory dump from a file.

        Raises:
            DumpReadError: If the file cannot be read
            DumpFormatError: If the dump holds an out-of-range word
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise DumpReadError(path, e) from e
        return self.load_dump(data)

    def reset(self) -> None:
        """Clear registers, halt state and trace. Memory is kept."""
        self.registers.reset()
        self.trace = []
        self.halted = False
        self.cycle_count = 0

    # =========================================================================
    # Memory access used by the instruction handlers
    # =========================================================================

    def read_memory(self, address: int) -> Value:
        try:
            return self.memory[address]
        except AddressOutOfRange:
            raise AddressOutOfRange(address, self.registers.program_counter) from None

    def write_memory(self, address: int, value: Value) -> None:
        try:
            self.memory[address] = value
        except AddressOutOfRange:
            raise AddressOutOfRange(address, self.registers.program_counter) from None

    # =========================================================================
    # Execution
    # =========================================================================

    def step(self) -> TraceEntry:
        """Execute one clock cycle and describe it.

        Raises:
            MachineHalted: If HLT has already executed
            RuntimeFault: On an illegal instruction or address
            InputExhausted: If INP has nothing to read
        """
        if self.halted:
            raise MachineHalted()

        regs = self.registers
        pre_state = regs.snapshot()

        # FETCH
        address = regs.program_counter
        if not 0 <= address < len(self.memory):
            raise AddressOutOfRange(address, address)
        word = self.memory[address]
        regs.program_counter += 1

        # DECODE
        try:
            instruction = decode(word)
        except UnhandledOpcode as e:
            raise UnhandledOpcode(e.opcode, regs.program_counter) from None
        regs.instruction_register = int(instruction.opcode)
        regs.address_register = instruction.address

        # EXECUTE
        result = self.registry.execute(self, instruction)

        entry = TraceEntry(
            cycle=self.cycle_count,
            address=address,
            word=int(word),
            instruction=disassemble(word),
            pre_state=pre_state,
            post_state=regs.snapshot(),
            result=result,
        )
        self.cycle_count += 1
        if result is CycleResult.HALTED:
            self.halted = True
            logger.debug("Halted after %d cycles", self.cycle_count)
        if self.record_trace:
            self.trace.append(entry)
        return entry

    def clock_cycle(self) -> CycleResult:
        """Execute one clock cycle."""
        return self.step().result

    def run(self, before_cycle: Optional[Callable[["Computer"], None]] = None) -> List[TraceEntry]:
        """Run until HLT. Faults propagate to the caller.

        Args:
            before_cycle: Called with the computer before every cycle

        Returns:
            The recorded trace (empty unless record_trace is set)
        """
        while True:
            if before_cycle is not None:
                before_cycle(self)
            if self.clock_cycle() is CycleResult.HALTED:
                break
        return self.trace

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def accumulator(self) -> Value:
        return self.registers.accumulator

    @property
    def program_counter(self) -> int:
        return self.registers.program_counter

    def get_summary(self) -> Dict:
        """Execution statistics and final state."""
        return {
            "cycles": self.cycle_count,
            "halted": self.halted,
            "registers": self.registers.snapshot(),
            "output": self.output.read_all(),
            "trace_length": len(self.trace),
        }
