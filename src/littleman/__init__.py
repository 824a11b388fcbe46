"""littleman: Little Man Computer simulator and assembler.

The machine has 100 memory cells holding signed three-digit words, a
single accumulator and ten opcodes. Programs are written in a small
assembly language and assembled into a binary memory dump.

Architecture:
    SOURCE -> ASSEMBLER -> MACHINE CODE -> MEMORY -> FETCH -> DECODE -> REGISTRY -> EXECUTE
                |                                                          |
         [tokenize, labels,                                         [OutputSink, input
              encode]                                                  sources]

Modules:
    value: Value, the bounded wrapping machine word
    memory: Memory and Registers
    isa: Opcodes, mnemonics and instruction decoding
    registry: Frozen opcode handler table
    devices: OutputSink and input sources
    machine: Computer, the fetch-decode-execute engine
    assembler: Two-pass assembler
    display, config, cli: Terminal front end
"""

__version__ = "0.1.0"
__author__ = "littleman contributors"

from .value import Value
from .memory import Memory, Registers
from .devices import InteractiveInput, OutputSink, ScriptedInput
from .machine import Computer
from .registry import CycleResult
from .assembler import assemble

__all__ = [
    "Value",
    "Memory",
    "Registers",
    "OutputSink",
    "ScriptedInput",
    "InteractiveInput",
    "Computer",
    "CycleResult",
    "assemble",
]
