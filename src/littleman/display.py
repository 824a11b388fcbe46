"""Terminal presentation for the Little Man Computer.

Pure functions that turn machine state into text. ANSI styling is applied
here only; the core modules never emit escape codes.
"""

from enum import Enum
from typing import TYPE_CHECKING

from .devices import OutputSink
from .memory import Memory, Registers

if TYPE_CHECKING:
    from .machine import Computer


OUTPUT_LINE_WIDTH = 4
MEMORY_COLUMNS = 10

_RESET = "\x1b[0m"


class Style(Enum):
    BOLD = "\x1b[1m"
    GRAY = "\x1b[90m"
    RED = "\x1b[31m"


def style(text: str, text_style: Style) -> str:
    """Wrap text in the escape codes for a style."""
    return f"{text_style.value}{text}{_RESET}"


def format_registers(registers: Registers) -> str:
    return "PC: {}, Instruction: {}, Addr: {}, Acc: {}".format(
        style(f"{registers.program_counter:02}", Style.BOLD),
        style(f"{registers.instruction_register:01}", Style.BOLD),
        style(f"{registers.address_register:02}", Style.BOLD),
        style(f"{int(registers.accumulator):03}", Style.BOLD),
    )


def format_output_line(output: OutputSink, width: int = OUTPUT_LINE_WIDTH) -> str:
    """The output buffer on one line, rows separated by a gray pipe."""
    return style("|", Style.GRAY).join(output.iter_lines(width))


def format_memory(memory: Memory, columns: int = MEMORY_COLUMNS) -> str:
    """Memory as a grid, zero cells grayed out."""
    rows = []
    cells = list(memory)
    for start in range(0, len(cells), columns):
        row = []
        for cell in cells[start:start + columns]:
            if cell.is_zero():
                row.append(style("000", Style.GRAY))
            else:
                row.append(f"{int(cell):03}")
        rows.append(" ".join(row))
    return "\n".join(rows)


def format_state(computer: "Computer") -> str:
    """Registers, output and memory, as printed before each traced cycle."""
    return "\n".join([
        "",
        format_registers(computer.registers),
        format_output_line(computer.output),
        format_memory(computer.memory),
    ])


def format_error(message: str) -> str:
    return style(message, Style.RED)
