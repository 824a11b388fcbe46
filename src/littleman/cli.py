"""Command line entry points.

    littleman      Load a memory dump and run it
    littleman-asm  Assemble a source file into a memory dump
    littleman-bin  Turn a pasted list of numbers into a memory dump

Exit codes: 0 success, 1 bad program, 2 file or usage problem.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .assembler import assemble_file
from .config import RunConfig
from .devices import InteractiveInput, OutputSink
from .display import Style, format_error, format_state, style
from .errors import DumpWriteError, LittleManError, MachineIOError, ProgramError
from .machine import Computer
from .memory import values_to_bytes
from .value import Value


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROGRAM_ERROR = 1
EXIT_IO_ERROR = 2


def _configure_logging(level: int) -> None:
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)


def _report(error: LittleManError) -> int:
    print(format_error(str(error)), file=sys.stderr)
    if isinstance(error, MachineIOError):
        return EXIT_IO_ERROR
    return EXIT_PROGRAM_ERROR


def _stream_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _print_state(computer: Computer) -> None:
    print(format_state(computer))


# =============================================================================
# littleman
# =============================================================================

def build_run_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="littleman",
        description="Little Man Computer simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run a memory dump, showing registers and memory every cycle
    littleman --ram demos/add.bin

    # Only show what the program outputs
    littleman --ram demos/ascii.bin --output-only
        """
    )
    parser.add_argument(
        "ram_legacy",
        nargs="?",
        type=Path,
        help=argparse.SUPPRESS
    )
    parser.add_argument(
        "--ram",
        type=Path,
        help="Path to a memory dump (.bin) file to load into RAM"
    )
    parser.add_argument(
        "--output-only",
        action="store_true",
        help="Only print the output of the program, excluding the RAM and register values"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_main(argv: Optional[List[str]] = None) -> int:
    args = build_run_parser().parse_args(argv)
    _configure_logging(logging.WARNING if args.output_only else logging.DEBUG)
    config = RunConfig.from_args(args)

    output = OutputSink(stream=_stream_stdout if config.print_raw_output else None)
    computer = Computer(
        input_source=InteractiveInput(prompt="INP: Number input: "),
        output=output,
    )

    try:
        if config.ram_path is not None:
            touched = computer.load_dump_file(config.ram_path)
            logger.info("Loaded %d data cells into RAM", touched)
        else:
            logger.info("Initial RAM (.bin) file not provided. RAM will be empty.")

        computer.run(before_cycle=_print_state if config.print_state else None)
    except LittleManError as e:
        if config.print_raw_output:
            print()
        return _report(e)

    print("\n" + style("Halted!", Style.BOLD))
    if config.print_state:
        print(f"Output:\n{output.read_all()}")
    return EXIT_OK


# =============================================================================
# littleman-asm
# =============================================================================

def build_assemble_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="littleman-asm",
        description="Assemble a Little Man Computer program into a memory dump"
    )
    parser.add_argument("program", type=Path, help="Path to the assembly program")
    parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Path to a .bin file to write the assembled program to"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def assemble_main(argv: Optional[List[str]] = None) -> int:
    args = build_assemble_parser().parse_args(argv)
    _configure_logging(logging.INFO)

    try:
        assemble_file(args.program, args.output)
    except LittleManError as e:
        return _report(e)
    return EXIT_OK


# =============================================================================
# littleman-bin
# =============================================================================

def build_bin_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="littleman-bin",
        description="Write whitespace-separated numbers read from stdin as a memory dump"
    )
    parser.add_argument("output", type=Path, help="File to write the binary data to")
    return parser


def parse_memory_data(line: str) -> List[Value]:
    """Parse whitespace-separated integers into machine words.

    Raises:
        ValueRangeError: If a number does not fit in a word
        ValueError: If a token is not an integer
    """
    return [Value.new(int(token)) for token in line.split()]


def bin_main(argv: Optional[List[str]] = None) -> int:
    args = build_bin_parser().parse_args(argv)
    _configure_logging(logging.INFO)

    print("Paste in the memory data:")
    line = sys.stdin.readline()
    try:
        values = parse_memory_data(line)
    except ProgramError as e:
        return _report(e)
    except ValueError as e:
        print(format_error(f"Invalid memory data: {e}"), file=sys.stderr)
        return EXIT_PROGRAM_ERROR

    try:
        args.output.write_bytes(values_to_bytes(values))
    except OSError as e:
        return _report(DumpWriteError(args.output, e))
    logger.info("Wrote %d words to %s", len(values), args.output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(run_main())
