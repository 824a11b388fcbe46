"""Integration tests for example programs."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from littleman import Computer, ScriptedInput, assemble
from littleman.assembler import assemble_to_bytes
from littleman.errors import LabelNotFound


DEMOS_DIR = Path(__file__).parent.parent / "demos"


def run_source(source: str, inputs=()) -> Computer:
    computer = Computer(input_source=ScriptedInput(inputs))
    computer.load_program(assemble(source))
    computer.run()
    return computer


def run_demo(name: str, inputs=()) -> str:
    source = (DEMOS_DIR / name).read_text(encoding="utf-8")
    return run_source(source, inputs).output.read_all()


class TestAddProgram:
    """Test add.asm - outputs the sum of two inputs."""

    def test_add_inline(self):
        computer = run_source("INP\nSTA 99\nINP\nADD 99\nOUT\nHLT", [3, -5])
        assert computer.output.read_all() == "-2"
        assert computer.halted is True

    def test_add_file(self):
        assert run_demo("add.asm", [3, -5]) == "-2"

    def test_add_overflow(self):
        assert run_demo("add.asm", [999, 1]) == "-999"


class TestAddSubtractProgram:
    """Test add-subtract.asm - outputs a + b, then c - a."""

    def test_add_subtract(self):
        assert run_demo("add-subtract.asm", [10, 11, 100]) == "21\n90"


class TestFactorialProgram:
    """Test factorial.asm - multiplication by repeated addition."""

    def test_factorial_6(self):
        """6! = 720"""
        assert run_demo("factorial.asm", [6]) == "720"

    @pytest.mark.parametrize("n,expected", [(0, "1"), (1, "1"), (2, "2"), (3, "6"), (5, "120")])
    def test_small_factorials(self, n, expected):
        assert run_demo("factorial.asm", [n]) == expected


class TestAsciiProgram:
    """Test ascii.asm - prints the printable ASCII range with OTC."""

    def test_ascii(self):
        expected = "".join(chr(code) for code in range(0x20, 0x7F))
        assert run_demo("ascii.asm") == expected

    def test_ascii_starts_and_ends(self):
        output = run_demo("ascii.asm")
        assert output[0] == " "
        assert output[-1] == "~"
        assert "\n" not in output


class TestInlinePrograms:
    """Test small programs written inline."""

    def test_countdown(self):
        computer = run_source("""
                INP
        loop    OUT
                SUB one
                BRP loop
                HLT
        one     DAT 1
        """, [3])
        assert computer.output.read_all() == "3\n2\n1\n0"
        assert computer.output.lines_view(4) == ["3", "2", "1", "0"]

    def test_wraparound_in_program(self):
        computer = run_source("""
        LDA a
        ADD a
        OUT
        HLT
        a DAT 990
        """)
        assert computer.output.read_all() == "-19"

    def test_undefined_label(self):
        with pytest.raises(LabelNotFound) as excinfo:
            assemble("INP\nBRA missing\nHLT")
        assert excinfo.value.label == "missing"

    def test_dump_round_trip(self):
        """Assemble to bytes, load as a dump, run."""
        computer = Computer(input_source=ScriptedInput([3, -5]))
        touched = computer.load_dump(assemble_to_bytes("INP\nSTA 99\nINP\nADD 99\nOUT\nHLT"))
        assert touched == 6
        computer.run()
        assert computer.output.read_all() == "-2"


class TestProgramFromFile:
    """Test assembling every demo file."""

    @pytest.mark.parametrize("name", ["add.asm", "add-subtract.asm", "factorial.asm", "ascii.asm"])
    def test_demo_assembles(self, name):
        code = assemble((DEMOS_DIR / name).read_text(encoding="utf-8"))
        assert 0 < len(code) <= 100
