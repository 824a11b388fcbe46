"""Little Man Computer Interactive Demo.

A Gradio web interface for assembling, running and inspecting programs.

Usage:
    cd /path/to/littleman
    python demo/gradio_app.py

Features:
    - Write or load assembly programs
    - Supply INP values as a comma separated list
    - See the program output, final registers and memory
    - Step-by-step execution trace
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import gradio as gr
from littleman import Computer, ScriptedInput, assemble
from littleman.errors import LittleManError
from littleman.registry import CycleResult


DEMOS_DIR = Path(__file__).parent.parent / "demos"

# Web runs are cut off after this many cycles so a looping program can't hang the page
MAX_DEMO_CYCLES = 100000


# =============================================================================
# Example Programs
# =============================================================================

def _read_demo(name: str) -> str:
    path = DEMOS_DIR / name
    return path.read_text(encoding="utf-8") if path.exists() else ""


EXAMPLE_PROGRAMS = {
    "Add": _read_demo("add.asm"),
    "Add and subtract": _read_demo("add-subtract.asm"),
    "Factorial": _read_demo("factorial.asm"),
    "ASCII table": _read_demo("ascii.asm"),
    "Custom": "",
}

EXAMPLE_INPUTS = {
    "Add": "3, -5",
    "Add and subtract": "10, 11, 100",
    "Factorial": "6",
    "ASCII table": "",
    "Custom": "",
}


# =============================================================================
# Execution Functions
# =============================================================================

def parse_inputs(text: str) -> list:
    """Parse a comma or whitespace separated list of integers."""
    return [int(token) for token in text.replace(",", " ").split()]


def run_program(program: str, inputs: str, max_cycles: int) -> tuple:
    """Assemble and execute a program.

    Args:
        program: Assembly source code
        inputs: Values for INP, comma separated
        max_cycles: Cycle limit for this run

    Returns:
        Tuple of (summary_text, output_text, trace_text, state_text)
    """
    if not program.strip():
        return "Error: No program provided", "", "", ""

    try:
        machine_code = assemble(program)
        scripted = ScriptedInput(parse_inputs(inputs))
    except (LittleManError, ValueError) as e:
        return f"Error: {e}", "", "", ""

    computer = Computer(input_source=scripted, record_trace=True)
    computer.load_program(machine_code)

    error_msg = None
    try:
        while computer.cycle_count < int(max_cycles):
            if computer.clock_cycle() is CycleResult.HALTED:
                break
        else:
            error_msg = f"Stopped after {int(max_cycles)} cycles"
    except LittleManError as e:
        error_msg = str(e)

    summary = computer.get_summary()
    summary_lines = [
        "EXECUTION SUMMARY",
        "=" * 40,
        f"Words: {len(machine_code)}",
        f"Cycles: {summary['cycles']}",
        f"Halted: {'Yes' if summary['halted'] else 'No'}",
    ]
    if error_msg:
        summary_lines.append(f"\nRuntime: {error_msg}")
    summary_text = "\n".join(summary_lines)

    trace = computer.trace
    trace_lines = [
        "EXECUTION TRACE",
        "=" * 60,
    ]
    for entry in trace[:100]:  # Limit to 100 entries
        pre = entry.pre_state
        post = entry.post_state
        line = f"[{entry.cycle:>4}] {entry.address:02}: {entry.word:04}  {entry.instruction:<8}"
        if pre["accumulator"] != post["accumulator"]:
            line += f"  ACC {pre['accumulator']} -> {post['accumulator']}"
        if post["program_counter"] != entry.address + 1:
            line += f"  PC -> {post['program_counter']:02}"
        trace_lines.append(line)
    if len(trace) > 100:
        trace_lines.append(f"\n... ({len(trace) - 100} more entries)")
    trace_text = "\n".join(trace_lines)

    regs = summary["registers"]
    state_lines = [
        "FINAL REGISTERS",
        "=" * 30,
        f"  PC:  {regs['program_counter']:02}",
        f"  IR:  {regs['instruction_register']}",
        f"  AR:  {regs['address_register']:02}",
        f"  ACC: {regs['accumulator']}",
        "",
        "MEMORY",
        "-" * 30,
        str(computer.memory),
    ]
    state_text = "\n".join(state_lines)

    return summary_text, summary["output"], trace_text, state_text


def load_example(example_name: str) -> tuple:
    """Load an example program and its inputs."""
    return EXAMPLE_PROGRAMS.get(example_name, ""), EXAMPLE_INPUTS.get(example_name, "")


# =============================================================================
# Gradio Interface
# =============================================================================

def create_demo():
    """Create and return the Gradio demo interface."""

    with gr.Blocks(title="Little Man Computer") as demo:
        gr.Markdown("""
        # Little Man Computer

        A 100-cell, single-accumulator teaching computer. Write a program,
        give it some input, and watch it run.
        """)

        with gr.Row():
            with gr.Column(scale=2):
                gr.Markdown("### Assembly Program")

                example_dropdown = gr.Dropdown(
                    choices=list(EXAMPLE_PROGRAMS.keys()),
                    value="Factorial",
                    label="Load Example"
                )

                program_input = gr.Textbox(
                    value=EXAMPLE_PROGRAMS["Factorial"],
                    label="Source Code",
                    lines=20,
                    placeholder="Enter assembly code here..."
                )

                inputs_box = gr.Textbox(
                    value=EXAMPLE_INPUTS["Factorial"],
                    label="Inputs (comma separated)",
                )

                max_cycles = gr.Slider(
                    minimum=100,
                    maximum=MAX_DEMO_CYCLES,
                    value=10000,
                    step=100,
                    label="Max Cycles"
                )

                run_button = gr.Button("Run Program", variant="primary")

            with gr.Column(scale=3):
                with gr.Row():
                    summary_output = gr.Textbox(label="Summary", lines=8, interactive=False)
                    program_output = gr.Textbox(label="Output", lines=8, interactive=False)

                state_output = gr.Textbox(label="Final State", lines=16, interactive=False)
                trace_output = gr.Textbox(label="Execution Trace", lines=20, interactive=False)

        with gr.Accordion("Instruction Reference", open=False):
            gr.Markdown("""
            | Mnemonic | Code | Description |
            |----------|------|-------------|
            | `HLT` | 000 | Stop |
            | `ADD addr` | 1xx | Add memory cell to accumulator |
            | `SUB addr` | 2xx | Subtract memory cell from accumulator |
            | `STA addr` | 3xx | Store accumulator |
            | `LDA addr` | 5xx | Load accumulator |
            | `BRA addr` | 6xx | Branch always |
            | `BRZ addr` | 7xx | Branch if accumulator is zero |
            | `BRP addr` | 8xx | Branch if accumulator is zero or positive |
            | `INP` | 901 | Read input into accumulator |
            | `OUT` | 902 | Output accumulator as a number |
            | `OTC` | 922 | Output accumulator as a character |
            | `DAT n` | n | Data word |

            **Words**: -999 to 999, arithmetic wraps around
            **Labels**: Put a name before the mnemonic, reference it as an operand
            **Comments**: Lines starting with `//`
            """)

        example_dropdown.change(
            fn=load_example,
            inputs=[example_dropdown],
            outputs=[program_input, inputs_box]
        )

        run_button.click(
            fn=run_program,
            inputs=[program_input, inputs_box, max_cycles],
            outputs=[summary_output, program_output, trace_output, state_output]
        )

    return demo


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    demo = create_demo()
    demo.launch(
        share=False,
        server_name="0.0.0.0",
        server_port=7861,
        show_error=True
    )
