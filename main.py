#!/usr/bin/env python3
"""Little Man Computer command line interface.

Run a memory dump, or assemble a program first.

Usage:
    python main.py --ram demos/add.bin
    python main.py --ram demos/ascii.bin --output-only
    python main.py --asm demos/factorial.asm --output-only
"""

import sys
import tempfile
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from littleman.cli import assemble_main, run_main


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)

    # --asm PATH: assemble to a temporary dump, then run it
    if "--asm" in argv:
        index = argv.index("--asm")
        if index + 1 >= len(argv):
            print("Error: --asm requires a program path")
            return 2
        source = argv[index + 1]
        rest = argv[:index] + argv[index + 2:]
        with tempfile.TemporaryDirectory() as tmp:
            dump = str(Path(tmp) / "program.bin")
            status = assemble_main([source, "--output", dump])
            if status != 0:
                return status
            return run_main(["--ram", dump] + rest)

    return run_main(argv)


if __name__ == "__main__":
    sys.exit(main())
