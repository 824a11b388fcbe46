"""Run configuration for the simulator entry point."""

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    """How a memory dump is loaded and run.

    Attributes:
        ram_path: Memory dump to load, None for empty memory
        print_state: Print registers, output and memory before every cycle
        print_raw_output: Print OUT/OTC output as soon as it is produced
    """
    ram_path: Optional[Path] = None
    print_state: bool = True
    print_raw_output: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfig":
        """Build a config from parsed arguments.

        The dump path can be given with --ram or, for backwards
        compatibility, positionally. --ram wins when both are present.
        """
        notes: List[str] = []
        if args.ram_legacy is not None and args.ram is not None:
            notes.append("Warning: Ignoring positional argument and using --ram argument instead.")
            notes.append("Specifying a RAM file without --ram is no longer recommended.")
            ram_path = args.ram
        elif args.ram is not None:
            ram_path = args.ram
        else:
            if args.ram_legacy is not None:
                notes.append("Note: It is recommended to use the --ram argument to specify a RAM file.")
            ram_path = args.ram_legacy

        for note in notes:
            logger.warning(note)

        return cls(
            ram_path=Path(ram_path) if ram_path is not None else None,
            print_state=not args.output_only,
            print_raw_output=args.output_only,
        )
