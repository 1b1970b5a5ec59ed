#!/usr/bin/env python3
"""
mu0 — MU0 assembler + emulator CLI

Usage:
    python mu0.py <program.asm> [--listing] [--dump | --dump-all]
                                [--assemble-only] [-v] [-q] [--log-file PATH]

Assembles the program, then runs it from address 0 until STP. Every
SWI 0 prints the accumulator as a signed decimal on its own line. Logs,
listings and dumps go to stderr so stdout carries only program output.

Examples:
    python mu0.py examples/countdown.asm
    python mu0.py examples/sum.asm --listing -v
    python mu0.py examples/table.asm --assemble-only > table.bin.txt
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mu0_assembler import Assembler, AssemblerError, __version__
from mu0_emulator import MU0Emulator, dump_memory

logger = logging.getLogger("mu0")


def setup_logging(verbose: int, quiet: bool, log_file: Optional[str]):
    """Configure logging based on arguments."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers = []

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    handlers.append(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file else level,
        handlers=handlers,
        force=True
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mu0",
        description="MU0 assembler and emulator",
    )
    parser.add_argument("input", help="MU0 assembly source file")
    parser.add_argument("--listing", action="store_true",
                        help="Print the assembly listing to stderr before running")
    dump = parser.add_mutually_exclusive_group()
    dump.add_argument("--dump", action="store_true",
                      help="Dump memory (binary, trailing zeros trimmed) to stderr after halt")
    dump.add_argument("--dump-all", action="store_true",
                      help="Dump all 4096 memory words to stderr after halt")
    parser.add_argument("--assemble-only", action="store_true",
                        help="Print the assembled image as binary words and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Enable debug logging")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Log errors only")
    parser.add_argument("--log-file", help="Also write a debug log to this file")
    parser.add_argument("--version", action="version",
                        version=f"mu0 {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.quiet, args.log_file)

    # Read input
    try:
        with open(args.input, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 1
    except (IOError, UnicodeDecodeError) as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        return 1

    try:
        asm = Assembler()
        image = asm.assemble(source)
        logger.info("Assembled %s (%d symbols)", args.input, len(asm.symbols))

        if args.listing:
            print(asm.get_listing(), file=sys.stderr)

        if args.assemble_only:
            dump = dump_memory(image, trim_trailing_zeros=not args.dump_all)
            if dump:
                print(dump)
            return 0

        emu = MU0Emulator(image)
        steps = emu.run(on_output=print)
        logger.info("Halted after %d instructions", steps)

        if args.dump or args.dump_all:
            print(dump_memory(emu.mem.snapshot(),
                              trim_trailing_zeros=not args.dump_all),
                  file=sys.stderr)

    except AssemblerError as e:
        print(f"Assembler error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
