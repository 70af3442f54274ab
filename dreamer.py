#!/usr/bin/env python3
"""
dreamer — Dreamer VM command line

Usage:
    python dreamer.py run <program.bin> [--trace] [-o state.txt] [--json] [-v]
    python dreamer.py asm <program.s> -o <program.bin>
    python dreamer.py disasm <program.bin>

Examples:
    python dreamer.py run add.bin                # final state to stdout
    python dreamer.py run add.bin --trace        # every step, then the final state
    python dreamer.py run add.bin --json -o out.json
    python dreamer.py asm add.s -o add.bin
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from dreamer_vm import __version__
from dreamer_vm.asm import AssemblerError, assemble, disassemble
from dreamer_vm.cpu.decoder import decode
from dreamer_vm.cpu.instruction import Instruction
from dreamer_vm.cpu.state import State
from dreamer_vm.emu import Machine
from dreamer_vm.errors import DecodeError, ExecutionError
from dreamer_vm.log_setup import setup_logging

log = logging.getLogger("dreamer_vm.cli")


def _format_state(state: State, as_json: bool) -> str:
    if as_json:
        return json.dumps(state.to_dict(), indent=2)
    return state.display()


def _trace(state: State, instruction: Instruction):
    print(f"[{instruction}] {state.display()}")


def _write_output(text: str, output: Optional[str]) -> bool:
    """Write to ``output`` (or stdout). False, with the error reported, if that fails."""
    if not output:
        print(text)
        return True
    try:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return False
    return True


def cmd_run(args) -> int:
    try:
        with open(args.path, "rb") as f:
            data = f.read()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        program = decode(data)
    except DecodeError as e:
        print(f"Decode error: {e}", file=sys.stderr)
        return 1

    log.info("Loaded %s: %d bytes, %d instructions", args.path, len(data), len(program))
    machine = Machine(program)

    try:
        if args.trace:
            print(machine.state.display())
            final = machine.run_observed(_trace)
        else:
            final = machine.run()
    except ExecutionError as e:
        print(f"Execution error: {e}", file=sys.stderr)
        if not _write_output(_format_state(e.state, args.json), args.output):
            return 1
        return 2

    log.info("Stopped (%s) after %d steps", machine.stop_reason.value, machine.steps)
    if not _write_output(_format_state(final, args.json), args.output):
        return 1
    return 0


def cmd_asm(args) -> int:
    try:
        with open(args.source, "r", encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        binary = assemble(source)
    except AssemblerError as e:
        print(f"Assembler error: {e}", file=sys.stderr)
        return 1

    try:
        with open(args.output, "wb") as f:
            f.write(binary)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    log.info("Wrote %d bytes to %s", len(binary), args.output)
    return 0


def cmd_disasm(args) -> int:
    try:
        with open(args.path, "rb") as f:
            data = f.read()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        program = decode(data)
    except DecodeError as e:
        print(f"Decode error: {e}", file=sys.stderr)
        return 1

    print(disassemble(program))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dreamer",
        description="Dreamer stack machine — run, assemble, disassemble",
    )
    parser.add_argument("--version", action="version",
                        version=f"dreamer {__version__}")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Log progress to stderr (-vv for every detail)")
    sub = parser.add_subparsers(dest="command", metavar="command")

    p_run = sub.add_parser("run", help="Execute a binary program")
    p_run.add_argument("path", help="Program file")
    p_run.add_argument("--trace", "-t", action="store_true",
                       help="Print the state after every instruction")
    p_run.add_argument("-o", "--output", help="Write the final state here (default: stdout)")
    p_run.add_argument("--json", action="store_true",
                       help="Write the final state as JSON")

    p_asm = sub.add_parser("asm", help="Assemble mnemonic source to a binary program")
    p_asm.add_argument("source", help="Assembly source file")
    p_asm.add_argument("-o", "--output", required=True, help="Binary output file")

    p_dis = sub.add_parser("disasm", help="List the instructions of a binary program")
    p_dis.add_argument("path", help="Program file")

    return parser


COMMANDS = {
    "run": cmd_run,
    "asm": cmd_asm,
    "disasm": cmd_disasm,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    console_level = logging.WARNING
    if args.verbose == 1:
        console_level = logging.INFO
    elif args.verbose >= 2:
        console_level = logging.DEBUG
    setup_logging(console_level=console_level)

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
