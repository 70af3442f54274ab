"""
Dreamer VM
==========
A small register-augmented stack machine: one 64-bit accumulator, a
bounded operand stack and sparse word memory, driven by a compact
variable-length bytecode.

Architecture:
    ┌───────────┐    ┌──────────┐    ┌──────────┐    ┌─────────────┐
    │ raw bytes │───>│ Decoder  │───>│ Program  │───>│   Machine   │───> final State
    │ (.bin)    │    │          │    │ (instrs) │    │ (step loop) │     or ExecutionError
    └───────────┘    └──────────┘    └──────────┘    └─────────────┘
                                                            │
                                                            └──> observer(state, instr)

    - cpu/instruction.py: opcode catalogue + Instruction value type
    - cpu/decoder.py:     all-or-nothing byte decoder → Program
    - cpu/alu.py:         checked word arithmetic
    - cpu/state.py:       pc / register / stack / memory aggregate
    - mem/stack.py:       bounded LIFO (65535 words)
    - mem/memory.py:      sparse word memory, unset reads as 0
    - emu.py:             Machine — fetch, step, halt, jump
    - asm.py:             text assembler / disassembler
"""

__version__ = "0.1.0"

from .config import MAX_STACK_DEPTH, WORD_MASK
from .cpu.instruction import Instruction, Opcode, OPCODES
from .cpu.decoder import Program, decode
from .cpu.state import State
from .mem.stack import Stack
from .mem.memory import Memory
from .emu import Machine, StopReason, Observer, execute
from .asm import AssemblerError, assemble, assemble_program, disassemble
from .errors import (
    DecodeError, DecodeErrorKind,
    ExecutionError, InsufficientArguments, StackFull, StackEmpty,
    ArithmeticOverflow, IllegalInstruction,
)


def run_bytes(data: bytes, observer=None) -> State:
    """Decode and run a binary program from the power-on state.

    Full pipeline: decode → Machine → run (or run_observed when an
    observer is given).

    Raises:
        DecodeError: the bytes are not a valid program; nothing ran.
        ExecutionError: a step failed; ``.state`` is the last good state.
    """
    return execute(decode(data), observer=observer)
