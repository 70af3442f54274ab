"""
Error taxonomy for the Dreamer VM.

Two independent families:

  DecodeError     — raised by the decoder, carries the failure kind and
                    the byte offset of the offending opcode. Nothing is
                    ever executed after one of these.
  ExecutionError  — raised by the engine (and by Stack for full/empty).
                    Once a run surfaces it, ``.state`` holds the last
                    state that was successfully produced.
"""

from __future__ import annotations

import enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .cpu.instruction import Instruction
    from .cpu.state import State


class DecodeErrorKind(enum.Enum):
    NO_DATA = "no input"
    INVALID_OPCODE = "unrecognized opcode"
    MISSING_LITERAL = "literal opcode without payload"
    INCOMPLETE_LITERAL = "incomplete literal"
    INAPPROPRIATE_LITERAL = "payload given to non-literal opcode"


class DecodeError(Exception):
    """Raised when a byte stream cannot be turned into a Program."""

    def __init__(self, kind: DecodeErrorKind, offset: int = 0, opcode: Optional[int] = None):
        self.kind = kind
        self.offset = offset
        self.opcode = opcode
        msg = f"{kind.value} at offset {offset}"
        if opcode is not None:
            msg += f" (byte 0x{opcode:02X})"
        super().__init__(msg)


class ExecutionError(Exception):
    """Base class for every fatal step failure."""

    reason = "execution error"

    def __init__(self, message: str = "", instruction: Optional[Instruction] = None,
                 pc: Optional[int] = None):
        self.instruction = instruction
        self.pc = pc
        self.state: Optional[State] = None
        super().__init__(message or self.reason)

    def attach(self, instruction: Instruction, pc: int, state: State) -> "ExecutionError":
        """Fill in the run context once the engine catches the error."""
        if self.instruction is None:
            self.instruction = instruction
        if self.pc is None:
            self.pc = pc
        self.state = state
        return self

    def __str__(self) -> str:
        base = super().__str__()
        if self.instruction is not None and self.pc is not None:
            return f"{base} [{self.instruction} at pc={self.pc}]"
        return base


class InsufficientArguments(ExecutionError):
    reason = "insufficient stack arguments"


class StackFull(ExecutionError):
    reason = "stack full"


class StackEmpty(ExecutionError):
    reason = "stack empty"


class ArithmeticOverflow(ExecutionError):
    reason = "arithmetic overflow"


class IllegalInstruction(ExecutionError):
    reason = "illegal instruction"
