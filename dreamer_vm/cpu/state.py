"""
Dreamer VM — Execution State

The four things a step can change:

  pc      program counter, an index into the decoded Program
  reg     the single accumulator; stages values between POP and PUSH
  stack   bounded operand stack (mem/stack.py)
  memory  sparse word memory (mem/memory.py)

pc and reg must be words (0..WORD_MASK); anything else raises ValueError.
The engine only hands out ``copy()`` values, never the State it is
still stepping.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..mem.memory import Memory
from ..mem.stack import Stack
from .alu import check_word


class State:
    """Program counter, register, stack and memory."""

    __slots__ = ('pc', 'reg', 'stack', 'memory')

    def __init__(self, pc: int = 0, reg: int = 0,
                 stack: Optional[Stack] = None, memory: Optional[Memory] = None):
        self.pc: int = check_word(pc, "pc")
        self.reg: int = check_word(reg, "reg")
        self.stack: Stack = stack if stack is not None else Stack()
        self.memory: Memory = memory if memory is not None else Memory()

    @property
    def program_counter(self) -> int:
        return self.pc

    @property
    def register(self) -> int:
        return self.reg

    def copy(self) -> "State":
        """Deep value copy; nothing is shared with the original."""
        return State(self.pc, self.reg, self.stack.copy(), self.memory.copy())

    def reset(self):
        """Back to the all-zero/empty power-on state."""
        self.pc = 0
        self.reg = 0
        self.stack = Stack(max_depth=self.stack.max_depth)
        self.memory = Memory()

    # --- Presentation ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            'program_counter': self.pc,
            'register': self.reg,
            'stack': self.stack.to_list(),
            'memory': self.memory.to_dict(),
        }

    def display(self) -> str:
        """One-line form used by the CLI and trace output."""
        stack = ', '.join(str(v) for v in self.stack)
        memory = ', '.join(f"{addr}: {value}" for addr, value in self.memory.items())
        return f"pc={self.pc} reg={self.reg} stack=[{stack}] memory={{{memory}}}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return (self.pc == other.pc and self.reg == other.reg
                and self.stack == other.stack and self.memory == other.memory)

    def __repr__(self) -> str:
        return (f"State(pc={self.pc}, reg={self.reg}, "
                f"stack={self.stack!r}, memory={self.memory!r})")

    __str__ = display
