"""
Dreamer VM — Instruction Catalogue

Fixed opcode table plus the Instruction value type.

Encoding contract:
  SET     0x06 followed by exactly 8 big-endian payload bytes (9 total)
  others  exactly 1 byte

READ, WRITE and JUMPIF decode like any other opcode but have no step
implementation; the engine rejects them with IllegalInstruction.

Stack operand order for binary ops: the first pop is ``a`` (top of
stack), the second pop is ``b``; the result pushed is ``a OP b``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..config import SET_OPCODE, SET_SIZE, WORD_BYTES, WORD_MASK
from ..errors import DecodeError, DecodeErrorKind


class Opcode(enum.IntEnum):
    NOP    = 0x00
    HALT   = 0x01
    LOAD   = 0x02
    STORE  = 0x03
    PUSH   = 0x04
    POP    = 0x05
    SET    = SET_OPCODE
    READ   = 0x07
    WRITE  = 0x08
    JUMP   = 0x09
    JUMPIF = 0x0A
    ADD    = 0x0B
    SUB    = 0x0C
    MUL    = 0x0D
    DIV    = 0x0E
    MOD    = 0x0F
    CMP    = 0x10
    AND    = 0x11
    OR     = 0x12
    NOT    = 0x13
    XOR    = 0x14


# ──────────────────────────────────────────────
# Catalogue
# ──────────────────────────────────────────────
# Format: opcode -> (mnemonic, stack arity, encoded size)
#
# Arity is the number of stack elements the step pops before it may
# mutate anything. POP is listed with arity 1 but reports StackEmpty
# rather than InsufficientArguments; PUSH pops nothing.

OPCODES: Dict[Opcode, Tuple[str, int, int]] = {
    Opcode.NOP:    ('NOP',    0, 1),
    Opcode.HALT:   ('HALT',   0, 1),
    Opcode.LOAD:   ('LOAD',   1, 1),
    Opcode.STORE:  ('STORE',  2, 1),
    Opcode.PUSH:   ('PUSH',   0, 1),
    Opcode.POP:    ('POP',    1, 1),
    Opcode.SET:    ('SET',    0, SET_SIZE),
    Opcode.READ:   ('READ',   0, 1),
    Opcode.WRITE:  ('WRITE',  0, 1),
    Opcode.JUMP:   ('JUMP',   1, 1),
    Opcode.JUMPIF: ('JUMPIF', 0, 1),
    Opcode.ADD:    ('ADD',    2, 1),
    Opcode.SUB:    ('SUB',    2, 1),
    Opcode.MUL:    ('MUL',    2, 1),
    Opcode.DIV:    ('DIV',    2, 1),
    Opcode.MOD:    ('MOD',    2, 1),
    Opcode.CMP:    ('CMP',    2, 1),
    Opcode.AND:    ('AND',    2, 1),
    Opcode.OR:     ('OR',     2, 1),
    Opcode.NOT:    ('NOT',    1, 1),
    Opcode.XOR:    ('XOR',    2, 1),
}

MNEMONICS: Dict[str, Opcode] = {mnem: op for op, (mnem, _, _) in OPCODES.items()}

# Decodable, never executable
RESERVED = frozenset({Opcode.READ, Opcode.WRITE, Opcode.JUMPIF})


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction. Only SET carries a ``value``."""

    opcode: Opcode
    value: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'opcode', Opcode(self.opcode))
        if self.opcode == Opcode.SET:
            if self.value is None:
                raise ValueError("SET requires a literal value")
            if not 0 <= self.value <= WORD_MASK:
                raise ValueError(f"SET literal out of word range: {self.value}")
        elif self.value is not None:
            raise ValueError(f"{self.mnemonic} takes no literal")

    @classmethod
    def set(cls, value: int) -> "Instruction":
        return cls(Opcode.SET, value)

    @property
    def mnemonic(self) -> str:
        return OPCODES[self.opcode][0]

    @property
    def arity(self) -> int:
        return OPCODES[self.opcode][1]

    @property
    def size(self) -> int:
        return OPCODES[self.opcode][2]

    def encode(self) -> bytes:
        """Binary encoding (1 byte, or 9 bytes for SET)."""
        if self.opcode == Opcode.SET:
            return bytes([self.opcode]) + self.value.to_bytes(WORD_BYTES, 'big')
        return bytes([self.opcode])

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "Instruction":
        """Interpret one instruction-sized slice.

        ``offset`` is only used to label errors. The slice must be exactly
        one instruction long: a lone byte for plain opcodes, 9 bytes for SET.
        """
        if not data:
            raise DecodeError(DecodeErrorKind.NO_DATA, offset)

        opcode = data[0]
        if len(data) > 1:
            if opcode != SET_OPCODE:
                raise DecodeError(DecodeErrorKind.INAPPROPRIATE_LITERAL, offset, opcode)
            if len(data) != SET_SIZE:
                raise DecodeError(DecodeErrorKind.INCOMPLETE_LITERAL, offset, opcode)
            return cls.set(int.from_bytes(data[1:], 'big'))

        if opcode == SET_OPCODE:
            raise DecodeError(DecodeErrorKind.MISSING_LITERAL, offset, opcode)
        try:
            return cls(Opcode(opcode))
        except ValueError:
            raise DecodeError(DecodeErrorKind.INVALID_OPCODE, offset, opcode) from None

    def __str__(self) -> str:
        if self.opcode == Opcode.SET:
            return f"SET({self.value})"
        return self.mnemonic
