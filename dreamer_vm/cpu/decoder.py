"""
Dreamer VM — Byte Stream Decoder

Turns a flat byte buffer into a Program (an immutable sequence of
Instructions). There is no header, magic number or length prefix; the
buffer is just concatenated instruction encodings.

Decoding is strictly left-to-right and never backtracks:

  byte == 0x06   → take the opcode plus the next 8 bytes as one SET
  anything else  → take exactly one byte

It is all-or-nothing. The first malformed position raises DecodeError
carrying the byte offset of the failing opcode; no partial Program is
returned. An empty buffer is a valid, empty Program.

Program indices are instruction positions, not byte offsets. JUMP
targets are therefore instruction indices.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Union, overload

from ..config import SET_OPCODE, SET_SIZE
from ..errors import DecodeError, DecodeErrorKind
from .instruction import Instruction

log = logging.getLogger(__name__)


class Program:
    """Read-only, index-addressed sequence of decoded instructions."""

    __slots__ = ('_instructions',)

    def __init__(self, instructions: Iterable[Instruction] = ()):
        self._instructions = tuple(instructions)

    def __len__(self) -> int:
        return len(self._instructions)

    @overload
    def __getitem__(self, index: int) -> Instruction: ...
    @overload
    def __getitem__(self, index: slice) -> "Program": ...

    def __getitem__(self, index: Union[int, slice]):
        if isinstance(index, slice):
            return Program(self._instructions[index])
        return self._instructions[index]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Program):
            return NotImplemented
        return self._instructions == other._instructions

    def __hash__(self) -> int:
        return hash(self._instructions)

    def __repr__(self) -> str:
        return f"Program([{', '.join(str(i) for i in self._instructions)}])"

    def encode(self) -> bytes:
        """Re-encode to the binary program format."""
        return b''.join(instr.encode() for instr in self._instructions)

    def byte_offsets(self) -> List[int]:
        """Byte offset of each instruction within the encoded program."""
        offsets = []
        pos = 0
        for instr in self._instructions:
            offsets.append(pos)
            pos += instr.size
        return offsets


def decode(data: bytes) -> Program:
    """Decode a complete program.

    Raises:
        DecodeError: INVALID_OPCODE for an unknown byte, INCOMPLETE_LITERAL
            when a SET opcode has fewer than 8 trailing bytes.
        TypeError: ``data`` is not bytes, bytearray or memoryview.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"decode() needs a bytes-like buffer, not {type(data).__name__}")
    data = bytes(data)
    instructions: List[Instruction] = []
    pos = 0

    while pos < len(data):
        opcode = data[pos]
        if opcode == SET_OPCODE:
            end = pos + SET_SIZE
            if end > len(data):
                raise DecodeError(DecodeErrorKind.INCOMPLETE_LITERAL, pos, opcode)
        else:
            end = pos + 1

        instructions.append(Instruction.from_bytes(data[pos:end], offset=pos))
        pos = end

    log.debug("Decoded %d bytes into %d instructions", len(data), len(instructions))
    return Program(instructions)
