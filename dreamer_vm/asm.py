"""
Two-pass assembler and disassembler for Dreamer programs.

Source format, one instruction per line:

    ; comment
    start:              label = index of the next instruction
        SET 5           literal: 5, 0x05, $05, %101, or a label
        PUSH
        SET start
        PUSH
        JUMP

Mnemonics are case-insensitive. A label's value is the decoded
instruction index it precedes, not a byte offset, so ``SET label``
followed by ``PUSH; JUMP`` lands on it.

  Pass 1: parse lines, assign each label the current instruction index.
  Pass 2: resolve SET operands and emit the encodings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import WORD_MASK
from .cpu.decoder import Program
from .cpu.instruction import MNEMONICS, Instruction, Opcode

__all__ = ['AssemblerError', 'assemble', 'assemble_program', 'disassemble']

_LABEL_RE = re.compile(r'^[A-Za-z_.][A-Za-z0-9_.]*$')


class AssemblerError(Exception):
    """Raised on assembly errors."""
    def __init__(self, message: str, line_num: int = 0):
        self.line_num = line_num
        super().__init__(f"Line {line_num}: {message}" if line_num else message)


@dataclass
class AsmLine:
    """Parsed assembly source line."""
    label: Optional[str] = None
    mnemonic: Optional[str] = None
    operand: Optional[str] = None
    line_num: int = 0


def _parse_line(line: str, line_num: int) -> AsmLine:
    result = AsmLine(line_num=line_num)

    text = line.split(';', 1)[0].strip()
    if not text:
        return result

    if ':' in text:
        label, text = text.split(':', 1)
        label = label.strip()
        if not _LABEL_RE.match(label):
            raise AssemblerError(f"Bad label: '{label}'", line_num)
        result.label = label
        text = text.strip()
        if not text:
            return result

    parts = text.split(None, 1)
    result.mnemonic = parts[0].upper()
    if len(parts) > 1:
        result.operand = parts[1].strip()
    return result


def _parse_value(text: str, symbols: Dict[str, int], line_num: int) -> int:
    """Parse a literal or label. Supports $FF, 0xFF, %1010, 123, LABEL."""
    try:
        if text.startswith('$'):
            value = int(text[1:], 16)
        elif text.lower().startswith('0x'):
            value = int(text, 16)
        elif text.startswith('%'):
            value = int(text[1:], 2)
        elif text.isdigit():
            value = int(text)
        elif text in symbols:
            return symbols[text]
        else:
            raise AssemblerError(f"Undefined symbol: '{text}'", line_num)
    except ValueError:
        raise AssemblerError(f"Bad literal: '{text}'", line_num) from None

    if value > WORD_MASK:
        raise AssemblerError(f"Literal out of word range: {text}", line_num)
    return value


def assemble_program(source: str) -> Program:
    """Assemble source text into a Program."""
    lines = [_parse_line(raw, i) for i, raw in enumerate(source.split('\n'), 1)]

    # Pass 1: labels → instruction index
    symbols: Dict[str, int] = {}
    index = 0
    for line in lines:
        if line.label:
            if line.label in symbols:
                raise AssemblerError(f"Duplicate label: '{line.label}'", line.line_num)
            symbols[line.label] = index
        if line.mnemonic:
            if line.mnemonic not in MNEMONICS:
                raise AssemblerError(f"Unknown mnemonic: {line.mnemonic}", line.line_num)
            index += 1

    # Pass 2: emit
    instructions: List[Instruction] = []
    for line in lines:
        if not line.mnemonic:
            continue
        opcode = MNEMONICS[line.mnemonic]
        if opcode == Opcode.SET:
            if line.operand is None:
                raise AssemblerError("SET: missing operand", line.line_num)
            instructions.append(Instruction.set(_parse_value(line.operand, symbols, line.line_num)))
        else:
            if line.operand is not None:
                raise AssemblerError(f"{line.mnemonic} takes no operand", line.line_num)
            instructions.append(Instruction(opcode))

    return Program(instructions)


def assemble(source: str) -> bytes:
    """Assemble source text into the binary program format."""
    return assemble_program(source).encode()


def disassemble(program: Program) -> str:
    """Listing with instruction index, byte offset, hex bytes and mnemonic."""
    lines = [f"{'IDX':>5}  {'OFFSET':>6}  {'BYTES':<26}  INSTRUCTION", "-" * 60]
    for idx, (offset, instr) in enumerate(zip(program.byte_offsets(), program)):
        hex_str = ' '.join(f'{b:02X}' for b in instr.encode())
        text = instr.mnemonic
        if instr.opcode == Opcode.SET:
            text = f"SET     0x{instr.value:X}"
        lines.append(f"{idx:>5}  {offset:>6}  {hex_str:<26}  {text}")
    return '\n'.join(lines)
