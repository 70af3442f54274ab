"""
Dreamer VM — Word ALU

Checked 64-bit unsigned arithmetic plus the bitwise/compare helpers.
Every function takes ``(a, b)`` where ``a`` is the first value popped
(top of stack) and ``b`` the second, and computes ``a OP b``.

The checked operations raise ArithmeticOverflow instead of wrapping:
  add  a + b > WORD_MASK
  sub  a - b < 0
  mul  a * b > WORD_MASK
  div  b == 0
  mod  b == 0
"""

from typing import Callable, Dict

from ..config import WORD_MASK
from ..errors import ArithmeticOverflow
from .instruction import Opcode


def check_word(value: int, what: str = "value") -> int:
    """Return ``value`` if it is a word, else raise ValueError. Never masks."""
    if not isinstance(value, int) or not 0 <= value <= WORD_MASK:
        raise ValueError(f"{what} out of word range: {value!r}")
    return value


def add(a: int, b: int) -> int:
    result = a + b
    if result > WORD_MASK:
        raise ArithmeticOverflow(f"{a} + {b} overflows the word")
    return result


def sub(a: int, b: int) -> int:
    result = a - b
    if result < 0:
        raise ArithmeticOverflow(f"{a} - {b} underflows the word")
    return result


def mul(a: int, b: int) -> int:
    result = a * b
    if result > WORD_MASK:
        raise ArithmeticOverflow(f"{a} * {b} overflows the word")
    return result


def div(a: int, b: int) -> int:
    if b == 0:
        raise ArithmeticOverflow(f"{a} / 0")
    return a // b


def mod(a: int, b: int) -> int:
    if b == 0:
        raise ArithmeticOverflow(f"{a} % 0")
    return a % b


def cmp(a: int, b: int) -> int:
    """1 if equal, else 0."""
    return 1 if a == b else 0


def and_(a: int, b: int) -> int:
    return a & b


def or_(a: int, b: int) -> int:
    return a | b


def xor(a: int, b: int) -> int:
    return a ^ b


def not_(a: int) -> int:
    """Bitwise complement within the word."""
    return ~a & WORD_MASK


# Binary stack operations, keyed by opcode
BINARY_OPS: Dict[Opcode, Callable[[int, int], int]] = {
    Opcode.ADD: add,
    Opcode.SUB: sub,
    Opcode.MUL: mul,
    Opcode.DIV: div,
    Opcode.MOD: mod,
    Opcode.CMP: cmp,
    Opcode.AND: and_,
    Opcode.OR:  or_,
    Opcode.XOR: xor,
}
