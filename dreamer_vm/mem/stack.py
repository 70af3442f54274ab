"""
Dreamer VM — Bounded Operand Stack

Last-in-first-out store of words, capped at MAX_STACK_DEPTH elements.
Depth never leaves ``0 <= depth <= MAX_STACK_DEPTH``: push at the cap
raises StackFull, pop on empty raises StackEmpty, and in both cases the
stack is left exactly as it was. Values outside the word range raise
ValueError; they are never masked.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from ..config import MAX_STACK_DEPTH
from ..cpu.alu import check_word
from ..errors import StackEmpty, StackFull


class Stack:
    """Word stack. Index 0 is the bottom, the last element is the top."""

    __slots__ = ('_items', 'max_depth')

    def __init__(self, items: Iterable[int] = (), max_depth: int = MAX_STACK_DEPTH):
        self.max_depth = max_depth
        self._items: List[int] = [check_word(v, "stack item") for v in items]
        if len(self._items) > max_depth:
            raise StackFull(f"{len(self._items)} items exceed depth {max_depth}")

    def push(self, value: int) -> int:
        """Push a word, return the new depth."""
        if len(self._items) >= self.max_depth:
            raise StackFull()
        self._items.append(check_word(value, "stack item"))
        return len(self._items)

    def pop(self) -> int:
        if not self._items:
            raise StackEmpty()
        return self._items.pop()

    def peek(self, depth: int = 0) -> Optional[int]:
        """Element ``depth`` places below the top (0 = top), or None if absent."""
        if depth < 0 or depth >= len(self._items):
            return None
        return self._items[-1 - depth]

    def depth(self) -> int:
        return len(self._items)

    def full(self) -> bool:
        return len(self._items) >= self.max_depth

    def empty(self) -> bool:
        return not self._items

    def copy(self) -> "Stack":
        clone = Stack(max_depth=self.max_depth)
        clone._items = list(self._items)
        return clone

    def to_list(self) -> List[int]:
        """Bottom-to-top copy of the contents."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __eq__(self, other) -> bool:
        if isinstance(other, Stack):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Stack({self._items!r})"
