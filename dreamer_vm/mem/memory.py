"""
Dreamer VM — Sparse Word Memory

Word-addressed mapping of the full 64-bit address space. Nothing is
preallocated: an address exists only once it has been written, and
reading any address that was never written yields 0. Entries are never
removed, so the mapping only grows.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from ..cpu.alu import check_word


class Memory:
    """Sparse word memory."""

    __slots__ = ('_cells',)

    def __init__(self, cells: Optional[Dict[int, int]] = None):
        self._cells: Dict[int, int] = {}
        for addr, value in (cells or {}).items():
            self.write(addr, value)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Read the word at ``addr``; unset addresses read as 0."""
        return self._cells.get(check_word(addr, "address"), 0)

    def write(self, addr: int, value: int):
        self._cells[check_word(addr, "address")] = check_word(value, "memory value")

    # --- Inspection ---

    def items(self) -> Iterator[Tuple[int, int]]:
        """Written cells in ascending address order."""
        return iter(sorted(self._cells.items()))

    def to_dict(self) -> Dict[int, int]:
        return dict(self.items())

    def copy(self) -> "Memory":
        clone = Memory()
        clone._cells = dict(self._cells)
        return clone

    def __contains__(self, addr: int) -> bool:
        return addr in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other) -> bool:
        if isinstance(other, Memory):
            return self._cells == other._cells
        if isinstance(other, dict):
            return self._cells == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Memory({self.to_dict()!r})"
