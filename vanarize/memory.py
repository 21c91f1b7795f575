"""A simulated heap: bump allocation with a first-fit free list.

Addresses are plain integers inside ``[start, end)``. Every block carries an
8-byte size header in front of the address handed out, and sizes are rounded
up to 8 bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

HEAP_SIZE = 256 * 1024 * 1024
HEAP_BASE = 0x10000
ALIGNMENT = 8
HEADER_SIZE = 8
_FREE_BLOCK_SIZE = 16
_SPLIT_SLACK = 16


class OutOfMemoryError(MemoryError):
    """The heap has no room even after the exhaustion hook ran."""


@dataclass
class _FreeBlock:
    start: int
    size: int


class Heap:
    """Fixed-size heap handing out 8-aligned addresses.

    ``on_exhausted`` is called once when neither the bump region nor the
    free list can satisfy a request; it typically runs a collection that
    releases blocks back to the free list.
    """

    def __init__(
        self,
        size: int = HEAP_SIZE,
        on_exhausted: Optional[Callable[[], object]] = None,
    ) -> None:
        if size <= 0:
            raise ValueError("heap size must be positive")
        self.start = HEAP_BASE
        self.end = HEAP_BASE + size
        self.on_exhausted = on_exhausted
        self._bump = self.start
        self._free: list[_FreeBlock] = []
        self._sizes: dict[int, int] = {}

    def _claim(self, start: int, total: int) -> int:
        self._sizes[start] = total
        return start + HEADER_SIZE

    def _from_bump(self, total: int) -> Optional[int]:
        if self._bump + total > self.end:
            return None
        start = self._bump
        self._bump += total
        return self._claim(start, total)

    def _from_free_list(self, total: int) -> Optional[int]:
        for position, block in enumerate(self._free):
            if block.size < total:
                continue
            if block.size > total + _FREE_BLOCK_SIZE + _SPLIT_SLACK:
                self._free[position] = _FreeBlock(block.start + total, block.size - total)
            else:
                del self._free[position]
            return self._claim(block.start, total)
        return None

    def allocate(self, size: int) -> int:
        """Return the address of a fresh block of at least ``size`` bytes."""
        if size < 0:
            raise ValueError("allocation size must not be negative")
        total = ((size + ALIGNMENT - 1) & ~(ALIGNMENT - 1)) + HEADER_SIZE
        address = self._from_bump(total)
        if address is None:
            address = self._from_free_list(total)
        if address is None:
            if self.on_exhausted is not None:
                self.on_exhausted()
            address = self._from_free_list(total)
            if address is None:
                address = self._from_bump(total)
        if address is None:
            raise OutOfMemoryError("Heap exhausted even after GC.")
        return address

    def release(self, address: int) -> None:
        """Return a block to the head of the free list."""
        start = address - HEADER_SIZE
        try:
            size = self._sizes.pop(start)
        except KeyError:
            raise ValueError(f"address {address:#x} is not an allocated block") from None
        self._free.insert(0, _FreeBlock(start, size))

    def block_size(self, address: int) -> int:
        """Size recorded in the block header, header included."""
        try:
            return self._sizes[address - HEADER_SIZE]
        except KeyError:
            raise ValueError(f"address {address:#x} is not an allocated block") from None