"""Heap object kinds: strings, functions, packed structs and arrays."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Iterator, Optional

from vanarize.value import VAL_NULL, Value

_SLOT = struct.Struct("<Q")
_SLOT_SIZE = 8


class ObjType(Enum):
    """Kinds of heap objects."""

    STRING = auto()
    STRUCT = auto()
    FUNCTION = auto()
    ARRAY = auto()


class ArrayIndexError(IndexError):
    """An array was indexed outside ``0 <= index < size``."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Array Index Out of Bounds: {index} (Size: {size})")
        self.index = index
        self.size = size


@dataclass(eq=False)
class Obj:
    """Common part of every heap object.

    ``address`` is set once the object has been placed on a heap.
    """

    obj_type: ClassVar[ObjType]
    is_marked: bool = field(default=False, init=False)
    address: Optional[int] = field(default=None, init=False)


@dataclass(eq=False)
class ObjString(Obj):
    """An immutable string."""

    obj_type: ClassVar[ObjType] = ObjType.STRING
    chars: str

    def __len__(self) -> int:
        return len(self.chars)


@dataclass(eq=False)
class ObjFunction(Obj):
    """A compiled function: its entry point, arity and optional name."""

    obj_type: ClassVar[ObjType] = ObjType.FUNCTION
    arity: int = 0
    entrypoint: object = None
    name: Optional[ObjString] = None


@dataclass(eq=False)
class ObjStruct(Obj):
    """A packed data blob; bit N of the bitmap marks a value in slot N."""

    obj_type: ClassVar[ObjType] = ObjType.STRUCT
    data: bytearray = field(default_factory=bytearray)
    pointer_bitmap: int = 0

    def __post_init__(self) -> None:
        self.data = bytearray(self.data)
        if not 0 <= self.pointer_bitmap < 1 << 64:
            raise ValueError("pointer bitmap must fit in 64 bits")
        if self.pointer_bitmap.bit_length() * _SLOT_SIZE > len(self.data):
            raise ValueError("pointer bitmap refers past the end of the data")

    @property
    def size(self) -> int:
        """Size of the data blob in bytes."""
        return len(self.data)

    def pointer_values(self) -> Iterator[Value]:
        """Yield the values stored in slots flagged by the bitmap."""
        bitmap = self.pointer_bitmap
        offset = 0
        while bitmap:
            if bitmap & 1:
                yield _SLOT.unpack_from(self.data, offset)[0]
            bitmap >>= 1
            offset += _SLOT_SIZE


@dataclass(eq=False)
class ObjArray(Obj):
    """A growable array of values with bounds-checked access."""

    obj_type: ClassVar[ObjType] = ObjType.ARRAY
    capacity: int = 0
    elements: list[Value] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = max(self.capacity, len(self.elements))

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.elements):
            raise ArrayIndexError(index, len(self.elements))

    def push(self, value: Value) -> None:
        """Append a value, doubling the capacity when full."""
        if len(self.elements) >= self.capacity:
            self.capacity = max(self.capacity * 2, 1)
        self.elements.append(value)

    def get(self, index: int) -> Value:
        """Return the element at ``index``."""
        self._check(index)
        return self.elements[index]

    def set(self, index: int, value: Value) -> None:
        """Replace the element at ``index``."""
        self._check(index)
        self.elements[index] = value

    def __len__(self) -> int:
        return len(self.elements)

    def pop(self) -> Value:
        """Remove and return the last element, or nil when empty."""
        if not self.elements:
            return VAL_NULL
        return self.elements.pop()