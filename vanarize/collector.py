"""Mark-and-sweep garbage collector over a simulated heap.

Objects are registered with the address the heap gave them. Collection
marks everything reachable from the registered roots (following array
elements and struct pointer slots) and releases the rest to the heap's
free list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vanarize.memory import ALIGNMENT, HEAP_SIZE, Heap
from vanarize.objects import Obj, ObjArray, ObjFunction, ObjString, ObjStruct
from vanarize.value import VAL_NULL, Value, is_obj, obj_to_value, value_to_obj

MAX_ROOTS = 256

_OBJ_HEADER = 16


class RootOverflowError(RuntimeError):
    """More roots were registered than the collector can hold."""


@dataclass(eq=False)
class Root:
    """A mutable slot holding a value the collector treats as live."""

    value: Value = VAL_NULL


def _footprint(obj: Obj) -> int:
    if isinstance(obj, ObjString):
        return _OBJ_HEADER + 8 + len(obj.chars.encode("utf-8")) + 1
    if isinstance(obj, ObjFunction):
        return _OBJ_HEADER + 24
    if isinstance(obj, ObjStruct):
        return _OBJ_HEADER + 16 + obj.size
    if isinstance(obj, ObjArray):
        return _OBJ_HEADER + 16
    return _OBJ_HEADER


class Collector:
    """Owns a heap and the objects placed on it."""

    def __init__(self, heap_size: int = HEAP_SIZE) -> None:
        self.heap = Heap(heap_size, on_exhausted=self.collect)
        self._objects: dict[int, Obj] = {}
        self._roots: list[Root] = []
        self._min_addr: Optional[int] = None
        self._max_addr: Optional[int] = None

    def allocate(self, obj: Obj) -> Value:
        """Place an object on the heap and return its boxed value."""
        if obj.address is not None:
            raise ValueError("object is already placed on a heap")
        address = self.heap.allocate(_footprint(obj))
        return self.register_object(obj, address)

    def register_object(self, obj: Obj, address: int) -> Value:
        """Track an object living at a block allocated from this heap."""
        self.heap.block_size(address)
        if self._min_addr is None or address < self._min_addr:
            self._min_addr = address
        if self._max_addr is None or address > self._max_addr:
            self._max_addr = address
        obj.is_marked = False
        obj.address = address
        self._objects[address] = obj
        return obj_to_value(address)

    def register_root(self, root: Root) -> None:
        """Add a root slot."""
        if len(self._roots) >= MAX_ROOTS:
            raise RootOverflowError("Root set overflow")
        self._roots.append(root)

    def unregister_root(self, root: Root) -> None:
        """Remove a root slot; unknown roots are ignored."""
        for position, held in enumerate(self._roots):
            if held is root:
                self._roots[position] = self._roots[-1]
                self._roots.pop()
                return

    def resolve(self, value: Value) -> Optional[Obj]:
        """Return the live object a value points at, or None."""
        if not is_obj(value):
            return None
        return self._objects.get(value_to_obj(value))

    def _in_range(self, address: int) -> bool:
        if self._min_addr is None or self._max_addr is None:
            return False
        return self._min_addr <= address <= self._max_addr and address % ALIGNMENT == 0

    def _mark(self, value: Value) -> None:
        pending = [value]
        while pending:
            current = pending.pop()
            if not is_obj(current):
                continue
            address = value_to_obj(current)
            if not self._in_range(address):
                continue
            obj = self._objects.get(address)
            if obj is None or obj.is_marked:
                continue
            obj.is_marked = True
            if isinstance(obj, ObjStruct):
                pending.extend(obj.pointer_values())
            elif isinstance(obj, ObjArray):
                pending.extend(obj.elements)

    def _sweep(self) -> int:
        freed = 0
        for address, obj in reversed(list(self._objects.items())):
            if obj.is_marked:
                obj.is_marked = False
                continue
            del self._objects[address]
            self.heap.release(address)
            obj.address = None
            freed += 1
        return freed

    def collect(self) -> int:
        """Run a full mark-and-sweep cycle; return how many objects were freed."""
        for root in list(self._roots):
            self._mark(root.value)
        return self._sweep()