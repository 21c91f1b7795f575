"""Runtime helpers for values: strings, arrays, addition, equality, printing."""

from __future__ import annotations

import math
import sys
from typing import IO, Optional

from vanarize.collector import Collector
from vanarize.objects import ObjArray, ObjString
from vanarize.value import (
    VAL_FALSE,
    VAL_NULL,
    VAL_TRUE,
    Value,
    is_bool,
    is_nil,
    is_number,
    number_to_value,
    value_to_bool,
    value_to_number,
)


def _number_for_concat(number: float) -> str:
    return "%.14g" % number


class Runtime:
    """Value operations backed by a collector that owns the heap objects."""

    def __init__(self, collector: Optional[Collector] = None) -> None:
        self.collector = collector if collector is not None else Collector()

    def new_string(self, text: str) -> Value:
        """Allocate a string object and return its boxed value."""
        return self.collector.allocate(ObjString(text))

    def as_string(self, value: Value) -> Optional[ObjString]:
        """Return the string object a value points at, or None."""
        obj = self.collector.resolve(value)
        return obj if isinstance(obj, ObjString) else None

    def new_array(self, capacity: int) -> Value:
        """Allocate an empty array with the given capacity; return its value."""
        return self.collector.allocate(ObjArray(capacity=capacity))

    def add(self, a: Value, b: Value) -> Value:
        """Add numbers or concatenate strings; other mixes give nil.

        A number joined to a string is formatted with 14 significant digits.
        """
        if is_number(a) and is_number(b):
            return number_to_value(value_to_number(a) + value_to_number(b))

        left = self.as_string(a)
        right = self.as_string(b)
        if left is not None and right is not None:
            return self.new_string(left.chars + right.chars)
        if left is not None and is_number(b):
            return self.new_string(left.chars + _number_for_concat(value_to_number(b)))
        if is_number(a) and right is not None:
            return self.new_string(_number_for_concat(value_to_number(a)) + right.chars)
        return VAL_NULL

    def equal(self, a: Value, b: Value) -> Value:
        """Identity equality of the boxed bits, as a boxed boolean."""
        return VAL_TRUE if a == b else VAL_FALSE

    def format_value(self, value: Value) -> str:
        """Render a value the way ``print`` shows it, without the newline."""
        if is_number(value):
            number = value_to_number(value)
            if math.isfinite(number) and number == int(number):
                return str(int(number))
            return "%g" % number
        string = self.as_string(value)
        if string is not None:
            return string.chars
        if is_bool(value):
            return "true" if value_to_bool(value) else "false"
        if is_nil(value):
            return "nil"
        return f"Unknown Value: {value:x}"

    def print_value(self, value: Value, file: Optional[IO[str]] = None) -> None:
        """Write a value followed by a newline (to stdout by default)."""
        print(self.format_value(value), file=file if file is not None else sys.stdout)