"""NaN-boxed value representation.

A value is an unsigned 64-bit integer. Ordinary doubles are stored as their
IEEE 754 bit pattern; object addresses and the singletons ``nil``, ``false``
and ``true`` live inside a reserved quiet-NaN space.
"""

from __future__ import annotations

import struct

Value = int

MASK64 = (1 << 64) - 1
SIGN_BIT = 0x8000000000000000
QNAN = 0x7FFC000000000000

TAG_NIL = 1
TAG_FALSE = 2
TAG_TRUE = 3

VAL_NULL: Value = QNAN | TAG_NIL
VAL_FALSE: Value = QNAN | TAG_FALSE
VAL_TRUE: Value = QNAN | TAG_TRUE

_DOUBLE = struct.Struct("<d")
_U64 = struct.Struct("<Q")


def is_number(value: Value) -> bool:
    """True if the value holds a plain double."""
    return (value & QNAN) != QNAN


def is_obj(value: Value) -> bool:
    """True if the value carries an object address."""
    return (value & QNAN) == QNAN and (value & TAG_TRUE) == 0


def is_nil(value: Value) -> bool:
    """True if the value is ``nil``."""
    return value == VAL_NULL


def is_bool(value: Value) -> bool:
    """True if the value is ``true`` or ``false``."""
    return value in (VAL_TRUE, VAL_FALSE)


def number_to_value(number: float) -> Value:
    """Box a number by reinterpreting its double bits."""
    return _U64.unpack(_DOUBLE.pack(float(number)))[0]


def value_to_number(value: Value) -> float:
    """Unbox a double from its bit pattern."""
    return _DOUBLE.unpack(_U64.pack(value & MASK64))[0]


def bool_to_value(flag: bool) -> Value:
    """Box a boolean."""
    return VAL_TRUE if flag else VAL_FALSE


def value_to_bool(value: Value) -> bool:
    """Only the ``true`` singleton unboxes to True."""
    return value == VAL_TRUE


def obj_to_value(address: int) -> Value:
    """Box an object address."""
    return (address | QNAN) & MASK64


def value_to_obj(value: Value) -> int:
    """Extract the object address from a boxed value."""
    return value & ~QNAN & MASK64