"""
Record value types.

A suggestion record is an ordered mapping of field name to a primitive JSON
value. Nested objects and arrays are not part of the record model.
"""

from typing import Any, Union

Scalar = Union[bool, int, float, str, None]
CanonicalRecord = dict[str, Scalar]

SCALAR_TYPES = (bool, int, float, str, type(None))


def is_scalar(value: Any) -> bool:
    return isinstance(value, SCALAR_TYPES)


def is_number(value: Any) -> bool:
    """True for int/float values; booleans are not numbers here."""
    return isinstance(value, int | float) and not isinstance(value, bool)
