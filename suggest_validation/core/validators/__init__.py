"""
Field validator implementations.

Provides validators for required fields, primitive types, numeric ranges,
enumerations and monetary values.
"""

from .base_validator import (
    INVALID_ENUM,
    INVALID_TYPE,
    OUT_OF_RANGE,
    REQUIRED,
    BaseValidator,
    FieldCheckError,
)
from .enum_validator import EnumValidator
from .monetary_validator import MonetaryValidator
from .range_validator import RangeValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "FieldCheckError",
    "REQUIRED",
    "INVALID_TYPE",
    "OUT_OF_RANGE",
    "INVALID_ENUM",
    "RequiredFieldValidator",
    "TypeValidator",
    "RangeValidator",
    "EnumValidator",
    "MonetaryValidator",
]
