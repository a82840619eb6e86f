"""
RangeValidator - validates numeric values are within a closed range.
"""

import math
from typing import Any

from .base_validator import OUT_OF_RANGE, BaseValidator, FieldCheckError


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field is within [min, max].

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)
    - message: Error message to report instead of the generic one

    Runs after the type check, so the value is already known to be numeric.
    Non-finite values (NaN, infinities) are out of range. Integers are
    compared exactly, however large.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_value = self.parameters.get("min")
        self.max_value = self.parameters.get("max")
        if self.min_value is None and self.max_value is None:
            raise ValueError("RangeValidator requires at least one of: min, max")

        self.message = self.parameters.get(
            "message",
            f"{field_name} must be between {self.min_value} and {self.max_value}",
        )

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if (
            not _is_finite(value)
            or (self.min_value is not None and value < self.min_value)
            or (self.max_value is not None and value > self.max_value)
        ):
            raise FieldCheckError(
                code=OUT_OF_RANGE,
                field_name=self.field_name,
                message=self.message,
            )

    @property
    def check_type(self) -> str:
        return "range"


def _is_finite(value: Any) -> bool:
    # math.isfinite converts to float and overflows on huge ints
    return isinstance(value, int) or math.isfinite(value)
