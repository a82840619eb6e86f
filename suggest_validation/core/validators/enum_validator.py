"""
EnumValidator - validates field values against a closed set of allowed values.
"""

import json
from typing import Any

from .base_validator import INVALID_ENUM, BaseValidator, FieldCheckError


class EnumValidator(BaseValidator):
    """
    Validates that a field value is one of the allowed values.

    Parameters:
    - allowed: Sequence of allowed values
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        allowed = self.parameters.get("allowed")
        if not allowed:
            raise ValueError("EnumValidator requires 'allowed' parameter")
        self.allowed: tuple = tuple(allowed)

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        # bool is excluded so True never matches an allowed 1
        if isinstance(value, bool) or value not in self.allowed:
            raise FieldCheckError(
                code=INVALID_ENUM,
                field_name=self.field_name,
                message=f"{self.field_name} must be one of: {json.dumps(list(self.allowed))}",
            )

    @property
    def check_type(self) -> str:
        return "enum"
