"""
TypeValidator - strict primitive type checks.
"""

from typing import Any

from suggest_validation.core.models.record import is_number

from .base_validator import INVALID_TYPE, BaseValidator, FieldCheckError


class TypeValidator(BaseValidator):
    """
    Validates that a field value has the expected primitive type.

    No coercion: "12.5" is not a number and 1 is not a boolean.

    Supported types: number, boolean, string
    """

    TYPE_CHECKS = {
        "number": is_number,
        "boolean": lambda value: isinstance(value, bool),
        "string": lambda value: isinstance(value, str),
    }

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        expected_type = self.parameters.get("expected_type")
        if not expected_type:
            raise ValueError("TypeValidator requires 'expected_type' parameter")
        if expected_type not in self.TYPE_CHECKS:
            raise ValueError(f"Unsupported type: {expected_type}")

        self.expected_type = expected_type
        self._check = self.TYPE_CHECKS[expected_type]

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not self._check(value):
            raise FieldCheckError(
                code=INVALID_TYPE,
                field_name=self.field_name,
                message=f"{self.field_name} must be a {self.expected_type}",
            )

    @property
    def check_type(self) -> str:
        return "type"
