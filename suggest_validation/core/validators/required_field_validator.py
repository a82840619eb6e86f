"""
RequiredFieldValidator - ensures a field is present and not null.
"""

from typing import Any

from .base_validator import REQUIRED, BaseValidator, FieldCheckError


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is present and not null.

    Empty strings are present values: blank core fields are kept by the
    sanitizer, so they must not be reported as missing here either.
    """

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.field_name not in record or value is None:
            raise FieldCheckError(
                code=REQUIRED,
                field_name=self.field_name,
                message=f"{self.field_name} is required",
            )

    @property
    def check_type(self) -> str:
        return "required"
