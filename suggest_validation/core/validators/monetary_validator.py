"""
MonetaryValidator - accepts the representations used for fees and charges.
"""

from typing import Any

from .base_validator import INVALID_TYPE, BaseValidator, FieldCheckError


class MonetaryValidator(BaseValidator):
    """
    Validates monetary fields.

    Both API generations are accepted: a yes/no flag (boolean), a formatted
    charge (string such as "0.50 GBP") or a bare amount (number).
    """

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not isinstance(value, bool | str | int | float):
            raise FieldCheckError(
                code=INVALID_TYPE,
                field_name=self.field_name,
                message=f"{self.field_name} must be a boolean, string, or number",
            )

    @property
    def check_type(self) -> str:
        return "monetary"
