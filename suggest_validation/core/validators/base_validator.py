"""
Base validator interface for per-field checks.

Validators raise FieldCheckError; the tiered validator recovers every
FieldCheckError into a verdict entry, so nothing here escapes to callers.
"""

from abc import ABC, abstractmethod
from typing import Any

# Error codes
REQUIRED = "required"
INVALID_TYPE = "invalid_type"
OUT_OF_RANGE = "out_of_range"
INVALID_ENUM = "invalid_enum"


class FieldCheckError(Exception):
    """Raised when a field fails a check."""

    def __init__(self, code: str, field_name: str, message: str):
        self.code = code
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{code}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for field validators.

    Each validator implements one check for one field
    (required, type, range, enum, monetary).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Check-specific parameters (e.g., min/max for range)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value.

        Args:
            value: The field value to validate
            record: The entire record (for context-dependent checks)

        Raises:
            FieldCheckError: If the check fails
        """

    @property
    @abstractmethod
    def check_type(self) -> str:
        """Return the check identifier."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
