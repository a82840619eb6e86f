"""
Validation verdict models (ephemeral, created fresh per validation call).
"""

from typing import Any

from pydantic import BaseModel, Field


class TieredValidationError(BaseModel):
    """A blocking problem with one field, tagged with the tier it was evaluated under."""

    field: str
    message: str
    code: str
    tier: str

    class Config:
        frozen = True


class TieredValidationWarning(BaseModel):
    """A non-blocking notice about one field."""

    field: str
    message: str
    code: str
    tier: str

    class Config:
        frozen = True


class TierTally(BaseModel):
    """Per-tier counts of provided, required and valid properties."""

    provided: int = 0
    required: int = 0
    valid: int = 0

    class Config:
        frozen = True


class ValidationVerdict(BaseModel):
    """
    Outcome of validating one canonical record.

    Attributes:
        is_valid: True iff ``errors`` is empty
        errors: Blocking field errors
        warnings: Non-blocking field warnings
        tier_summary: tier -> provided/required/valid counts
        errors_by_tier: tier -> number of errors (warnings excluded)
    """

    is_valid: bool
    errors: tuple[TieredValidationError, ...] = ()
    warnings: tuple[TieredValidationWarning, ...] = ()
    tier_summary: dict[str, TierTally] = Field(default_factory=dict)
    errors_by_tier: dict[str, int] = Field(default_factory=dict)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "is_valid": False,
                "errors": [
                    {
                        "field": "lat",
                        "message": "Latitude must be between -90 and 90 degrees",
                        "code": "out_of_range",
                        "tier": "core",
                    }
                ],
                "warnings": [],
                "tier_summary": {
                    "core": {"provided": 7, "required": 7, "valid": 6},
                    "high_frequency": {"provided": 0, "required": 0, "valid": 0},
                    "optional": {"provided": 0, "required": 0, "valid": 0},
                    "specialized": {"provided": 0, "required": 0, "valid": 0},
                },
                "errors_by_tier": {"core": 1, "high_frequency": 0, "optional": 0, "specialized": 0},
            }
        }

    def error_fields(self) -> list[str]:
        return [error.field for error in self.errors]

    def describe_errors(self) -> str:
        """One-line summary of all errors, ``field: message`` joined by ``; ``."""
        return "; ".join(f"{e.field}: {e.message}" for e in self.errors)


class ValidationOutcome(BaseModel):
    """
    Result handed back across the validation call boundary.

    Attributes:
        verdict: Tiered validation verdict
        data: Canonical record that was validated (after mapping and defaults)
        sanitized: Cleaned copy of ``data`` for persistence
        suggestion_id: Identifier generated for this submission
        mode: Validation mode used ("strict" or "compatible")
    """

    verdict: ValidationVerdict
    data: dict[str, Any]
    sanitized: dict[str, Any]
    suggestion_id: str
    mode: str

    class Config:
        frozen = True

    @property
    def is_valid(self) -> bool:
        return self.verdict.is_valid
