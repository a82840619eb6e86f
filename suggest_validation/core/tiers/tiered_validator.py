"""
Tier-aware validation of canonical suggestion records.

Core properties are required and strictly checked, high-frequency properties
are strictly checked when present, optional properties only produce coercion
warnings and specialized (including unknown) properties never block a
submission.
"""

from enum import Enum
from typing import Any, Mapping

from suggest_validation.core.mapping import apply_compatible_defaults
from suggest_validation.core.models import (
    CORE,
    HIGH_FREQUENCY,
    OPTIONAL,
    SPECIALIZED,
    TIER_NAMES,
    PropertyMetadata,
    TierConfig,
    TieredValidationError,
    TieredValidationWarning,
    TierTally,
    ValidationVerdict,
)
from suggest_validation.core.validators import (
    BaseValidator,
    EnumValidator,
    FieldCheckError,
    MonetaryValidator,
    RangeValidator,
    RequiredFieldValidator,
    TypeValidator,
)

# Warning codes
TYPE_COERCION = "type_coercion"
TYPE_MISMATCH = "type_mismatch"

# Allowed values for enum-typed fields; enum fields not listed here pass unchecked
ENUM_VALUES: dict[str, tuple[str, ...]] = {
    "amenity": ("toilets",),
    "wheelchair": ("yes", "no", "limited", "unknown"),
    "toilets:wheelchair": ("yes", "no", "limited"),
    "access": ("yes", "private", "customers"),
    "toilets:disposal": ("flush", "chemical", "pitlatrine", "none"),
    "male": ("yes", "no"),
    "female": ("yes", "no"),
    "unisex": ("yes", "no"),
    "changing_table": ("yes", "no"),
    "payment:cash": ("yes", "no"),
    "payment:contactless": ("yes", "no"),
}

COORDINATE_RANGES: dict[str, dict[str, Any]] = {
    "lat": {"min": -90, "max": 90, "message": "Latitude must be between -90 and 90 degrees"},
    "lng": {"min": -180, "max": 180, "message": "Longitude must be between -180 and 180 degrees"},
}


class ValidationMode(str, Enum):
    """strict: canonical API, no defaults. compatible: legacy API, defaults applied."""

    STRICT = "strict"
    COMPATIBLE = "compatible"

    @classmethod
    def from_api_version(cls, version: str) -> "ValidationMode":
        """Map an API generation ("v1"/"v2") to its validation mode."""
        return cls.STRICT if version == "v2" else cls.COMPATIBLE


def build_strict_checks(name: str, meta: PropertyMetadata) -> list[BaseValidator]:
    """
    Build the ordered strict checks for one property.

    Checks stop at the first failure, so range checks only ever see numbers.
    """
    validation_type = meta.validation_type

    if validation_type in ("number", "boolean", "string"):
        checks: list[BaseValidator] = [TypeValidator(name, {"expected_type": validation_type})]
        if validation_type == "number" and name in COORDINATE_RANGES:
            checks.append(RangeValidator(name, COORDINATE_RANGES[name]))
        return checks

    if validation_type == "enum":
        allowed = ENUM_VALUES.get(name)
        return [EnumValidator(name, {"allowed": allowed})] if allowed else []

    if validation_type == "monetary":
        return [MonetaryValidator(name)]

    raise ValueError(f"Unknown validation type: {validation_type}")


class TieredValidator:
    """
    Validates canonical records against a loaded TierConfig.

    Check chains are built once per property at construction, so a
    validator instance is tied to one configuration.
    """

    def __init__(self, config: TierConfig):
        self.config = config
        self._required = {name: RequiredFieldValidator(name) for name in sorted(config.core_properties)}
        self._strict_checks: dict[str, list[BaseValidator]] = {
            name: build_strict_checks(name, meta)
            for name, meta in config.properties.items()
            if meta.tier in (CORE, HIGH_FREQUENCY)
        }

    def validate(self, record: Mapping[str, Any], mode: ValidationMode | str = ValidationMode.STRICT) -> ValidationVerdict:
        """
        Validate a canonical record.

        Args:
            record: Canonical record (output of the field mapper)
            mode: strict (no defaults) or compatible (legacy defaults applied first)

        Returns:
            ValidationVerdict
        """
        if ValidationMode(mode) is ValidationMode.COMPATIBLE:
            record = apply_compatible_defaults(record)
        return self.check(record)

    def check(self, record: Mapping[str, Any]) -> ValidationVerdict:
        """
        Run the two-phase tier validation without defaulting.

        Core phase: every core property must be present and pass strict
        checks. With a strict core tier, any core error ends validation
        before other properties are inspected.

        Remaining phase: every other provided property is dispatched by tier.
        """
        errors: list[TieredValidationError] = []
        warnings: list[TieredValidationWarning] = []
        tallies = {name: {"provided": 0, "required": 0, "valid": 0} for name in TIER_NAMES}
        errors_by_tier = {name: 0 for name in TIER_NAMES}

        # Core phase
        core = tallies[CORE]
        for name, required in self._required.items():
            core["required"] += 1
            value = record.get(name)
            try:
                required.validate(value, record)
            except FieldCheckError as e:
                errors.append(self._error(e, CORE))
                errors_by_tier[CORE] += 1
                continue

            core["provided"] += 1
            failure = self._run_strict_checks(name, value, record)
            if failure is None:
                core["valid"] += 1
            else:
                errors.append(self._error(failure, CORE))
                errors_by_tier[CORE] += 1

        if errors and self.config.core_strict:
            return self._verdict(errors, warnings, tallies, errors_by_tier)

        # Remaining-properties phase
        for name, value in record.items():
            if name in self._required:
                continue

            meta = self.config.metadata_for(name)
            if meta is None:
                # Unknown properties are specialized and always accepted
                tallies[SPECIALIZED]["provided"] += 1
                tallies[SPECIALIZED]["valid"] += 1
                continue

            tier = meta.tier
            tally = tallies[tier]
            tally["provided"] += 1

            if tier == HIGH_FREQUENCY:
                failure = self._run_strict_checks(name, value, record)
                if failure is None:
                    tally["valid"] += 1
                else:
                    errors.append(self._error(failure, tier))
                    errors_by_tier[tier] += 1
            elif tier == OPTIONAL:
                if meta.validation_type == "string" and not isinstance(value, str):
                    warnings.append(
                        TieredValidationWarning(
                            field=name,
                            message=f"{name} was coerced to string",
                            code=TYPE_COERCION,
                            tier=OPTIONAL,
                        )
                    )
                tally["valid"] += 1
            else:
                if meta.validation_type == "string" and not isinstance(value, str):
                    warnings.append(
                        TieredValidationWarning(
                            field=name,
                            message=f"Type mismatch for {name}",
                            code=TYPE_MISMATCH,
                            tier=SPECIALIZED,
                        )
                    )
                tally["valid"] += 1

        return self._verdict(errors, warnings, tallies, errors_by_tier)

    def _run_strict_checks(self, name: str, value: Any, record: Mapping[str, Any]) -> FieldCheckError | None:
        for check in self._strict_checks.get(name, ()):
            try:
                check.validate(value, record)
            except FieldCheckError as e:
                return e
        return None

    @staticmethod
    def _error(failure: FieldCheckError, tier: str) -> TieredValidationError:
        return TieredValidationError(
            field=failure.field_name,
            message=failure.message,
            code=failure.code,
            tier=tier,
        )

    @staticmethod
    def _verdict(errors, warnings, tallies, errors_by_tier) -> ValidationVerdict:
        return ValidationVerdict(
            is_valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
            tier_summary={name: TierTally(**counts) for name, counts in tallies.items()},
            errors_by_tier=dict(errors_by_tier),
        )
