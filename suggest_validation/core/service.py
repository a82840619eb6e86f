"""
Suggestion validation service: the validation call boundary.

Pipeline per request:
    parse body -> map legacy fields -> (compatible) apply defaults
    -> tiered check -> sanitize
"""

from typing import Any, Mapping

from suggest_validation.core.mapping import apply_compatible_defaults, map_legacy_to_canonical
from suggest_validation.core.models import TierConfig, ValidationOutcome
from suggest_validation.core.tiers import TieredValidator, TierConfigStore, ValidationMode, sanitize
from suggest_validation.observability.logger import get_logger
from suggest_validation.utils.validation import generate_suggestion_id, parse_request_body

logger = get_logger(__name__)


class SuggestionValidationService:
    """
    Validates raw suggestion submissions against the tier configuration.

    The TieredValidator is built lazily from the store's configuration and
    rebuilt whenever the store hands out a different configuration object.
    """

    def __init__(self, store: TierConfigStore):
        self.store = store
        self._validator: TieredValidator | None = None

    async def validate_request(
        self,
        body: str | bytes | Mapping[str, Any] | None,
        mode: ValidationMode | str = ValidationMode.STRICT,
    ) -> ValidationOutcome:
        """
        Validate one submission.

        Args:
            body: Raw request body (JSON text/bytes) or parsed mapping
            mode: strict (v2 API) or compatible (v1 API)

        Returns:
            ValidationOutcome with verdict, canonical data and sanitized copy

        Raises:
            ConfigError: If the tier configuration cannot be loaded
            MalformedRequestError: If the body is missing or not a flat JSON object
        """
        mode = ValidationMode(mode)
        config = await self.store.load()
        record = parse_request_body(body)
        return self.validate_record(record, mode, config)

    def validate_record(
        self,
        record: Mapping[str, Any],
        mode: ValidationMode | str,
        config: TierConfig,
    ) -> ValidationOutcome:
        """Validate an already-parsed record; synchronous once config is in hand."""
        mode = ValidationMode(mode)
        validator = self._validator_for(config)

        data = map_legacy_to_canonical(record)
        if mode is ValidationMode.COMPATIBLE:
            data = apply_compatible_defaults(data)

        verdict = validator.check(data)
        outcome = ValidationOutcome(
            verdict=verdict,
            data=data,
            sanitized=sanitize(data, config),
            suggestion_id=generate_suggestion_id(),
            mode=mode.value,
        )

        log = logger.info if verdict.is_valid else logger.warning
        log(
            "Suggestion validated" if verdict.is_valid else "Suggestion failed validation",
            extra={
                "suggestion_id": outcome.suggestion_id,
                "mode": mode.value,
                "valid": verdict.is_valid,
                "error_count": len(verdict.errors),
                "warning_count": len(verdict.warnings),
                "property_count": len(data),
                "errors_by_tier": verdict.errors_by_tier,
            },
        )
        return outcome

    def _validator_for(self, config: TierConfig) -> TieredValidator:
        if self._validator is None or self._validator.config is not config:
            self._validator = TieredValidator(config)
        return self._validator
