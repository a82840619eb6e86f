"""
Tier-aware sanitization of canonical records for persistence.
"""

from typing import Any, Mapping

from suggest_validation.core.models import CORE, OPTIONAL, CanonicalRecord, TierConfig


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def sanitize(record: Mapping[str, Any], config: TierConfig) -> CanonicalRecord:
    """
    Produce a cleaned copy of a canonical record.

    - Blank strings and nulls are dropped unless the field is core, so the
      sanitized payload never hides a core problem the verdict reports.
    - Optional string fields holding non-strings are converted to strings.
    - Remaining strings are stripped; other values pass through.

    Idempotent: sanitize(sanitize(r)) == sanitize(r).

    Args:
        record: Canonical record
        config: Loaded tier configuration

    Returns:
        New sanitized record
    """
    sanitized: CanonicalRecord = {}

    for key, value in record.items():
        meta = config.metadata_for(key)
        tier = meta.tier if meta is not None else None

        if _is_blank(value) and tier != CORE:
            continue

        if tier == OPTIONAL and meta.validation_type == "string" and not isinstance(value, str):
            value = _to_string(value)

        if isinstance(value, str):
            value = value.strip()

        sanitized[key] = value

    return sanitized


def _to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
