"""
Field mapping between the two suggestion API generations.

Legacy (v1) payloads use ``accessible``, ``hours``, ``payment_contactless``
and a numeric ``fee``; canonical (v2) records use OSM-style keys. Mapping is
non-destructive: legacy keys stay in the record next to their canonical
counterparts.
"""

import time
from decimal import Decimal
from typing import Any, Mapping

from suggest_validation.core.models import CanonicalRecord

# legacy name -> canonical name
LEGACY_FIELD_MAPPINGS: dict[str, str] = {
    "accessible": "wheelchair",
    "hours": "opening_hours",
    "payment_contactless": "payment:contactless",
}

# Legacy boolean flags whose canonical form is a yes/no string
YES_NO_FIELDS = frozenset({"accessible", "payment_contactless"})

CHARGE_CURRENCY = "GBP"
DEFAULT_AMENITY = "toilets"


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def format_charge(amount: int | float, currency: str = CHARGE_CURRENCY) -> str:
    """Format a fee amount as a charge string, e.g. 0.5 -> "0.50 GBP"."""
    # Decimal keeps integers too large for a float exact
    return f"{Decimal(amount):.2f} {currency}"


def map_legacy_to_canonical(record: Mapping[str, Any]) -> CanonicalRecord:
    """
    Reconcile legacy field names and types into a canonical record.

    Rules:
    - A legacy field is mapped only when its canonical name is absent.
    - Boolean ``accessible``/``payment_contactless`` become "yes"/"no".
    - A numeric ``fee`` becomes a boolean; a positive amount also yields
      a formatted ``charge`` (unless one was supplied).
    - Legacy fields are kept; the input mapping is never modified.

    Args:
        record: Parsed request record

    Returns:
        New canonical record
    """
    mapped: CanonicalRecord = dict(record)

    for legacy_name, canonical_name in LEGACY_FIELD_MAPPINGS.items():
        if legacy_name not in record or canonical_name in record:
            continue

        value = record[legacy_name]
        if legacy_name in YES_NO_FIELDS and isinstance(value, bool):
            mapped[canonical_name] = _yes_no(value)
        else:
            mapped[canonical_name] = value

    fee = record.get("fee")
    if isinstance(fee, int | float) and not isinstance(fee, bool):
        mapped["fee"] = fee > 0
        if fee > 0 and "charge" not in record:
            mapped["charge"] = format_charge(fee)

    return mapped


def generate_node_id(now: float | None = None) -> str:
    """Temporary OSM-style identifier derived from a millisecond timestamp."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"node/{millis}"


def apply_compatible_defaults(record: Mapping[str, Any], now: float | None = None) -> CanonicalRecord:
    """
    Fill in core defaults for legacy (compatible mode) submissions.

    Never overwrites a supplied value. Accessibility and opening hours are
    only defaulted when neither the canonical nor the legacy field was sent.

    Args:
        record: Canonical record produced by map_legacy_to_canonical
        now: Epoch seconds used for the synthesized identifier

    Returns:
        New record with defaults applied
    """
    defaulted: CanonicalRecord = dict(record)

    if "@id" not in defaulted:
        defaulted["@id"] = generate_node_id(now)
    if "amenity" not in defaulted:
        defaulted["amenity"] = DEFAULT_AMENITY
    if "wheelchair" not in defaulted and "accessible" not in defaulted:
        defaulted["wheelchair"] = "unknown"
    if "access" not in defaulted:
        defaulted["access"] = "yes"
    if "opening_hours" not in defaulted and "hours" not in defaulted:
        defaulted["opening_hours"] = "unknown"
    if "fee" not in defaulted:
        defaulted["fee"] = False

    return defaulted
