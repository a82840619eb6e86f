"""
Legacy-to-canonical field mapping and compatible-mode defaults.
"""

from .field_mapper import (
    LEGACY_FIELD_MAPPINGS,
    apply_compatible_defaults,
    format_charge,
    generate_node_id,
    map_legacy_to_canonical,
)

__all__ = [
    "LEGACY_FIELD_MAPPINGS",
    "apply_compatible_defaults",
    "format_charge",
    "generate_node_id",
    "map_legacy_to_canonical",
]
