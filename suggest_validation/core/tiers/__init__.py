"""
Tier configuration, tiered validation and sanitization.
"""

from .sanitizer import sanitize
from .tier_config import (
    DEFAULT_TIER_CONFIG_PATH,
    TierConfigBuilder,
    TierConfigStore,
    load_tier_config,
    parse_tier_config,
)
from .tiered_validator import (
    ENUM_VALUES,
    TYPE_COERCION,
    TYPE_MISMATCH,
    TieredValidator,
    ValidationMode,
)

__all__ = [
    "DEFAULT_TIER_CONFIG_PATH",
    "TierConfigBuilder",
    "TierConfigStore",
    "load_tier_config",
    "parse_tier_config",
    "TieredValidator",
    "ValidationMode",
    "ENUM_VALUES",
    "TYPE_COERCION",
    "TYPE_MISMATCH",
    "sanitize",
]
