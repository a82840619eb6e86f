"""
Core data models for the suggestion validation pipeline.

Configuration, verdict and metrics models use Pydantic; records themselves
are plain dicts of primitive values (see record.py).
"""

from .metrics_snapshot import LatencySample, MetricsSnapshot, PerformanceMetrics
from .record import CanonicalRecord, Scalar, is_number, is_scalar
from .tier_config import (
    CORE,
    HIGH_FREQUENCY,
    OPTIONAL,
    SPECIALIZED,
    TIER_NAMES,
    PropertyMetadata,
    TierConfig,
    TierDefinition,
)
from .validation_result import (
    TieredValidationError,
    TieredValidationWarning,
    TierTally,
    ValidationOutcome,
    ValidationVerdict,
)

__all__ = [
    "CanonicalRecord",
    "Scalar",
    "is_number",
    "is_scalar",
    "CORE",
    "HIGH_FREQUENCY",
    "OPTIONAL",
    "SPECIALIZED",
    "TIER_NAMES",
    "TierDefinition",
    "PropertyMetadata",
    "TierConfig",
    "TieredValidationError",
    "TieredValidationWarning",
    "TierTally",
    "ValidationVerdict",
    "ValidationOutcome",
    "LatencySample",
    "PerformanceMetrics",
    "MetricsSnapshot",
]
