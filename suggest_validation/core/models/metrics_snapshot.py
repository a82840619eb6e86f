"""
MetricsSnapshot model: read-only copy of the collector's aggregates.
"""

import math

from pydantic import BaseModel, Field


class LatencySample(BaseModel):
    """
    One recorded validation latency.

    Attributes:
        elapsed_ms: Validation duration in milliseconds
        tiers: Tiers touched by the validated record
        recorded_at: Wall-clock time of recording (epoch seconds)
    """

    elapsed_ms: float
    tiers: frozenset[str] = frozenset()
    recorded_at: float = 0.0

    class Config:
        frozen = True


class PerformanceMetrics(BaseModel):
    """Running latency aggregates plus the bounded window of recent samples."""

    count: int = 0
    sum: float = 0.0
    min: float = math.inf
    max: float = 0.0
    samples: tuple[LatencySample, ...] = ()

    class Config:
        frozen = True

    @property
    def sample_values(self) -> list[float]:
        return [sample.elapsed_ms for sample in self.samples]

    @property
    def average_ms(self) -> float:
        return self.sum / self.count if self.count else 0.0


class MetricsSnapshot(BaseModel):
    """
    Aggregated validation traffic at one point in time.

    Attributes:
        total_requests: Number of validation calls recorded
        requests_by_tier: tier -> number of provided fields seen in that tier
        errors_by_tier: tier -> number of errors produced in that tier
        requests_by_tier_and_mode: tier -> mode -> provided field count
        errors_by_tier_and_code: tier -> error code -> error count
        performance: latency aggregates
        taken_at: Wall-clock time the snapshot was taken (epoch seconds)
    """

    total_requests: int = 0
    requests_by_tier: dict[str, int] = Field(default_factory=dict)
    errors_by_tier: dict[str, int] = Field(default_factory=dict)
    requests_by_tier_and_mode: dict[str, dict[str, int]] = Field(default_factory=dict)
    errors_by_tier_and_code: dict[str, dict[str, int]] = Field(default_factory=dict)
    performance: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    taken_at: float = 0.0

    class Config:
        frozen = True

    @property
    def total_errors(self) -> int:
        return sum(self.errors_by_tier.values())
