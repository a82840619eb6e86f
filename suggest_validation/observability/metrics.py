"""
In-process validation metrics for suggest-validation

MetricsCollector aggregates per-request validation outcomes into bounded
memory: monotonically growing counters plus a fixed-size window of recent
latencies. Every mutation is a plain synchronous sequence, so on an event
loop no other task can observe a half-updated collector.
"""
import functools
import math
import time
from collections import deque
from typing import Awaitable, Callable, Iterable, Mapping

from suggest_validation.core.models import (
    SPECIALIZED,
    TIER_NAMES,
    LatencySample,
    MetricsSnapshot,
    PerformanceMetrics,
    TieredValidationError,
    ValidationOutcome,
)
from suggest_validation.observability.logger import get_logger

logger = get_logger(__name__)

# Recent latencies kept for percentile estimation
LATENCY_WINDOW_SIZE = 100


def percentile(values: Iterable[float], q: float) -> float:
    """
    Rank-based percentile: ``sorted(values)[floor(n * q)]``, clamped to the last element.

    Args:
        values: Samples
        q: Quantile in [0, 1]

    Returns:
        The estimate, or NaN when there are no samples
    """
    ordered = sorted(values)
    if not ordered:
        return math.nan
    index = min(int(len(ordered) * q), len(ordered) - 1)
    return ordered[index]


class MetricsCollector:
    """
    Aggregates validation outcomes across many calls.

    Owned by the composition root; exporters and summaries only ever see
    snapshot() copies.
    """

    def __init__(self, window_size: int = LATENCY_WINDOW_SIZE, clock: Callable[[], float] = time.time):
        """
        Args:
            window_size: Capacity of the latency ring buffer
            clock: Wall-clock source (epoch seconds), injectable for tests
        """
        self.window_size = window_size
        self._clock = clock
        self._reset_listeners: list[Callable[[], None]] = []
        self._clear()

    def _clear(self) -> None:
        self._total_requests = 0
        self._requests_by_tier = {tier: 0 for tier in TIER_NAMES}
        self._errors_by_tier = {tier: 0 for tier in TIER_NAMES}
        self._requests_by_tier_and_mode: dict[str, dict[str, int]] = {}
        self._errors_by_tier_and_code: dict[str, dict[str, int]] = {}
        self._count = 0
        self._sum = 0.0
        self._min = math.inf
        self._max = 0.0
        self._samples: deque[LatencySample] = deque(maxlen=self.window_size)

    def record_outcome(
        self,
        provided_tiers: Mapping[str, str],
        errors: Iterable[TieredValidationError],
        elapsed_ms: float,
        mode: str = "strict",
    ) -> None:
        """
        Record one validation call.

        Args:
            provided_tiers: field -> tier for every field present in the validated record
            errors: Errors produced by the validation
            elapsed_ms: Validation duration in milliseconds
            mode: Validation mode label ("strict" or "compatible")
        """
        self._total_requests += 1

        touched = set()
        for tier in provided_tiers.values():
            tier = tier or SPECIALIZED
            touched.add(tier)
            self._requests_by_tier[tier] = self._requests_by_tier.get(tier, 0) + 1
            by_mode = self._requests_by_tier_and_mode.setdefault(tier, {})
            by_mode[mode] = by_mode.get(mode, 0) + 1

        for error in errors:
            self._errors_by_tier[error.tier] = self._errors_by_tier.get(error.tier, 0) + 1
            by_code = self._errors_by_tier_and_code.setdefault(error.tier, {})
            by_code[error.code] = by_code.get(error.code, 0) + 1

        self._count += 1
        self._sum += elapsed_ms
        self._min = min(self._min, elapsed_ms)
        self._max = max(self._max, elapsed_ms)
        # deque(maxlen) evicts the oldest sample once full
        self._samples.append(
            LatencySample(elapsed_ms=elapsed_ms, tiers=frozenset(touched), recorded_at=self._clock())
        )

    def snapshot(self) -> MetricsSnapshot:
        """Return a read-only copy of the current aggregates."""
        return MetricsSnapshot(
            total_requests=self._total_requests,
            requests_by_tier=dict(self._requests_by_tier),
            errors_by_tier=dict(self._errors_by_tier),
            requests_by_tier_and_mode={t: dict(m) for t, m in self._requests_by_tier_and_mode.items()},
            errors_by_tier_and_code={t: dict(c) for t, c in self._errors_by_tier_and_code.items()},
            performance=PerformanceMetrics(
                count=self._count,
                sum=self._sum,
                min=self._min,
                max=self._max,
                samples=tuple(self._samples),
            ),
            taken_at=self._clock(),
        )

    def add_reset_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run synchronously after every reset()."""
        self._reset_listeners.append(callback)

    def reset(self) -> None:
        """Zero all counters, clear the latency window and notify reset listeners."""
        self._clear()
        for callback in self._reset_listeners:
            callback()
        logger.info("Validation metrics reset", extra={"listener_count": len(self._reset_listeners)})


def record_validation_metrics(
    collector: MetricsCollector,
    tier_of: Callable[[str], str],
) -> Callable[[Callable[..., Awaitable[ValidationOutcome]]], Callable[..., Awaitable[ValidationOutcome]]]:
    """
    Decorate an async validation call so each completed outcome is recorded.

    Calls that raise (malformed body, configuration failure) are not
    recorded; the exception propagates unchanged.

    Usage:
        validate = record_validation_metrics(collector, config.tier_of)(service.validate_request)

    Args:
        collector: Collector receiving the outcomes
        tier_of: Resolves a field name to its tier

    Returns:
        Decorator
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ValidationOutcome:
            start = time.perf_counter()
            outcome = await func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - start) * 1000.0

            collector.record_outcome(
                provided_tiers={field: tier_of(field) for field in outcome.data},
                errors=outcome.verdict.errors,
                elapsed_ms=elapsed_ms,
                mode=outcome.mode,
            )
            return outcome

        return wrapper

    return decorator
