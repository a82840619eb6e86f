"""
JSON validation summary with a TTL cache and ETags.

Counters in a MetricsSnapshot are lifetime totals; only the latency window
(the collector's ring buffer) can be filtered by time, so the window
parameter narrows the latency statistics and the request rate.
"""

import hashlib
import json
import time
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel

from suggest_validation.core.models import TIER_NAMES, MetricsSnapshot
from suggest_validation.observability.logger import get_logger
from suggest_validation.observability.metrics import MetricsCollector, percentile

logger = get_logger(__name__)

TIME_WINDOWS: dict[str, float | None] = {
    "1h": 60 * 60,
    "24h": 24 * 60 * 60,
    "7d": 7 * 24 * 60 * 60,
    "all": None,
}

DEFAULT_TTL_SECONDS = 60.0


class SummaryResult(BaseModel):
    """A rendered summary plus its cache metadata."""

    body: dict[str, Any]
    etag: str
    cache_hit: bool = False

    class Config:
        frozen = True


class ValidationSummaryService:
    """
    Builds validation summaries from collector snapshots.

    Summaries are cached per window for ttl_seconds. invalidate() drops the
    cache and is meant to be registered as a collector reset listener.
    """

    def __init__(
        self,
        collector: MetricsCollector,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.collector = collector
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[str, tuple[float, SummaryResult]] = {}

    def get_summary(self, window: str = "all") -> SummaryResult:
        """
        Return the summary for a time window.

        Args:
            window: One of 1h, 24h, 7d, all

        Returns:
            SummaryResult (served from cache when fresh)

        Raises:
            ValueError: If the window is not recognised
        """
        if window not in TIME_WINDOWS:
            raise ValueError(f"Invalid time window. Valid options: {', '.join(TIME_WINDOWS)}")

        now = self._clock()
        cached = self._cache.get(window)
        if cached is not None and now <= cached[0]:
            return cached[1].model_copy(update={"cache_hit": True})

        body = build_summary(self.collector.snapshot(), window, now)
        result = SummaryResult(body=body, etag=_etag(body))
        self._cache[window] = (now + self.ttl_seconds, result)
        logger.debug("Validation summary generated", extra={"window": window, "etag": result.etag})
        return result

    def matches_etag(self, window: str, etag: str) -> bool:
        """True if the fresh cached summary for window carries this ETag."""
        cached = self._cache.get(window)
        if cached is None or self._clock() > cached[0]:
            return False
        return cached[1].etag == etag

    def invalidate(self) -> None:
        """Drop every cached summary."""
        self._cache.clear()


def build_summary(snapshot: MetricsSnapshot, window: str, now: float) -> dict[str, Any]:
    """
    Compute the summary document for one snapshot.

    Latencies are reported in milliseconds; percentile fields are None when
    the window holds no samples.
    """
    window_seconds = TIME_WINDOWS[window]
    window_start = now - window_seconds if window_seconds is not None else None

    samples = [
        s.elapsed_ms
        for s in snapshot.performance.samples
        if window_start is None or s.recorded_at >= window_start
    ]
    average = snapshot.performance.average_ms

    tiers = {}
    for tier in TIER_NAMES:
        requests = snapshot.requests_by_tier.get(tier, 0)
        errors = snapshot.errors_by_tier.get(tier, 0)
        successes = max(requests - errors, 0)
        tiers[tier] = {
            "total_requests": requests,
            "success_count": successes,
            "error_count": errors,
            "success_rate": (successes / requests) * 100 if requests else 0.0,
            "avg_latency_ms": average,
        }

    total_requests = sum(snapshot.requests_by_tier.values())
    total_errors = snapshot.total_errors

    if window_seconds is not None:
        elapsed_minutes = window_seconds / 60
    else:
        oldest = min((s.recorded_at for s in snapshot.performance.samples), default=now)
        elapsed_minutes = max((now - oldest) / 60, 1.0)

    errors_by_type: dict[str, int] = {}
    for codes in snapshot.errors_by_tier_and_code.values():
        for code, count in codes.items():
            errors_by_type[code] = errors_by_type.get(code, 0) + count

    return {
        "timestamp": _iso(now),
        "time_window": window,
        "window_start": _iso(window_start) if window_start is not None else None,
        "window_end": _iso(now) if window_start is not None else None,
        "summary": {
            "validation_calls": snapshot.total_requests,
            "total_requests": total_requests,
            "total_errors": total_errors,
            "overall_success_rate": ((total_requests - total_errors) / total_requests) * 100
            if total_requests
            else 0.0,
            "avg_latency_ms": average,
            "requests_per_minute": snapshot.total_requests / elapsed_minutes if snapshot.total_requests else 0.0,
        },
        "tiers": tiers,
        "errors": {
            "total": total_errors,
            "by_type": dict(sorted(errors_by_type.items())),
            "by_tier": {tier: snapshot.errors_by_tier.get(tier, 0) for tier in TIER_NAMES},
        },
        "latency": _latency_stats(samples),
    }


def _latency_stats(values: list[float]) -> dict[str, float | None]:
    if not values:
        return {"p50": None, "p95": None, "p99": None, "min": None, "max": None, "avg": None}
    return {
        "p50": percentile(values, 0.5),
        "p95": percentile(values, 0.95),
        "p99": percentile(values, 0.99),
        "min": min(values),
        "max": max(values),
        "avg": sum(values) / len(values),
    }


def _iso(epoch: float) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).isoformat()


def _etag(body: dict[str, Any]) -> str:
    digest = hashlib.md5(json.dumps(body, sort_keys=True).encode("utf-8")).hexdigest()
    return f'"{digest}"'
