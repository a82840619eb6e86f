"""
Prometheus text exposition of validation metrics

Renders a MetricsSnapshot with prometheus_client metric families on a
private, per-render CollectorRegistry. generate_latest supplies the HELP and
TYPE headers, label escaping and the +Inf/-Inf/NaN tokens; this module
decides which families, labels and values go in.
"""
import math
import platform
import time
from typing import Iterable, Literal

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    HistogramMetricFamily,
    InfoMetricFamily,
)
from prometheus_client.utils import floatToGoString
from pydantic import BaseModel, Field

from suggest_validation.core.exceptions import MetricsUnavailableError
from suggest_validation.core.models import (
    CORE,
    HIGH_FREQUENCY,
    OPTIONAL,
    TIER_NAMES,
    LatencySample,
    MetricsSnapshot,
)
from suggest_validation.core.validators import INVALID_ENUM, INVALID_TYPE, OUT_OF_RANGE, REQUIRED
from suggest_validation.observability.logger import get_logger
from suggest_validation.observability.metrics import percentile

logger = get_logger(__name__)

DetailLevel = Literal["disabled", "basic", "standard", "detailed"]

DISABLED_MARKER = "# Metrics collection disabled\n"

# Label value for the cross-tier aggregate
ALL_TIERS = "all"

# Modes always rendered for each tier, so series exist before traffic arrives
KNOWN_MODES = ("strict", "compatible")

# Error codes always rendered for each tier
KNOWN_ERROR_CODES = (REQUIRED, INVALID_TYPE, OUT_OF_RANGE, INVALID_ENUM)

# =======================
# HISTOGRAM BUCKETS (seconds)
# =======================

BUCKETS: dict[str, tuple[float, ...]] = {
    "basic": (0.01, 0.05, 0.1, 0.5, 1.0),
    "standard": (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
    "detailed": (0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
}

LEVEL_TIERS: dict[str, tuple[str, ...]] = {
    "basic": (CORE,),
    "standard": (CORE, HIGH_FREQUENCY, OPTIONAL),
    "detailed": TIER_NAMES,
}

RESERVED_TIER_LABELS = frozenset(TIER_NAMES) | {ALL_TIERS}


class ExportOptions(BaseModel):
    """
    Rendering options for one exposition.

    Attributes:
        detail_level: disabled, basic, standard or detailed
        sampling_rate: Fraction in (0, 1] every count is scaled by
        max_label_values: Cap on distinct non-standard label combinations per metric
        build_version: Version string stamped into the build-info block
        start_time: Process start (epoch seconds)
        runtime_version: Python version stamped into the build-info block
    """

    detail_level: DetailLevel = "standard"
    sampling_rate: float = Field(default=1.0, gt=0.0, le=1.0)
    max_label_values: int = Field(default=100, ge=1)
    build_version: str = "dev"
    start_time: float = Field(default_factory=time.time)
    runtime_version: str = Field(default_factory=platform.python_version)

    class Config:
        frozen = True


class CardinalityGuard:
    """
    Remembers, per metric name, every label combination ever emitted.

    Combinations whose tier label is one of the standard tiers (or "all")
    are always admitted and never count toward the cap. Any other new
    combination is admitted only while fewer than max_label_values such
    combinations have been seen for that metric.
    """

    def __init__(self):
        self._seen: dict[str, set[tuple[str, ...]]] = {}
        self._warned: set[str] = set()

    def admit(self, metric: str, tier: str, labels: tuple[str, ...], max_label_values: int) -> bool:
        """
        Decide whether a label combination may be emitted.

        Args:
            metric: Metric family name
            tier: Tier label value of the combination
            labels: Full label value tuple
            max_label_values: Cap for non-standard combinations

        Returns:
            True if the combination may be rendered
        """
        if tier in RESERVED_TIER_LABELS:
            return True

        seen = self._seen.setdefault(metric, set())
        if labels in seen:
            return True
        if len(seen) < max_label_values:
            seen.add(labels)
            return True

        if metric not in self._warned:
            self._warned.add(metric)
            logger.warning(
                "Label cardinality limit reached, dropping new label combinations",
                extra={"metric": metric, "max_label_values": max_label_values, "dropped_labels": list(labels)},
            )
        else:
            logger.debug("Dropped label combination", extra={"metric": metric, "dropped_labels": list(labels)})
        return False

    def seen_count(self, metric: str) -> int:
        """Number of non-standard combinations admitted for a metric."""
        return len(self._seen.get(metric, ()))


class _SnapshotCollector:
    """One-shot prometheus_client collector yielding prebuilt families."""

    def __init__(self, families: list):
        self._families = families

    def collect(self):
        return iter(self._families)


class MetricsExporter:
    """
    Renders collector snapshots in the Prometheus text format.

    The cardinality guard is the only state kept between renders.
    """

    def __init__(self, guard: CardinalityGuard | None = None):
        self.guard = guard or CardinalityGuard()

    def render(self, snapshot: MetricsSnapshot, options: ExportOptions) -> str:
        """
        Render a snapshot.

        Args:
            snapshot: Collector snapshot
            options: Detail level, sampling, cardinality cap and build metadata

        Returns:
            Exposition text

        Raises:
            MetricsUnavailableError: If rendering fails internally
        """
        if options.detail_level == "disabled":
            return DISABLED_MARKER

        try:
            families = self._build_families(snapshot, options)
            registry = CollectorRegistry()
            registry.register(_SnapshotCollector(families))
            return generate_latest(registry).decode("utf-8")
        except Exception as e:
            raise MetricsUnavailableError(f"Failed to render metrics: {e}") from e

    # =======================
    # FAMILY BUILDERS
    # =======================

    def _build_families(self, snapshot: MetricsSnapshot, options: ExportOptions) -> list:
        tiers = self._tiers_for(snapshot, options.detail_level)
        rate = options.sampling_rate

        families = [
            CounterMetricFamily(
                "suggest_validation_calls",
                "Total number of validation calls recorded",
                value=_scale(snapshot.total_requests, rate),
            ),
            self._requests_family(snapshot, tiers, options),
            self._errors_family(snapshot, tiers, options),
            self._duration_family(snapshot, tiers, options),
        ]
        if options.detail_level == "detailed":
            families.extend(self._latency_gauges(snapshot, tiers, options))
        families.extend(self._build_info(options))
        return families

    @staticmethod
    def _tiers_for(snapshot: MetricsSnapshot, detail_level: str) -> list[str]:
        tiers = list(LEVEL_TIERS[detail_level])
        if detail_level == "detailed":
            extra = set(snapshot.requests_by_tier) | set(snapshot.errors_by_tier)
            tiers.extend(sorted(extra - set(TIER_NAMES)))
            tiers.append(ALL_TIERS)
        return tiers

    def _requests_family(self, snapshot: MetricsSnapshot, tiers: list[str], options: ExportOptions):
        name = "tier_validation_requests"
        family = CounterMetricFamily(
            name,
            "Provided fields validated, by tier and validation mode",
            labels=["tier", "mode"],
        )
        by_mode = snapshot.requests_by_tier_and_mode
        for tier in tiers:
            counts = _sum_nested(by_mode.values()) if tier == ALL_TIERS else by_mode.get(tier, {})
            for mode in _ordered_keys(KNOWN_MODES, counts):
                if self.guard.admit(name, tier, (tier, mode), options.max_label_values):
                    family.add_metric([tier, mode], _scale(counts.get(mode, 0), options.sampling_rate))
        return family

    def _errors_family(self, snapshot: MetricsSnapshot, tiers: list[str], options: ExportOptions):
        name = "tier_validation_errors"
        family = CounterMetricFamily(
            name,
            "Validation errors, by tier and error code",
            labels=["tier", "error_type"],
        )
        by_code = snapshot.errors_by_tier_and_code
        for tier in tiers:
            counts = _sum_nested(by_code.values()) if tier == ALL_TIERS else by_code.get(tier, {})
            for code in _ordered_keys(KNOWN_ERROR_CODES, counts):
                if self.guard.admit(name, tier, (tier, code), options.max_label_values):
                    family.add_metric([tier, code], _scale(counts.get(code, 0), options.sampling_rate))
        return family

    def _duration_family(self, snapshot: MetricsSnapshot, tiers: list[str], options: ExportOptions):
        name = "tier_validation_duration_seconds"
        family = HistogramMetricFamily(
            name,
            "Validation latency over the recent sample window, by tier",
            labels=["tier"],
        )
        bounds = BUCKETS[options.detail_level]
        for tier in tiers:
            if not self.guard.admit(name, tier, (tier,), options.max_label_values):
                continue
            seconds = [s.elapsed_ms / 1000.0 for s in _samples_for(snapshot.performance.samples, tier)]
            buckets = [
                (floatToGoString(bound), _scale(sum(1 for v in seconds if v <= bound), options.sampling_rate))
                for bound in bounds
            ]
            buckets.append(("+Inf", _scale(len(seconds), options.sampling_rate)))
            family.add_metric([tier], buckets, sum(seconds) * options.sampling_rate)
        return family

    def _latency_gauges(self, snapshot: MetricsSnapshot, tiers: list[str], options: ExportOptions) -> list:
        gauges = {
            "min": GaugeMetricFamily(
                "tier_validation_latency_min_seconds", "Fastest validation in the sample window", labels=["tier"]
            ),
            "max": GaugeMetricFamily(
                "tier_validation_latency_max_seconds", "Slowest validation in the sample window", labels=["tier"]
            ),
            "p95": GaugeMetricFamily(
                "tier_validation_latency_p95_seconds", "95th percentile validation latency", labels=["tier"]
            ),
        }
        for tier in tiers:
            seconds = [s.elapsed_ms / 1000.0 for s in _samples_for(snapshot.performance.samples, tier)]
            values = {
                "min": min(seconds) if seconds else math.nan,
                "max": max(seconds) if seconds else math.nan,
                "p95": percentile(seconds, 0.95),
            }
            for key, family in gauges.items():
                if self.guard.admit(family.name, tier, (tier,), options.max_label_values):
                    family.add_metric([tier], values[key])
        return list(gauges.values())

    @staticmethod
    def _build_info(options: ExportOptions) -> list:
        build = InfoMetricFamily("suggest_validation_build", "Build information")
        build.add_metric([], {"version": options.build_version, "python_version": options.runtime_version})

        config = GaugeMetricFamily(
            "suggest_validation_metrics_config",
            "Active metrics configuration; value is the sampling rate",
            labels=["detail_level", "max_label_values"],
        )
        config.add_metric([options.detail_level, str(options.max_label_values)], options.sampling_rate)

        start = GaugeMetricFamily(
            "process_start_time_seconds",
            "Start time of the process since unix epoch in seconds",
            value=options.start_time,
        )

        major, minor, patch = (options.runtime_version.split(".") + ["", "", ""])[:3]
        python = InfoMetricFamily("python_version", "Python runtime information")
        python.add_metric(
            [],
            {
                "version": options.runtime_version,
                "implementation": platform.python_implementation(),
                "major": major,
                "minor": minor,
                "patchlevel": patch,
            },
        )
        return [build, config, start, python]


# =======================
# HELPERS
# =======================

def _scale(count: float, rate: float) -> int:
    """Scale a count by the sampling rate; rounding keeps cumulative buckets non-decreasing."""
    return int(round(count * rate))


def _samples_for(samples: Iterable[LatencySample], tier: str) -> list[LatencySample]:
    if tier == ALL_TIERS:
        return list(samples)
    return [s for s in samples if tier in s.tiers]


def _sum_nested(groups: Iterable[dict[str, int]]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for group in groups:
        for key, count in group.items():
            totals[key] = totals.get(key, 0) + count
    return totals


def _ordered_keys(known: tuple[str, ...], counts: dict[str, int]) -> list[str]:
    return list(known) + sorted(set(counts) - set(known))
