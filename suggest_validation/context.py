"""
Composition root for suggest-validation.

ValidationContext constructs and owns every long-lived collaborator (tier
store, metrics collector, exporter, summary cache, service and endpoint).
Nothing is held in module-level state; tests and embedders create as many
independent contexts as they need.
"""

import time
from pathlib import Path
from typing import Any, Callable, Mapping

from suggest_validation.core.models import ValidationOutcome
from suggest_validation.core.service import SuggestionValidationService
from suggest_validation.core.tiers import TierConfigStore, ValidationMode
from suggest_validation.observability.endpoint import (
    MetricsEndpoint,
    MetricsResponse,
    MetricsSettings,
    make_wsgi_app,
)
from suggest_validation.observability.exporter import MetricsExporter
from suggest_validation.observability.logger import get_logger
from suggest_validation.observability.metrics import MetricsCollector, record_validation_metrics
from suggest_validation.observability.summary import SummaryResult, ValidationSummaryService

logger = get_logger(__name__)


class ValidationContext:
    """Process-wide validation and metrics wiring."""

    def __init__(
        self,
        settings: MetricsSettings,
        store: TierConfigStore,
        collector: MetricsCollector,
        exporter: MetricsExporter,
        summary: ValidationSummaryService,
        endpoint: MetricsEndpoint,
    ):
        self.settings = settings
        self.store = store
        self.collector = collector
        self.exporter = exporter
        self.summary = summary
        self.endpoint = endpoint
        self.service = SuggestionValidationService(store)

        self._recorded_validate = record_validation_metrics(collector, self._tier_of)(
            self.service.validate_request
        )

    @classmethod
    def create(
        cls,
        settings: MetricsSettings | None = None,
        tier_config_path: str | Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "ValidationContext":
        """
        Build a context with default collaborators.

        Args:
            settings: Metrics settings (defaults to MetricsSettings.from_env())
            tier_config_path: Tier document (defaults to TIER_CONFIG or the packaged file)
            clock: Wall-clock source shared by the collector and summary cache

        Raises:
            ConfigError: If the metrics environment is invalid
        """
        settings = settings or MetricsSettings.from_env()
        collector = MetricsCollector(clock=clock)
        summary = ValidationSummaryService(collector, clock=clock)
        collector.add_reset_listener(summary.invalidate)
        exporter = MetricsExporter()

        context = cls(
            settings=settings,
            store=TierConfigStore(tier_config_path),
            collector=collector,
            exporter=exporter,
            summary=summary,
            endpoint=MetricsEndpoint(collector, exporter, settings),
        )
        logger.info(
            "Validation context created",
            extra={
                "tier_config": str(context.store.source),
                "metrics_level": settings.served_level,
                "sampling_rate": settings.sampling_rate,
            },
        )
        return context

    def _tier_of(self, field: str) -> str:
        return self.store.get().tier_of(field)

    async def validate(
        self,
        body: str | bytes | Mapping[str, Any] | None,
        mode: ValidationMode | str = ValidationMode.STRICT,
    ) -> ValidationOutcome:
        """
        Validate one submission, recording metrics when collection is enabled.

        Raises:
            ConfigError: If the tier configuration cannot be loaded
            MalformedRequestError: If the body is missing or not a flat JSON object
        """
        if not self.settings.enabled:
            return await self.service.validate_request(body, mode)
        return await self._recorded_validate(body, mode)

    def render_metrics(self) -> MetricsResponse:
        """Current metrics exposition as an HTTP-shaped response."""
        return self.endpoint.handle()

    def get_summary(self, window: str = "all") -> SummaryResult:
        """JSON validation summary for a time window."""
        return self.summary.get_summary(window)

    def reset_metrics(self) -> None:
        """Zero the collector; cached summaries are invalidated with it."""
        self.collector.reset()

    def wsgi_app(self) -> Callable:
        """WSGI application serving /metrics and /validation/summary."""
        return make_wsgi_app(self.endpoint, self.summary)
