"""
Pull-style metrics endpoint and its environment configuration

MetricsEndpoint turns the current collector snapshot into an HTTP-shaped
response; make_wsgi_app exposes it (and the JSON validation summary) to any
WSGI server, e.g. ``wsgiref.simple_server.make_server``.
"""
import json
import os
import time
from http import HTTPStatus
from typing import Any, Callable, Mapping
from urllib.parse import parse_qs

import psutil
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import BaseModel, Field, ValidationError, field_validator

from suggest_validation import __version__
from suggest_validation.core.exceptions import ConfigError, MetricsUnavailableError
from suggest_validation.observability.exporter import (
    DISABLED_MARKER,
    DetailLevel,
    ExportOptions,
    MetricsExporter,
)
from suggest_validation.observability.logger import get_logger
from suggest_validation.observability.metrics import MetricsCollector
from suggest_validation.observability.summary import TIME_WINDOWS, ValidationSummaryService

logger = get_logger(__name__)

NO_CACHE = "no-cache, no-store, must-revalidate"

FALLBACK_BODY = (
    "# HELP suggest_validation_metrics_error Metrics rendering failed\n"
    "# TYPE suggest_validation_metrics_error gauge\n"
    "suggest_validation_metrics_error 1.0\n"
)

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


class MetricsSettings(BaseModel):
    """
    Metrics exposition toggles.

    Environment variables:
        METRICS_ENABLED: true/false (default true)
        METRICS_LEVEL: disabled, basic, standard, detailed (default standard)
        METRICS_SAMPLING_RATE: float in (0, 1] (default 1.0)
        METRICS_MAX_LABEL_VALUES: int >= 1 (default 100)
        BUILD_VERSION: version stamped into the build-info block
    """

    enabled: bool = True
    detail_level: DetailLevel = "standard"
    sampling_rate: float = Field(default=1.0, gt=0.0, le=1.0)
    max_label_values: int = Field(default=100, ge=1)
    build_version: str = __version__

    class Config:
        frozen = True

    @field_validator("enabled", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        """Accept the usual textual spellings of a boolean flag."""
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(f"Invalid boolean flag: {v!r}")
        return v

    @property
    def served_level(self) -> str:
        """Detail level actually served: disabled whenever collection is off."""
        return self.detail_level if self.enabled else "disabled"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MetricsSettings":
        """
        Read settings from the environment.

        Raises:
            ConfigError: If any variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        raw: dict[str, Any] = {}
        for key, field_name in (
            ("METRICS_ENABLED", "enabled"),
            ("METRICS_LEVEL", "detail_level"),
            ("METRICS_SAMPLING_RATE", "sampling_rate"),
            ("METRICS_MAX_LABEL_VALUES", "max_label_values"),
            ("BUILD_VERSION", "build_version"),
        ):
            if env.get(key):
                raw[field_name] = env[key].strip()

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            problems = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
            raise ConfigError(f"Invalid metrics settings: {problems}", "environment") from e


class MetricsResponse(BaseModel):
    """Status, headers and body of one exposition request."""

    status: int
    headers: dict[str, str]
    body: str

    class Config:
        frozen = True


def process_start_time() -> float:
    """Creation time of the current process (epoch seconds)."""
    return psutil.Process(os.getpid()).create_time()


def memory_usage_mb() -> float:
    """Resident set size of the current process in megabytes."""
    return psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)


class MetricsEndpoint:
    """
    Serves the metrics exposition for one collector.

    Rendering failures never escape handle(); they are logged and answered
    with a 500 and a minimal valid exposition document.
    """

    def __init__(
        self,
        collector: MetricsCollector,
        exporter: MetricsExporter,
        settings: MetricsSettings,
        start_time: float | None = None,
    ):
        self.collector = collector
        self.exporter = exporter
        self.settings = settings
        self.start_time = process_start_time() if start_time is None else start_time

    def export_options(self) -> ExportOptions:
        return ExportOptions(
            detail_level=self.settings.served_level,
            sampling_rate=self.settings.sampling_rate,
            max_label_values=self.settings.max_label_values,
            build_version=self.settings.build_version,
            start_time=self.start_time,
        )

    def handle(self) -> MetricsResponse:
        """Render the current metrics as an HTTP-shaped response."""
        level = self.settings.served_level
        if level == "disabled":
            return MetricsResponse(
                status=200,
                headers={
                    "Content-Type": CONTENT_TYPE_LATEST,
                    "Cache-Control": NO_CACHE,
                    "X-Metrics-Level": "disabled",
                },
                body=DISABLED_MARKER,
            )

        start = time.perf_counter()
        try:
            body = self.exporter.render(self.collector.snapshot(), self.export_options())
        except MetricsUnavailableError as e:
            logger.error("Metrics exposition failed", extra={"error": str(e), "level": level}, exc_info=True)
            return MetricsResponse(
                status=500,
                headers={"Content-Type": CONTENT_TYPE_LATEST, "Cache-Control": NO_CACHE, "X-Metrics-Level": level},
                body=FALLBACK_BODY,
            )

        logger.debug(
            "Metrics rendered",
            extra={"level": level, "bytes": len(body), "duration_ms": (time.perf_counter() - start) * 1000},
        )
        return MetricsResponse(
            status=200,
            headers={
                "Content-Type": CONTENT_TYPE_LATEST,
                "Cache-Control": NO_CACHE,
                "X-Metrics-Level": level,
                "X-Metrics-Memory-MB": f"{memory_usage_mb():.2f}",
            },
            body=body,
        )


# =======================
# WSGI
# =======================


def _json_response(status: int, payload: Any, headers: dict[str, str] | None = None) -> MetricsResponse:
    return MetricsResponse(
        status=status,
        headers={"Content-Type": "application/json", **(headers or {})},
        body=json.dumps(payload),
    )


def handle_summary_request(
    summary: ValidationSummaryService,
    settings: MetricsSettings,
    window: str | None,
    if_none_match: str | None = None,
) -> MetricsResponse:
    """
    Answer a summary request.

    Returns 503 when collection is disabled, 400 for an unknown window and
    304 when the client's ETag matches the fresh cached summary.
    """
    if not settings.enabled:
        return _json_response(503, {"error": "Metrics collection is disabled"})

    window = window or "all"
    if window not in TIME_WINDOWS:
        return _json_response(400, {"error": f"Invalid time window. Valid options: {', '.join(TIME_WINDOWS)}"})

    cache_headers = {"Cache-Control": f"private, max-age={int(summary.ttl_seconds)}"}
    if if_none_match and summary.matches_etag(window, if_none_match):
        return MetricsResponse(status=304, headers={"ETag": if_none_match, **cache_headers}, body="")

    result = summary.get_summary(window)
    return _json_response(
        200,
        result.body,
        {"ETag": result.etag, "X-Cache": "HIT" if result.cache_hit else "MISS", **cache_headers},
    )


def make_wsgi_app(endpoint: MetricsEndpoint, summary: ValidationSummaryService) -> Callable:
    """
    Build a WSGI application serving GET /metrics and GET /validation/summary.

    Args:
        endpoint: Metrics endpoint
        summary: Summary service

    Returns:
        WSGI callable
    """
    def app(environ, start_response):
        path = environ.get("PATH_INFO", "/")
        method = environ.get("REQUEST_METHOD", "GET")

        if path not in ("/metrics", "/validation/summary"):
            response = _json_response(404, {"error": "Not found"})
        elif method != "GET":
            response = _json_response(405, {"error": "Method not allowed"})
        elif path == "/metrics":
            response = endpoint.handle()
        else:
            query = parse_qs(environ.get("QUERY_STRING", ""))
            response = handle_summary_request(
                summary,
                endpoint.settings,
                window=query.get("window", [None])[0],
                if_none_match=environ.get("HTTP_IF_NONE_MATCH"),
            )

        start_response(f"{response.status} {HTTPStatus(response.status).phrase}", list(response.headers.items()))
        return [response.body.encode("utf-8")]

    return app
