"""
Error taxonomy for the suggestion validation pipeline.

Per-field validation problems are never raised out of the validator; they are
collected into the ValidationVerdict. The exceptions here cover the failures
that must reach the caller.
"""


class SuggestValidationError(Exception):
    """Base class for all errors raised by suggest_validation."""


class ConfigError(SuggestValidationError):
    """Tier configuration is missing, unreadable or structurally invalid."""

    def __init__(self, message: str, source: str | None = None):
        self.message = message
        self.source = source
        if source:
            super().__init__(f"{message} (source: {source})")
        else:
            super().__init__(message)


class MalformedRequestError(SuggestValidationError):
    """
    Request body could not be turned into a record.

    Raised before field mapping runs. ``kind`` is one of
    ``missing_body`` or ``invalid_json``.
    """

    MISSING_BODY = "missing_body"
    INVALID_JSON = "invalid_json"

    def __init__(self, kind: str, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"[{kind}] {message}")


class MetricsUnavailableError(SuggestValidationError):
    """The metrics exposition could not be rendered."""
