"""
Input validation utilities for the suggestion validation boundary.

Turns raw request bodies into records and generates submission
identifiers. Problems with the body itself are reported as
MalformedRequestError, distinct from tier validation failures.
"""

import json
import secrets
import time
from typing import Any, Mapping

from suggest_validation.core.exceptions import MalformedRequestError
from suggest_validation.core.models import CanonicalRecord, is_scalar

# Prevent oversized bodies from reaching the JSON parser (DOS protection)
MAX_BODY_BYTES = 256 * 1024


def parse_request_body(body: str | bytes | Mapping[str, Any] | None) -> CanonicalRecord:
    """
    Parse a request body into a flat record.

    Args:
        body: Raw JSON text/bytes, an already-parsed mapping, or None

    Returns:
        The record as a new dict

    Raises:
        MalformedRequestError: ``missing_body`` for an empty body,
            ``invalid_json`` for unparseable or non-flat content

    Examples:
        >>> parse_request_body('{"lat": 51.5, "lng": -0.12}')
        {'lat': 51.5, 'lng': -0.12}
        >>> parse_request_body(None)  # doctest: +SKIP
        MalformedRequestError: [missing_body] Request body is required
    """
    if body is None:
        raise MalformedRequestError(MalformedRequestError.MISSING_BODY, "Request body is required")

    if isinstance(body, Mapping):
        document: Any = dict(body)
    else:
        if isinstance(body, bytes):
            if len(body) > MAX_BODY_BYTES:
                raise MalformedRequestError(
                    MalformedRequestError.INVALID_JSON,
                    f"Request body exceeds maximum size of {MAX_BODY_BYTES} bytes",
                )
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError:
                raise MalformedRequestError(MalformedRequestError.INVALID_JSON, "Request body is not valid UTF-8")

        if not body.strip():
            raise MalformedRequestError(MalformedRequestError.MISSING_BODY, "Request body is required")
        if len(body) > MAX_BODY_BYTES:
            raise MalformedRequestError(
                MalformedRequestError.INVALID_JSON,
                f"Request body exceeds maximum size of {MAX_BODY_BYTES} bytes",
            )

        try:
            document = json.loads(body)
        except json.JSONDecodeError as e:
            raise MalformedRequestError(MalformedRequestError.INVALID_JSON, f"Invalid JSON format: {e.msg}")

    if not isinstance(document, dict):
        raise MalformedRequestError(
            MalformedRequestError.INVALID_JSON,
            f"Request body must be a JSON object, got {type(document).__name__}",
        )

    for key, value in document.items():
        if not isinstance(key, str):
            raise MalformedRequestError(MalformedRequestError.INVALID_JSON, "Field names must be strings")
        if not is_scalar(value):
            raise MalformedRequestError(
                MalformedRequestError.INVALID_JSON,
                f"Field '{key}' must be a number, boolean, string or null, got {type(value).__name__}",
            )

    return document


def generate_suggestion_id(now: float | None = None) -> str:
    """
    Generate a unique suggestion identifier.

    Format: ``suggest_<epoch millis>_<8 hex chars>``

    Examples:
        >>> generate_suggestion_id(now=1700000000.0)  # doctest: +SKIP
        'suggest_1700000000000_9f1c2ab3'
    """
    millis = int((time.time() if now is None else now) * 1000)
    return f"suggest_{millis}_{secrets.token_hex(4)}"
