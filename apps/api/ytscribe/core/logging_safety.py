"""Utilities for safe structured logging fields and stored error details."""

from __future__ import annotations

import hashlib
from typing import Any

_MAX_DETAIL_LENGTH = 1000


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for user-supplied references."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def error_detail(action: str, exc: BaseException) -> str:
    """Build the human-readable ``last_error`` text for a failed stage.

    Collaborator messages can carry whole subprocess stderr dumps; only the
    tail is kept.
    """
    message = str(exc).strip() or type(exc).__name__
    if len(message) > _MAX_DETAIL_LENGTH:
        message = "..." + message[-_MAX_DETAIL_LENGTH:]
    return f"{action}: {message}"
