"""Observability – structlog helpers.

``get_logger(name)`` returns a bound structlog logger; modules call it once at
import time, the same way stdlib code calls ``logging.getLogger(__name__)``.
"""
from __future__ import annotations

from typing import Any

import structlog

from mp_webhooks.observability.logging.filters import SensitiveFieldsFilter


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, optionally pre-bound with *initial_values*."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


class RedactingProcessor:
    """structlog processor that masks sensitive keys in every event dict."""

    def __init__(self, sensitive_fields: frozenset[str] | None = None) -> None:
        self._filter = SensitiveFieldsFilter(sensitive_fields)

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        return self._filter.redact_deep(event_dict)


__all__ = ["RedactingProcessor", "get_logger"]
