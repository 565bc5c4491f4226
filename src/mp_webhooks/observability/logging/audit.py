"""Observability – AuditLogger.

A dedicated structured-log sink for security-relevant webhook events such as
rejected signatures and replayed timestamps.
"""
from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from mp_webhooks.observability.logging.processors import get_logger


class AuditOutcome(str, Enum):
    """Standardised audit outcomes."""

    SUCCESS = "success"
    FAILURE = "failure"
    DENIED = "denied"


class AuditLogger:
    """Emit audit entries at ``WARNING`` so they survive restrictive log levels.

    Parameters
    ----------
    service:
        Logical service name injected into every audit entry.
    logger:
        Underlying structlog logger. Defaults to ``get_logger("audit")``.
    """

    def __init__(self, service: str = "webhooks", logger: Any = None) -> None:
        self._service = service
        self._log = logger if logger is not None else get_logger("audit")

    def log_security_event(
        self,
        event_type: str,
        description: str = "",
        outcome: AuditOutcome | str = AuditOutcome.DENIED,
        **extra: Any,
    ) -> dict[str, Any]:
        """Record a security event and return the emitted entry.

        Parameters
        ----------
        event_type:
            Short identifier such as ``"invalid_signature"`` or
            ``"expired_timestamp"``.
        description:
            Human-readable description of what happened.
        outcome:
            :class:`AuditOutcome` or plain string.
        **extra:
            Additional structured fields (config name, webhook id, ...).
        """
        entry: dict[str, Any] = {
            "service": self._service,
            "event_type": event_type,
            "description": description,
            "outcome": outcome.value if isinstance(outcome, AuditOutcome) else str(outcome),
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            **extra,
        }
        self._log.warning(f"audit.{event_type}", **entry)
        return entry


__all__ = ["AuditLogger", "AuditOutcome"]
