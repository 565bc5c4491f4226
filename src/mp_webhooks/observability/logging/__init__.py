"""Observability – structured logging helpers (structlog)."""
from mp_webhooks.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from mp_webhooks.observability.logging.processors import RedactingProcessor, get_logger
from mp_webhooks.observability.logging.factory import configure_logging
from mp_webhooks.observability.logging.audit import AuditLogger, AuditOutcome

__all__ = [
    "AuditLogger",
    "AuditOutcome",
    "DEFAULT_SENSITIVE_FIELDS",
    "RedactingProcessor",
    "SensitiveFieldsFilter",
    "configure_logging",
    "get_logger",
]
