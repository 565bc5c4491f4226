"""Observability – lifecycle events, structured logging and audit."""
from mp_webhooks.observability.events import EventPublisher, RecordingPublisher, WebhookEvent
from mp_webhooks.observability.listener import LoggingListener
from mp_webhooks.observability.logging import AuditLogger, configure_logging, get_logger

__all__ = [
    "AuditLogger",
    "EventPublisher",
    "LoggingListener",
    "RecordingPublisher",
    "WebhookEvent",
    "configure_logging",
    "get_logger",
]
