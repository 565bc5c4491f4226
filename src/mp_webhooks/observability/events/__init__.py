"""Observability – webhook lifecycle events and the publisher engines emit to."""
from mp_webhooks.observability.events.base import WebhookEvent
from mp_webhooks.observability.events.publisher import EventPublisher, Handler, RecordingPublisher

__all__ = ["EventPublisher", "Handler", "RecordingPublisher", "WebhookEvent"]
