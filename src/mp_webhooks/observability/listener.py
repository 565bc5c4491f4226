"""Observability – LoggingListener that turns lifecycle events into log lines."""
from __future__ import annotations

from typing import Any, Mapping

from mp_webhooks.observability.events import EventPublisher, WebhookEvent
from mp_webhooks.observability.logging import get_logger

__all__ = ["DEFAULT_EVENT_LEVELS", "LoggingListener"]

#: Events not listed here are logged at ``info``.
DEFAULT_EVENT_LEVELS: Mapping[str, str] = {
    "webhook.dispatching": "debug",
    "webhook.failed": "warning",
    "webhook.final_failed": "error",
    "webhook.invalid_signature": "warning",
}


class LoggingListener:
    """Log every published :class:`WebhookEvent` with its fields bound.

    Usage::

        LoggingListener().attach(engine.publisher)
    """

    def __init__(self, logger: Any = None, levels: Mapping[str, str] | None = None) -> None:
        self._log = logger if logger is not None else get_logger("webhooks.events")
        self._levels = dict(DEFAULT_EVENT_LEVELS if levels is None else levels)

    def attach(self, publisher: EventPublisher) -> "LoggingListener":
        publisher.subscribe(WebhookEvent, self)
        return self

    def detach(self, publisher: EventPublisher) -> None:
        publisher.unsubscribe(WebhookEvent, self)

    def __call__(self, event: WebhookEvent) -> None:
        fields = event.to_dict()
        fields.pop("event", None)
        level = self._levels.get(event.name, "info")
        getattr(self._log, level)(event.name, **fields)
