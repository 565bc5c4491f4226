"""Observability – in-process event publisher with explicit subscriptions.

Engines receive a publisher instance at construction; there is no global bus.

Example::

    publisher = EventPublisher()
    publisher.subscribe(WebhookCallFailed, alert_on_failure)
    engine = DeliveryEngine(transport, scheduler, publisher=publisher)
"""
from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, TypeVar, Union

from mp_webhooks.observability.events.base import WebhookEvent
from mp_webhooks.observability.logging.processors import get_logger

__all__ = ["EventPublisher", "Handler", "RecordingPublisher"]

E = TypeVar("E", bound=WebhookEvent)

#: Handlers may be plain functions or coroutine functions.
Handler = Callable[[Any], Union[None, Awaitable[None]]]

logger = get_logger(__name__)


class EventPublisher:
    """Dispatch events to handlers registered for their type (or a base type)."""

    def __init__(self) -> None:
        self._handlers: list[tuple[type[WebhookEvent], Handler]] = []

    def subscribe(self, event_type: type[E], handler: Handler) -> None:
        """Register *handler* for *event_type* and all of its subclasses."""
        self._handlers.append((event_type, handler))

    def unsubscribe(self, event_type: type[WebhookEvent], handler: Handler) -> None:
        self._handlers = [
            (t, h) for t, h in self._handlers if not (t is event_type and h == handler)
        ]

    def handlers_for(self, event: WebhookEvent) -> list[Handler]:
        return [h for t, h in self._handlers if isinstance(event, t)]

    async def publish(self, event: WebhookEvent) -> None:
        """Deliver *event* to every matching handler in registration order.

        A failing handler is logged and skipped; observers never change the
        outcome of a delivery or receipt.
        """
        for handler in self.handlers_for(event):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:  # noqa: BLE001
                logger.exception("events.handler_failed", event_name=event.name, handler=repr(handler))


class RecordingPublisher(EventPublisher):
    """Publisher that also keeps every published event (tests, debugging)."""

    def __init__(self) -> None:
        super().__init__()
        self._events: list[WebhookEvent] = []

    async def publish(self, event: WebhookEvent) -> None:
        self._events.append(event)
        await super().publish(event)

    @property
    def events(self) -> list[WebhookEvent]:
        return list(self._events)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self._events if isinstance(e, event_type)]

    def names(self) -> list[str]:
        return [e.name for e in self._events]

    def clear(self) -> None:
        self._events.clear()
