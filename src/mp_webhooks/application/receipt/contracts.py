"""Application receipt – collaborator ports and their default variants."""
from __future__ import annotations

import json
from typing import Iterable, Protocol, runtime_checkable

from mp_webhooks.application.receipt.record import InboundRequest, ReceivedWebhook, WebhookResponse

__all__ = [
    "AdmissionFilter",
    "DefaultResponseBuilder",
    "EventTypeFilter",
    "NoopProcessor",
    "ProcessEverything",
    "ResponseBuilder",
    "WebhookProcessor",
]


@runtime_checkable
class WebhookProcessor(Protocol):
    """Port: application handling of a verified, stored webhook."""

    async def process(self, webhook: ReceivedWebhook) -> None: ...


class NoopProcessor:
    """Store-only endpoints: processing succeeds without doing anything."""

    async def process(self, webhook: ReceivedWebhook) -> None:  # noqa: ARG002
        return None


@runtime_checkable
class AdmissionFilter(Protocol):
    """Port: decide whether a verified request is stored and processed."""

    def should_process(self, request: InboundRequest) -> bool: ...


class ProcessEverything:
    def should_process(self, request: InboundRequest) -> bool:  # noqa: ARG002
        return True


class EventTypeFilter:
    """Admit JSON payloads whose *field* is one of *allowed*.

    Non-JSON bodies and payloads without the field are ignored.
    """

    def __init__(self, allowed: Iterable[str], field: str = "type") -> None:
        self._allowed = frozenset(allowed)
        self._field = field

    def should_process(self, request: InboundRequest) -> bool:
        try:
            data = json.loads(request.body)
        except ValueError:
            return False
        if not isinstance(data, dict):
            return False
        value = data.get(self._field)
        return isinstance(value, str) and value in self._allowed


@runtime_checkable
class ResponseBuilder(Protocol):
    """Port: the HTTP acknowledgment for a stored (or duplicate) webhook."""

    def build_acknowledgment(self, webhook: ReceivedWebhook) -> WebhookResponse: ...


class DefaultResponseBuilder:
    def build_acknowledgment(self, webhook: ReceivedWebhook) -> WebhookResponse:  # noqa: ARG002
        return WebhookResponse(200, "Webhook received")
