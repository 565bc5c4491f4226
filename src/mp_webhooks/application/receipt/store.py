"""Application receipt – WebhookStore port and in-memory implementation."""
from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Protocol, runtime_checkable

from mp_webhooks.application.receipt.record import IdempotencyKey, InsertResult, ReceivedWebhook
from mp_webhooks.application.receipt.status import WebhookStatus
from mp_webhooks.kernel.errors import WebhookNotFoundError

__all__ = ["InMemoryWebhookStore", "WebhookStore"]


@runtime_checkable
class WebhookStore(Protocol):
    """Port: durable storage of received webhooks keyed by :class:`IdempotencyKey`.

    ``insert_pending`` must be atomic: of two concurrent inserts for the same
    key exactly one returns :attr:`InsertResult.OK`.
    """

    async def find_by_idempotency_key(self, key: IdempotencyKey) -> ReceivedWebhook | None: ...

    async def insert_pending(self, webhook: ReceivedWebhook) -> InsertResult: ...

    async def update_status(
        self,
        key: IdempotencyKey,
        status: WebhookStatus,
        *,
        error: str | None = None,
        processed_at: datetime | None = None,
        attempts: int | None = None,
    ) -> ReceivedWebhook: ...

    async def find_by_status(
        self, status: WebhookStatus, config_name: str | None = None
    ) -> list[ReceivedWebhook]: ...

    async def prune(self, config_name: str, older_than: datetime) -> int: ...


class InMemoryWebhookStore:
    """Dict-backed store; one ``asyncio.Lock`` serialises writes."""

    def __init__(self) -> None:
        self._records: dict[IdempotencyKey, ReceivedWebhook] = {}
        self._lock = asyncio.Lock()

    async def find_by_idempotency_key(self, key: IdempotencyKey) -> ReceivedWebhook | None:
        return self._records.get(key)

    async def insert_pending(self, webhook: ReceivedWebhook) -> InsertResult:
        async with self._lock:
            if webhook.key in self._records:
                return InsertResult.DUPLICATE
            self._records[webhook.key] = webhook
            return InsertResult.OK

    async def update_status(
        self,
        key: IdempotencyKey,
        status: WebhookStatus,
        *,
        error: str | None = None,
        processed_at: datetime | None = None,
        attempts: int | None = None,
    ) -> ReceivedWebhook:
        async with self._lock:
            current = self._records.get(key)
            if current is None:
                raise WebhookNotFoundError(key.webhook_id, key.config_name)
            updated = current.with_status(status, error=error, processed_at=processed_at, attempts=attempts)
            self._records[key] = updated
            return updated

    async def find_by_status(
        self, status: WebhookStatus, config_name: str | None = None
    ) -> list[ReceivedWebhook]:
        return [
            w
            for w in self._records.values()
            if w.status is status and (config_name is None or w.config_name == config_name)
        ]

    async def prune(self, config_name: str, older_than: datetime) -> int:
        async with self._lock:
            stale = [
                k for k, w in self._records.items() if w.config_name == config_name and w.received_at < older_than
            ]
            for k in stale:
                del self._records[k]
            return len(stale)

    def all(self) -> list[ReceivedWebhook]:
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)
