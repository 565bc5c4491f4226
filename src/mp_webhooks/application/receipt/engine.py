"""Application receipt – ReceiptEngine.

Inbound flow for one request::

    verify ──fail──> 401 (InvalidWebhookSignature, audit log, nothing stored)
      │
    admission filter ──reject──> 200 "Webhook ignored"
      │
    idempotency lookup ──hit──> same acknowledgment, no side effects
      │
    insert_pending -> WebhookReceived -> schedule processing -> acknowledgment

Processing runs later as a scheduler task and moves the record
``pending -> processing -> {processed, failed}``.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Iterable

from mp_webhooks.application.receipt.config import ReceiverConfig
from mp_webhooks.application.receipt.events import (
    InvalidWebhookSignature,
    WebhookProcessed,
    WebhookReceived,
)
from mp_webhooks.application.receipt.record import (
    IdempotencyKey,
    InboundRequest,
    InsertResult,
    ReceivedWebhook,
    WebhookResponse,
)
from mp_webhooks.application.receipt.status import WebhookStatus
from mp_webhooks.application.receipt.store import WebhookStore
from mp_webhooks.application.tasks import Task, TaskScheduler
from mp_webhooks.config.validation import ConfigError
from mp_webhooks.kernel.errors import (
    InvalidStatusTransitionError,
    ProcessingError,
    VerificationError,
    WebhookNotFoundError,
)
from mp_webhooks.kernel.time import Clock, SystemClock
from mp_webhooks.observability.events import EventPublisher
from mp_webhooks.observability.logging import AuditLogger, get_logger
from mp_webhooks.protocol.wire import HEADER_ID, HEADER_TIMESTAMP, parse_timestamp

__all__ = ["PROCESS_TASK_NAME", "ReceiptEngine"]

logger = get_logger(__name__)

PROCESS_TASK_NAME = "webhook.process"


class ReceiptEngine:
    """Verify, store idempotently and schedule processing of inbound webhooks."""

    def __init__(
        self,
        store: WebhookStore,
        scheduler: TaskScheduler,
        configs: Iterable[ReceiverConfig],
        *,
        publisher: EventPublisher | None = None,
        clock: Clock | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._configs = {c.name: c for c in configs}
        self._publisher = publisher or EventPublisher()
        self._clock = clock or SystemClock()
        self._audit = audit or AuditLogger()

    @property
    def publisher(self) -> EventPublisher:
        return self._publisher

    def config(self, name: str) -> ReceiverConfig:
        try:
            return self._configs[name]
        except KeyError:
            raise ConfigError(f"Unknown webhook receiver config: {name!r}") from None

    async def receive(self, request: InboundRequest, config_name: str = "default") -> WebhookResponse:
        config = self.config(config_name)

        try:
            config.validator.verify(request.headers, request.body, config.secret)
        except VerificationError as exc:
            await self._publisher.publish(
                InvalidWebhookSignature(config_name=config_name, request=request, error=exc)
            )
            self._audit.log_security_event(
                "invalid_webhook_signature",
                str(exc),
                config_name=config_name,
                webhook_id=request.header(HEADER_ID),
                error_code=exc.code,
            )
            return WebhookResponse(401, "Invalid signature")

        if not config.admission_filter.should_process(request):
            logger.info("webhook.ignored", config_name=config_name, webhook_id=request.header(HEADER_ID))
            return WebhookResponse(200, "Webhook ignored")

        # verify() guarantees both headers are present and well-formed
        webhook_id = request.header(HEADER_ID) or ""
        key = IdempotencyKey(config_name, webhook_id)

        existing = await self._store.find_by_idempotency_key(key)
        if existing is not None:
            logger.info("webhook.duplicate", config_name=config_name, webhook_id=webhook_id, status=existing.status.value)
            return config.response_builder.build_acknowledgment(existing)

        webhook = ReceivedWebhook(
            config_name=config_name,
            webhook_id=webhook_id,
            timestamp=parse_timestamp(request.header(HEADER_TIMESTAMP)),
            payload=request.body,
            headers=config.filter_headers(dict(request.headers)),
            received_at=self._clock.now(),
        )
        if await self._store.insert_pending(webhook) is InsertResult.DUPLICATE:
            stored = await self._store.find_by_idempotency_key(key)
            logger.info("webhook.duplicate", config_name=config_name, webhook_id=webhook_id)
            return config.response_builder.build_acknowledgment(stored or webhook)

        logger.info("webhook.received", config_name=config_name, webhook_id=webhook_id)
        await self._publisher.publish(WebhookReceived(config_name=config_name, webhook=webhook))
        await self._scheduler.run_now(self._task(config, key))
        return config.response_builder.build_acknowledgment(webhook)

    async def process(self, key: IdempotencyKey) -> ReceivedWebhook:
        """Run the processor for one stored webhook.

        Records that are already processing or processed are returned
        unchanged. A processor failure marks the record failed and raises
        :class:`ProcessingError` so the scheduler's retry policy applies.
        """
        webhook = await self._store.find_by_idempotency_key(key)
        if webhook is None:
            raise WebhookNotFoundError(key.webhook_id, key.config_name)
        if not webhook.status.can_process():
            logger.info(
                "webhook.process_skipped",
                config_name=key.config_name,
                webhook_id=key.webhook_id,
                status=webhook.status.value,
            )
            return webhook

        config = self.config(key.config_name)
        processing = await self._store.update_status(
            key,
            WebhookStatus.PROCESSING,
            error=webhook.last_error,
            attempts=webhook.attempts + 1,
        )

        try:
            await config.processor.process(processing)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            await self._store.update_status(
                key, WebhookStatus.FAILED, error=message, attempts=processing.attempts
            )
            logger.warning(
                "webhook.processing_failed",
                config_name=key.config_name,
                webhook_id=key.webhook_id,
                attempts=processing.attempts,
                error=message,
                error_type=type(exc).__name__,
            )
            if isinstance(exc, ProcessingError):
                raise
            raise ProcessingError(f"Processing webhook {key} failed: {message}", cause=exc) from exc

        processed = await self._store.update_status(
            key,
            WebhookStatus.PROCESSED,
            processed_at=self._clock.now(),
            attempts=processing.attempts,
        )
        logger.info(
            "webhook.processed",
            config_name=key.config_name,
            webhook_id=key.webhook_id,
            attempts=processed.attempts,
        )
        await self._publisher.publish(WebhookProcessed(config_name=key.config_name, webhook=processed))
        return processed

    async def retry(self, key: IdempotencyKey) -> None:
        """Manually re-queue a failed webhook."""
        webhook = await self._store.find_by_idempotency_key(key)
        if webhook is None:
            raise WebhookNotFoundError(key.webhook_id, key.config_name)
        if webhook.status is not WebhookStatus.FAILED:
            raise InvalidStatusTransitionError(webhook.status.value, WebhookStatus.PROCESSING.value)
        logger.info("webhook.retry_requested", config_name=key.config_name, webhook_id=key.webhook_id)
        await self._scheduler.run_now(self._task(self.config(key.config_name), key))

    async def prune(self, config_name: str) -> int:
        """Delete records older than the endpoint's ``delete_after_days``."""
        config = self.config(config_name)
        cutoff = self._clock.now() - timedelta(days=config.delete_after_days)
        deleted = await self._store.prune(config_name, cutoff)
        logger.info("webhook.pruned", config_name=config_name, deleted=deleted, cutoff=cutoff.isoformat())
        return deleted

    def _task(self, config: ReceiverConfig, key: IdempotencyKey) -> Task:
        async def handler() -> None:
            await self.process(key)

        return Task(
            name=PROCESS_TASK_NAME,
            handler=handler,
            key=str(key),
            max_attempts=config.process_max_attempts,
            retry_delay_seconds=config.process_retry_delay_seconds,
        )
