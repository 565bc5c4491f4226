"""Application delivery – DeliveryEngine.

One call to :meth:`DeliveryEngine.attempt` performs exactly one HTTP request.
Retries are never slept on; a failed attempt hands attempt ``N + 1`` to the
task scheduler with the backoff delay, so attempts of one webhook are strictly
sequential.

State per attempt::

    PENDING -> DISPATCHING -> SUCCEEDED
                           -> RETRY_SCHEDULED   (attempt < max_tries)
                           -> TERMINALLY_FAILED (attempt == max_tries)
"""
from __future__ import annotations

from typing import Mapping

from mp_webhooks.application.delivery.events import (
    DispatchingWebhookCall,
    FinalWebhookCallFailed,
    WebhookCallFailed,
    WebhookCallSucceeded,
)
from mp_webhooks.application.delivery.request import DeliveryAttempt, DeliveryState, WebhookRequest
from mp_webhooks.application.delivery.transport import HttpTransport
from mp_webhooks.application.tasks import Task, TaskScheduler
from mp_webhooks.config.validation import ConfigError
from mp_webhooks.kernel.errors import (
    DeliveryError,
    HttpError,
    MaxRetriesExceededError,
    TransportError,
)
from mp_webhooks.kernel.time import Clock, SystemClock
from mp_webhooks.observability.events import EventPublisher
from mp_webhooks.observability.logging import get_logger
from mp_webhooks.protocol import Signer
from mp_webhooks.protocol.wire import HEADER_ID, HEADER_SIGNATURE, HEADER_TIMESTAMP, PROTOCOL_HEADERS
from mp_webhooks.resilience import BackoffStrategy, ExponentialBackoffStrategy

__all__ = ["DELIVERY_TASK_NAME", "DeliveryEngine", "build_headers"]

logger = get_logger(__name__)

DELIVERY_TASK_NAME = "webhook.deliver"


def build_headers(
    custom: Mapping[str, str],
    *,
    webhook_id: str,
    timestamp: int,
    signature: str,
    content_type: str = "application/json",
) -> dict[str, str]:
    """Merge caller headers with the protocol headers, protocol headers winning."""
    headers = {k: v for k, v in custom.items() if k.lower() not in PROTOCOL_HEADERS}
    headers["Content-Type"] = content_type
    headers[HEADER_ID] = webhook_id
    headers[HEADER_TIMESTAMP] = str(timestamp)
    headers[HEADER_SIGNATURE] = signature
    return headers


class DeliveryEngine:
    """Sign, send and classify outbound webhook attempts.

    Args:
        transport: sends the HTTP request.
        scheduler: runs the first attempt (:meth:`deliver`) and every retry.
        signer: default signer; ``WebhookRequest.signer`` overrides it.
        backoff: default backoff; ``WebhookRequest.backoff`` overrides it.
        publisher: receives the lifecycle events.
        clock: stamps requests that carry no timestamp.
    """

    def __init__(
        self,
        transport: HttpTransport,
        scheduler: TaskScheduler,
        *,
        signer: Signer | None = None,
        backoff: BackoffStrategy | None = None,
        publisher: EventPublisher | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._transport = transport
        self._scheduler = scheduler
        self._signer = signer
        self._backoff = backoff or ExponentialBackoffStrategy()
        self._publisher = publisher or EventPublisher()
        self._clock = clock or SystemClock()

    @property
    def publisher(self) -> EventPublisher:
        return self._publisher

    async def deliver(self, request: WebhookRequest) -> WebhookRequest:
        """Queue attempt 1 on the scheduler; returns the stamped request."""
        request = self._prepare(request)
        self._signer_for(request)
        await self._scheduler.run_now(self._task(request, 1))
        return request

    async def deliver_now(self, request: WebhookRequest) -> DeliveryAttempt:
        """Run attempt 1 inline; later attempts still go through the scheduler."""
        return await self.attempt(self._prepare(request), 1)

    async def attempt(self, request: WebhookRequest, attempt_number: int) -> DeliveryAttempt:
        timestamp = request.timestamp
        if timestamp is None:
            timestamp = self._clock.epoch_seconds()
            request = request.with_timestamp(timestamp)
        signer = self._signer_for(request)

        try:
            body = request.body()
            signature = signer.sign(request.webhook_id, timestamp, body)
        except Exception as exc:  # noqa: BLE001
            prepare_error = DeliveryError(f"Failed to prepare webhook for: {request.url}: {exc}", cause=exc)
            return await self._handle_failure(request, attempt_number, prepare_error)
        headers = build_headers(
            request.headers,
            webhook_id=request.webhook_id,
            timestamp=timestamp,
            signature=signature,
            content_type=request.content_type,
        )

        await self._publisher.publish(
            DispatchingWebhookCall(
                webhook_id=request.webhook_id,
                url=request.url,
                meta=request.meta,
                attempt=attempt_number,
                payload=request.payload,
                headers=headers,
            )
        )
        logger.debug(
            "webhook.dispatching",
            webhook_id=request.webhook_id,
            url=request.url,
            attempt=attempt_number,
        )

        error: DeliveryError
        try:
            response = await self._transport.send(
                request.http_verb,
                request.url,
                headers,
                body,
                request.timeout_seconds,
                request.verify_tls,
            )
        except TransportError as exc:
            error = exc
        except Exception as exc:  # noqa: BLE001
            error = TransportError(request.url, f"Failed to dispatch webhook to: {request.url}: {exc}", cause=exc)
        else:
            if response.is_success:
                return await self._handle_success(request, attempt_number, response.status_code)
            error = HttpError(request.url, response.status_code, response.body)

        return await self._handle_failure(request, attempt_number, error)

    async def _handle_success(self, request: WebhookRequest, attempt_number: int, status_code: int) -> DeliveryAttempt:
        await self._publisher.publish(
            WebhookCallSucceeded(
                webhook_id=request.webhook_id,
                url=request.url,
                meta=request.meta,
                status_code=status_code,
                attempt=attempt_number,
            )
        )
        logger.info(
            "webhook.delivered",
            webhook_id=request.webhook_id,
            url=request.url,
            status_code=status_code,
            attempt=attempt_number,
        )
        return DeliveryAttempt(
            webhook_id=request.webhook_id,
            url=request.url,
            http_verb=request.http_verb,
            attempt_number=attempt_number,
            state=DeliveryState.SUCCEEDED,
            http_status=status_code,
        )

    async def _handle_failure(
        self,
        request: WebhookRequest,
        attempt_number: int,
        error: DeliveryError,
    ) -> DeliveryAttempt:
        """Single exit for every failed attempt, whatever the cause."""
        http_status = error.status_code if isinstance(error, HttpError) else None
        await self._publisher.publish(
            WebhookCallFailed(
                webhook_id=request.webhook_id,
                url=request.url,
                meta=request.meta,
                attempt=attempt_number,
                error=error,
                http_status=http_status,
            )
        )

        if attempt_number < request.max_tries:
            delay = (request.backoff or self._backoff).calculate(attempt_number)
            logger.warning(
                "webhook.retry_scheduled",
                webhook_id=request.webhook_id,
                url=request.url,
                attempt=attempt_number,
                max_tries=request.max_tries,
                delay_seconds=delay,
                error=str(error),
            )
            await self._scheduler.schedule(self._task(request, attempt_number + 1), delay)
            return DeliveryAttempt(
                webhook_id=request.webhook_id,
                url=request.url,
                http_verb=request.http_verb,
                attempt_number=attempt_number,
                state=DeliveryState.RETRY_SCHEDULED,
                http_status=http_status,
                error=str(error),
                retry_delay=delay,
            )

        await self._publisher.publish(
            FinalWebhookCallFailed(
                webhook_id=request.webhook_id,
                url=request.url,
                meta=request.meta,
                total_attempts=attempt_number,
                last_error=error,
            )
        )
        logger.error(
            "webhook.delivery_failed",
            webhook_id=request.webhook_id,
            url=request.url,
            total_attempts=attempt_number,
            error=str(error),
        )
        if request.throw_on_failure:
            raise MaxRetriesExceededError(request.max_tries, request.url, cause=error)
        return DeliveryAttempt(
            webhook_id=request.webhook_id,
            url=request.url,
            http_verb=request.http_verb,
            attempt_number=attempt_number,
            state=DeliveryState.TERMINALLY_FAILED,
            http_status=http_status,
            error=str(error),
        )

    def _prepare(self, request: WebhookRequest) -> WebhookRequest:
        if request.timestamp is None:
            return request.with_timestamp(self._clock.epoch_seconds())
        return request

    def _signer_for(self, request: WebhookRequest) -> Signer:
        signer = request.signer or self._signer
        if signer is None:
            raise ConfigError("No signer configured: set a signing secret or Ed25519 private key")
        return signer

    def _task(self, request: WebhookRequest, attempt_number: int) -> Task:
        async def handler() -> None:
            await self.attempt(request, attempt_number)

        return Task(
            name=DELIVERY_TASK_NAME,
            handler=handler,
            key=f"{request.webhook_id}:{attempt_number}",
        )
