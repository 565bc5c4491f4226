"""Unit tests for DeliveryEngine (signing, sending, retry funnel)."""
from __future__ import annotations

import asyncio

import pytest

from mp_webhooks.application.delivery import (
    DeliveryAttempt,
    DeliveryEngine,
    DeliveryOutcome,
    DeliveryState,
    DispatchingWebhookCall,
    FinalWebhookCallFailed,
    TransportResponse,
    WebhookCallFailed,
    WebhookCallSucceeded,
    WebhookRequest,
    build_headers,
)
from mp_webhooks.config import ConfigError
from mp_webhooks.kernel.errors import DeliveryError, HttpError, MaxRetriesExceededError, TransportError
from mp_webhooks.kernel.time import FrozenClock
from mp_webhooks.protocol import HmacSigner, HmacValidator, TimestampValidator
from mp_webhooks.resilience import ConstantBackoffStrategy, ExponentialBackoffStrategy
from mp_webhooks.testing.fakes import (
    InMemoryTaskScheduler,
    RecordingPublisher,
    ScriptedTransport,
    connection_refused,
)

NOW = 1_700_000_000
URL = "https://example.test/hooks"


def _engine(
    transport: ScriptedTransport,
    *,
    eager: bool = True,
    backoff=None,
    signer=HmacSigner("s3cr3t"),
) -> tuple[DeliveryEngine, InMemoryTaskScheduler, RecordingPublisher]:
    clock = FrozenClock.at(NOW)
    scheduler = InMemoryTaskScheduler(clock, eager=eager)
    publisher = RecordingPublisher()
    engine = DeliveryEngine(
        transport,
        scheduler,
        signer=signer,
        backoff=backoff or ExponentialBackoffStrategy(use_jitter=False),
        publisher=publisher,
        clock=clock,
    )
    return engine, scheduler, publisher


# ---------------------------------------------------------------------------
# Request / headers
# ---------------------------------------------------------------------------
class TestWebhookRequest:
    def test_defaults(self):
        req = WebhookRequest(url=URL)
        assert len(req.webhook_id) == 26
        assert req.http_verb == "POST"
        assert req.max_tries == 3
        assert req.timeout_seconds == 3
        assert req.verify_tls is True
        assert req.throw_on_failure is False

    def test_body_compact_json(self):
        assert WebhookRequest(url=URL, payload={"event": "user.created"}).body() == b'{"event":"user.created"}'

    def test_body_bytes_verbatim(self):
        assert WebhookRequest(url=URL, payload=b"{ raw }").body() == b"{ raw }"

    def test_all_tags(self):
        req = WebhookRequest(url=URL, webhook_id="abc", tags=("billing",))
        assert req.all_tags() == ("billing", "webhook", "webhook:abc")

    def test_invalid_tries(self):
        with pytest.raises(ValueError):
            WebhookRequest(url=URL, max_tries=0)

    def test_custom_headers_never_override_protocol_headers(self):
        headers = build_headers(
            {
                "X-Trace": "t1",
                "Webhook-Id": "forged",
                "WEBHOOK-SIGNATURE": "v1,forged",
                "webhook-timestamp": "0",
                "content-type": "text/plain",
            },
            webhook_id="real",
            timestamp=42,
            signature="v1,real",
        )
        assert headers == {
            "X-Trace": "t1",
            "Content-Type": "application/json",
            "webhook-id": "real",
            "webhook-timestamp": "42",
            "webhook-signature": "v1,real",
        }

    def test_delivery_attempt_outcome(self):
        base = dict(webhook_id="a", url=URL, http_verb="POST", attempt_number=1)
        assert DeliveryAttempt(**base).outcome is DeliveryOutcome.PENDING
        assert DeliveryAttempt(**base, state=DeliveryState.SUCCEEDED).outcome is DeliveryOutcome.SUCCEEDED
        assert DeliveryAttempt(**base, state=DeliveryState.RETRY_SCHEDULED).outcome is DeliveryOutcome.FAILED
        assert DeliveryState.TERMINALLY_FAILED.is_terminal()
        assert not DeliveryState.RETRY_SCHEDULED.is_terminal()


# ---------------------------------------------------------------------------
# Success path
# ---------------------------------------------------------------------------
class TestDeliverySuccess:
    def test_sends_signed_request(self):
        transport = ScriptedTransport(200)
        engine, _, _ = _engine(transport)
        req = WebhookRequest(url=URL, payload={"event": "user.created"}, webhook_id="01HQWE000000000000000000")

        attempt = asyncio.run(engine.deliver_now(req))

        assert attempt.state is DeliveryState.SUCCEEDED
        assert attempt.http_status == 200
        sent = transport.last_request()
        assert sent.verb == "POST"
        assert sent.url == URL
        assert sent.body == b'{"event":"user.created"}'
        assert sent.headers["webhook-id"] == "01HQWE000000000000000000"
        assert sent.headers["webhook-timestamp"] == str(NOW)
        assert sent.timeout == 3
        assert sent.verify_tls is True
        validator = HmacValidator(TimestampValidator(300, FrozenClock.at(NOW)))
        validator.verify(sent.headers, sent.body, "s3cr3t")

    def test_events_in_order(self):
        engine, _, publisher = _engine(ScriptedTransport(204))
        asyncio.run(engine.deliver_now(WebhookRequest(url=URL)))
        assert [type(e) for e in publisher.events] == [DispatchingWebhookCall, WebhookCallSucceeded]
        succeeded = publisher.of_type(WebhookCallSucceeded)[0]
        assert succeeded.status_code == 204
        assert succeeded.attempt == 1

    def test_deliver_goes_through_scheduler(self):
        transport = ScriptedTransport(200)
        engine, scheduler, _ = _engine(transport, eager=False)

        async def run() -> None:
            stamped = await engine.deliver(WebhookRequest(url=URL))
            assert stamped.timestamp == NOW
            assert transport.call_count == 0
            assert len(scheduler.pending) == 1
            await scheduler.drain()

        asyncio.run(run())
        assert transport.call_count == 1

    def test_explicit_timestamp_kept(self):
        transport = ScriptedTransport(200)
        engine, _, _ = _engine(transport)
        asyncio.run(engine.deliver_now(WebhookRequest(url=URL, timestamp=123)))
        assert transport.last_request().headers["webhook-timestamp"] == "123"

    def test_request_signer_overrides_engine_signer(self):
        transport = ScriptedTransport(200)
        engine, _, _ = _engine(transport)
        req = WebhookRequest(url=URL, signer=HmacSigner("other"), timestamp=NOW)
        asyncio.run(engine.deliver_now(req))
        sent = transport.last_request()
        validator = HmacValidator(TimestampValidator(300, FrozenClock.at(NOW)))
        assert validator.is_valid(sent.headers, sent.body, "other")
        assert not validator.is_valid(sent.headers, sent.body, "s3cr3t")


# ---------------------------------------------------------------------------
# Failure funnel
# ---------------------------------------------------------------------------
class TestDeliveryFailure:
    def test_retry_bound_with_always_failing_transport(self):
        transport = ScriptedTransport().always_fail(500)
        engine, _, publisher = _engine(transport)

        asyncio.run(engine.deliver(WebhookRequest(url=URL, max_tries=3)))

        assert transport.call_count == 3
        assert [e.attempt for e in publisher.of_type(WebhookCallFailed)] == [1, 2, 3]
        finals = publisher.of_type(FinalWebhookCallFailed)
        assert len(finals) == 1
        assert finals[0].total_attempts == 3
        assert isinstance(finals[0].last_error, HttpError)
        assert publisher.names()[-1] == "webhook.final_failed"

    def test_event_order_per_attempt(self):
        engine, _, publisher = _engine(ScriptedTransport().always_fail(503))
        asyncio.run(engine.deliver(WebhookRequest(url=URL, max_tries=2)))
        assert publisher.names() == [
            "webhook.dispatching",
            "webhook.failed",
            "webhook.dispatching",
            "webhook.failed",
            "webhook.final_failed",
        ]

    def test_backoff_delays_requested(self):
        engine, scheduler, _ = _engine(ScriptedTransport().always_fail(500))
        asyncio.run(engine.deliver(WebhookRequest(url=URL, max_tries=4)))
        assert scheduler.requested_delays == [1, 2, 4]

    def test_request_backoff_override(self):
        engine, scheduler, _ = _engine(ScriptedTransport().always_fail(500))
        asyncio.run(engine.deliver(WebhookRequest(url=URL, max_tries=3, backoff=ConstantBackoffStrategy(7))))
        assert scheduler.requested_delays == [7, 7]

    def test_recovers_after_failures(self):
        transport = ScriptedTransport(500, connection_refused(), 200)
        engine, _, publisher = _engine(transport)
        asyncio.run(engine.deliver(WebhookRequest(url=URL, max_tries=3)))
        assert transport.call_count == 3
        assert publisher.of_type(FinalWebhookCallFailed) == []
        assert publisher.of_type(WebhookCallSucceeded)[0].attempt == 3
        errors = [e.error for e in publisher.of_type(WebhookCallFailed)]
        assert isinstance(errors[0], HttpError)
        assert isinstance(errors[1], TransportError)

    def test_same_signature_and_timestamp_across_retries(self):
        transport = ScriptedTransport(500, 500, 200)
        engine, _, _ = _engine(transport)
        asyncio.run(engine.deliver(WebhookRequest(url=URL)))
        sigs = {r.headers["webhook-signature"] for r in transport.requests}
        stamps = {r.headers["webhook-timestamp"] for r in transport.requests}
        assert len(sigs) == 1
        assert len(stamps) == 1

    def test_four_xx_is_retried(self):
        transport = ScriptedTransport().always_fail(404)
        engine, _, _ = _engine(transport)
        asyncio.run(engine.deliver(WebhookRequest(url=URL, max_tries=2)))
        assert transport.call_count == 2

    def test_http_error_keeps_status_and_body(self):
        transport = ScriptedTransport(TransportResponse(422, "bad payload"))
        engine, _, publisher = _engine(transport)
        attempt = asyncio.run(engine.deliver_now(WebhookRequest(url=URL, max_tries=1)))
        assert attempt.state is DeliveryState.TERMINALLY_FAILED
        assert attempt.http_status == 422
        error = publisher.of_type(WebhookCallFailed)[0].error
        assert isinstance(error, HttpError)
        assert error.status_code == 422
        assert error.response_body == "bad payload"

    def test_unexpected_transport_exception_goes_through_funnel(self):
        transport = ScriptedTransport(ValueError("kaboom"))
        engine, _, publisher = _engine(transport)
        attempt = asyncio.run(engine.deliver_now(WebhookRequest(url=URL, max_tries=1)))
        assert attempt.outcome is DeliveryOutcome.FAILED
        error = publisher.of_type(WebhookCallFailed)[0].error
        assert isinstance(error, TransportError)
        assert isinstance(error.cause, ValueError)

    def test_unencodable_payload_goes_through_funnel(self):
        transport = ScriptedTransport(200)
        engine, scheduler, publisher = _engine(transport)

        asyncio.run(engine.deliver(WebhookRequest(url=URL, payload={"when": object()}, max_tries=3)))

        assert transport.call_count == 0
        failures = publisher.of_type(WebhookCallFailed)
        assert [e.attempt for e in failures] == [1, 2, 3]
        assert isinstance(failures[0].error, DeliveryError)
        assert isinstance(failures[0].error.cause, TypeError)
        assert len(publisher.of_type(FinalWebhookCallFailed)) == 1
        assert publisher.of_type(DispatchingWebhookCall) == []
        assert all(e.success for e in scheduler.execution_log)

    def test_signer_failure_goes_through_funnel(self):
        class BrokenSigner(HmacSigner):
            def sign(self, webhook_id, timestamp, payload):
                raise RuntimeError("hsm offline")

        engine, _, publisher = _engine(ScriptedTransport(200), signer=BrokenSigner("s3cr3t"))
        attempt = asyncio.run(engine.deliver_now(WebhookRequest(url=URL, max_tries=1)))

        assert attempt.state is DeliveryState.TERMINALLY_FAILED
        assert "hsm offline" in (attempt.error or "")
        assert len(publisher.of_type(FinalWebhookCallFailed)) == 1

    def test_attempt_stamps_missing_timestamp(self):
        transport = ScriptedTransport(200)
        engine, _, _ = _engine(transport)
        asyncio.run(engine.attempt(WebhookRequest(url=URL), 1))
        assert transport.last_request().headers["webhook-timestamp"] == str(NOW)

    def test_retry_scheduled_attempt_record(self):
        engine, scheduler, _ = _engine(ScriptedTransport(500), eager=False)
        attempt = asyncio.run(engine.deliver_now(WebhookRequest(url=URL)))
        assert attempt.state is DeliveryState.RETRY_SCHEDULED
        assert attempt.retry_delay == 1
        assert attempt.error is not None
        assert len(scheduler.pending) == 1

    def test_throw_on_failure_inline(self):
        engine, _, publisher = _engine(ScriptedTransport(500))
        with pytest.raises(MaxRetriesExceededError) as exc_info:
            asyncio.run(engine.deliver_now(WebhookRequest(url=URL, max_tries=1, throw_on_failure=True)))
        assert exc_info.value.max_tries == 1
        assert len(publisher.of_type(FinalWebhookCallFailed)) == 1

    def test_throw_on_failure_recorded_by_scheduler(self):
        engine, scheduler, _ = _engine(ScriptedTransport().always_fail(500))
        asyncio.run(engine.deliver(WebhookRequest(url=URL, max_tries=2, throw_on_failure=True)))
        assert any(e.error_type == "MaxRetriesExceededError" for e in scheduler.execution_log)

    def test_missing_signer_is_config_error_before_events(self):
        transport = ScriptedTransport(200)
        engine, _, publisher = _engine(transport, signer=None)
        with pytest.raises(ConfigError):
            asyncio.run(engine.deliver(WebhookRequest(url=URL)))
        with pytest.raises(ConfigError):
            asyncio.run(engine.deliver_now(WebhookRequest(url=URL)))
        assert publisher.events == []
        assert transport.call_count == 0

    def test_failing_listener_does_not_break_delivery(self):
        transport = ScriptedTransport(200)
        engine, _, publisher = _engine(transport)

        def broken(event) -> None:
            raise RuntimeError("listener down")

        publisher.subscribe(DispatchingWebhookCall, broken)
        attempt = asyncio.run(engine.deliver_now(WebhookRequest(url=URL)))
        assert attempt.state is DeliveryState.SUCCEEDED
