"""Unit tests for the WebhookCall fluent builder."""
from __future__ import annotations

import asyncio

import pytest

from mp_webhooks.application.delivery import DeliveryEngine, DeliveryState, WebhookCall
from mp_webhooks.config import InvalidSettingValueError, ServerSettings
from mp_webhooks.kernel.errors import InvalidUrlError
from mp_webhooks.kernel.time import FrozenClock
from mp_webhooks.protocol import (
    Ed25519Signer,
    Ed25519Validator,
    HmacSigner,
    SignatureVersion,
    TimestampValidator,
    generate_ed25519_keypair,
)
from mp_webhooks.resilience import ConstantBackoffStrategy
from mp_webhooks.testing.fakes import InMemoryTaskScheduler, ScriptedTransport

URL = "https://example.test/hooks"


# ---------------------------------------------------------------------------
# build()
# ---------------------------------------------------------------------------
class TestWebhookCallBuild:
    def test_defaults_from_settings(self):
        settings = ServerSettings(tries=5, timeout_in_seconds=10, verify_ssl=False, signing_secret="abc")
        req = WebhookCall.create(settings).url(URL).build()
        assert req.max_tries == 5
        assert req.timeout_seconds == 10
        assert req.verify_tls is False
        assert isinstance(req.signer, HmacSigner)

    def test_fluent_options(self):
        backoff = ConstantBackoffStrategy(2)
        req = (
            WebhookCall.create()
            .url(URL)
            .payload({"type": "user.created"})
            .with_headers({"X-Env": "test"})
            .meta({"tenant": "t1"})
            .tags(["billing", "users"])
            .tags("extra")
            .use_http_verb("put")
            .timeout_in_seconds(7)
            .maximum_tries(9)
            .use_backoff_strategy(backoff)
            .do_not_verify_ssl()
            .webhook_id("01HQWE000000000000000000")
            .timestamp(1234)
            .use_secret("s3cr3t")
            .throw_exception_on_failure()
            .build()
        )
        assert req.payload == {"type": "user.created"}
        assert req.headers == {"X-Env": "test"}
        assert req.meta == {"tenant": "t1"}
        assert req.tags == ("billing", "users", "extra")
        assert req.http_verb == "PUT"
        assert req.timeout_seconds == 7
        assert req.max_tries == 9
        assert req.backoff is backoff
        assert req.verify_tls is False
        assert req.webhook_id == "01HQWE000000000000000000"
        assert req.timestamp == 1234
        assert req.throw_on_failure is True
        assert isinstance(req.signer, HmacSigner)

    @pytest.mark.parametrize("url", ["not a url", "ftp://example.test", "https://", "/relative"])
    def test_invalid_url(self, url):
        with pytest.raises(InvalidUrlError):
            WebhookCall.create().url(url)

    def test_build_without_url(self):
        with pytest.raises(InvalidUrlError):
            WebhookCall.create().build()

    def test_invalid_verb(self):
        with pytest.raises(InvalidSettingValueError):
            WebhookCall.create().use_http_verb("TRACE")

    def test_ed25519_key_selects_ed25519(self):
        private_b64, _ = generate_ed25519_keypair()
        req = WebhookCall.create().url(URL).use_ed25519_key(private_b64).build()
        assert isinstance(req.signer, Ed25519Signer)

    def test_settings_ed25519_version(self):
        private_b64, _ = generate_ed25519_keypair()
        settings = ServerSettings(signature_version="v1a", ed25519_private_key=private_b64)
        req = WebhookCall.create(settings).url(URL).build()
        assert req.signer is not None
        assert req.signer.version() is SignatureVersion.V1A_ED25519

    def test_explicit_signer_wins(self):
        signer = HmacSigner("explicit")
        req = WebhookCall.create(ServerSettings(signing_secret="cfg")).url(URL).use_signer(signer).build()
        assert req.signer is signer

    def test_no_key_defers_to_engine(self):
        assert WebhookCall.create().url(URL).build().signer is None


# ---------------------------------------------------------------------------
# dispatch helpers
# ---------------------------------------------------------------------------
class TestWebhookCallDispatch:
    def _engine(self, transport: ScriptedTransport) -> DeliveryEngine:
        return DeliveryEngine(transport, InMemoryTaskScheduler(eager=True))

    def test_dispatch(self):
        transport = ScriptedTransport(200)
        asyncio.run(WebhookCall.create().url(URL).use_secret("k").dispatch(self._engine(transport)))
        assert transport.call_count == 1

    def test_dispatch_sync_returns_attempt(self):
        transport = ScriptedTransport(201)
        attempt = asyncio.run(WebhookCall.create().url(URL).use_secret("k").dispatch_sync(self._engine(transport)))
        assert attempt.state is DeliveryState.SUCCEEDED
        assert attempt.http_status == 201

    def test_dispatch_if_and_unless(self):
        transport = ScriptedTransport()
        engine = self._engine(transport)
        call = WebhookCall.create().url(URL).use_secret("k")

        async def run() -> None:
            assert await call.dispatch_if(False, engine) is None
            assert await call.dispatch_unless(True, engine) is None
            await call.dispatch_if(True, engine)
            await call.dispatch_unless(False, engine)

        asyncio.run(run())
        assert transport.call_count == 2

    def test_ed25519_end_to_end(self):
        private_b64, public_b64 = generate_ed25519_keypair()
        transport = ScriptedTransport(200)
        asyncio.run(
            WebhookCall.create()
            .url(URL)
            .payload({"a": 1})
            .timestamp(1_700_000_000)
            .use_ed25519_key(private_b64)
            .dispatch_sync(self._engine(transport))
        )
        sent = transport.last_request()
        validator = Ed25519Validator(public_b64, TimestampValidator(300, FrozenClock.at(1_700_000_000)))
        validator.verify(sent.headers, sent.body)
