"""Application delivery – WebhookCall fluent builder.

Example::

    await (
        WebhookCall.create()
        .url("https://example.com/hooks")
        .payload({"type": "user.created", "id": 42})
        .use_secret("s3cr3t")
        .maximum_tries(5)
        .dispatch(engine)
    )
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping
from urllib.parse import urlsplit

from mp_webhooks.application.delivery.engine import DeliveryEngine
from mp_webhooks.application.delivery.request import DeliveryAttempt, WebhookRequest
from mp_webhooks.config.settings import HTTP_VERBS, ServerSettings
from mp_webhooks.config.validation import InvalidSettingValueError
from mp_webhooks.kernel.errors import InvalidUrlError
from mp_webhooks.kernel.types import generate_webhook_id
from mp_webhooks.protocol import Ed25519Signer, HmacSigner, SignatureVersion, Signer
from mp_webhooks.resilience import BackoffStrategy

__all__ = ["WebhookCall"]


def _validate_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidUrlError(url)
    return url


class WebhookCall:
    """Collect the options of one outbound webhook, then build or dispatch it.

    Unset options fall back to :class:`ServerSettings` (defaults or
    ``WEBHOOK_SERVER_*`` values when the settings were loaded from the env).
    """

    def __init__(self, settings: ServerSettings | None = None) -> None:
        self._settings = settings or ServerSettings()
        self._url: str | None = None
        self._payload: Any = {}
        self._headers: dict[str, str] = {}
        self._meta: dict[str, Any] = {}
        self._tags: list[str] = []
        self._http_verb: str | None = None
        self._timeout: float | None = None
        self._tries: int | None = None
        self._backoff: BackoffStrategy | None = None
        self._verify_ssl: bool | None = None
        self._throw_on_failure: bool | None = None
        self._signer: Signer | None = None
        self._secret: str | None = None
        self._ed25519_key: str | None = None
        self._version: SignatureVersion | None = None
        self._webhook_id: str | None = None
        self._timestamp: int | None = None

    @classmethod
    def create(cls, settings: ServerSettings | None = None) -> "WebhookCall":
        return cls(settings)

    def url(self, url: str) -> "WebhookCall":
        self._url = _validate_url(url)
        return self

    def payload(self, payload: Any) -> "WebhookCall":
        self._payload = payload
        return self

    def with_headers(self, headers: Mapping[str, str]) -> "WebhookCall":
        self._headers.update(headers)
        return self

    def meta(self, meta: Mapping[str, Any]) -> "WebhookCall":
        self._meta.update(meta)
        return self

    def tags(self, tags: str | Iterable[str]) -> "WebhookCall":
        self._tags.extend([tags] if isinstance(tags, str) else tags)
        return self

    def use_http_verb(self, verb: str) -> "WebhookCall":
        verb = verb.upper()
        if verb not in HTTP_VERBS:
            raise InvalidSettingValueError("http_verb", verb, f"expected one of {sorted(HTTP_VERBS)}")
        self._http_verb = verb
        return self

    def timeout_in_seconds(self, seconds: float) -> "WebhookCall":
        self._timeout = seconds
        return self

    def maximum_tries(self, tries: int) -> "WebhookCall":
        self._tries = tries
        return self

    def use_backoff_strategy(self, strategy: BackoffStrategy) -> "WebhookCall":
        self._backoff = strategy
        return self

    def do_not_verify_ssl(self) -> "WebhookCall":
        self._verify_ssl = False
        return self

    def use_signer(self, signer: Signer) -> "WebhookCall":
        self._signer = signer
        return self

    def use_secret(self, secret: str) -> "WebhookCall":
        self._secret = secret
        self._version = self._version or SignatureVersion.V1_HMAC
        return self

    def use_ed25519_key(self, private_key: str) -> "WebhookCall":
        self._ed25519_key = private_key
        self._version = SignatureVersion.V1A_ED25519
        return self

    def signature_version(self, version: SignatureVersion | str) -> "WebhookCall":
        self._version = SignatureVersion(version)
        return self

    def webhook_id(self, webhook_id: str) -> "WebhookCall":
        self._webhook_id = webhook_id
        return self

    def timestamp(self, timestamp: int) -> "WebhookCall":
        self._timestamp = timestamp
        return self

    def throw_exception_on_failure(self) -> "WebhookCall":
        self._throw_on_failure = True
        return self

    def build(self) -> WebhookRequest:
        if self._url is None:
            raise InvalidUrlError("")
        s = self._settings
        return WebhookRequest(
            url=self._url,
            payload=self._payload,
            webhook_id=self._webhook_id or generate_webhook_id(),
            timestamp=self._timestamp,
            http_verb=self._http_verb or s.http_verb,
            headers=dict(self._headers),
            meta=dict(self._meta),
            tags=tuple(self._tags),
            timeout_seconds=self._timeout if self._timeout is not None else s.timeout_in_seconds,
            verify_tls=self._verify_ssl if self._verify_ssl is not None else s.verify_ssl,
            max_tries=self._tries if self._tries is not None else s.tries,
            throw_on_failure=(
                self._throw_on_failure if self._throw_on_failure is not None else s.throw_exception_on_failure
            ),
            signer=self._resolve_signer(),
            backoff=self._backoff,
        )

    async def dispatch(self, engine: DeliveryEngine) -> WebhookRequest:
        """Hand the first attempt to the engine's scheduler."""
        return await engine.deliver(self.build())

    async def dispatch_sync(self, engine: DeliveryEngine) -> DeliveryAttempt:
        """Run the first attempt inline and return its result."""
        return await engine.deliver_now(self.build())

    async def dispatch_if(self, condition: bool, engine: DeliveryEngine) -> WebhookRequest | None:
        if not condition:
            return None
        return await self.dispatch(engine)

    async def dispatch_unless(self, condition: bool, engine: DeliveryEngine) -> WebhookRequest | None:
        return await self.dispatch_if(not condition, engine)

    def _resolve_signer(self) -> Signer | None:
        """Explicit signer, then builder keys, then settings keys; ``None`` defers to the engine."""
        if self._signer is not None:
            return self._signer
        version = self._version or self._settings.version
        if version.is_ed25519():
            key = self._ed25519_key or self._settings.ed25519_private_key
            return Ed25519Signer(key) if key else None
        secret = self._secret or self._settings.signing_secret
        return HmacSigner(secret) if secret else None
