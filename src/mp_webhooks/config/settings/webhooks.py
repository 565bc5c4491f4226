"""Config settings – sender (server) and receiver (client) webhook settings."""
from __future__ import annotations

import dataclasses

from mp_webhooks.config.settings.base import Settings
from mp_webhooks.config.validation import InvalidSettingValueError, MissingRequiredSettingError
from mp_webhooks.kernel.time import Clock
from mp_webhooks.protocol import (
    Ed25519Signer,
    Ed25519Validator,
    HmacSigner,
    HmacValidator,
    SignatureValidator,
    SignatureVersion,
    Signer,
    TimestampValidator,
)
from mp_webhooks.resilience import BackoffStrategy, ExponentialBackoffStrategy

HTTP_VERBS = frozenset({"POST", "PUT", "PATCH", "GET", "DELETE"})


def _signature_version(setting: str, value: str) -> SignatureVersion:
    try:
        return SignatureVersion(value)
    except ValueError as exc:
        raise InvalidSettingValueError(setting, value, "expected 'v1' or 'v1a'") from exc


@dataclasses.dataclass
class ServerSettings(Settings):
    """Defaults for outbound webhook calls (``WEBHOOK_SERVER_*``)."""

    _prefix = "WEBHOOK_SERVER"

    http_verb: str = "POST"
    timeout_in_seconds: float = 3
    tries: int = 3
    verify_ssl: bool = True
    throw_exception_on_failure: bool = False
    signature_version: str = SignatureVersion.V1_HMAC.value
    signing_secret: str | None = None
    ed25519_private_key: str | None = None
    backoff_base_seconds: int = 1
    backoff_max_seconds: int = 3_600
    backoff_jitter: bool = True

    def _validate(self) -> None:
        self.http_verb = self.http_verb.upper()
        if self.http_verb not in HTTP_VERBS:
            raise InvalidSettingValueError("http_verb", self.http_verb, f"expected one of {sorted(HTTP_VERBS)}")
        if self.tries < 1:
            raise InvalidSettingValueError("tries", self.tries, "must be >= 1")
        if self.timeout_in_seconds <= 0:
            raise InvalidSettingValueError("timeout_in_seconds", self.timeout_in_seconds, "must be > 0")
        if self.backoff_base_seconds < 0 or self.backoff_max_seconds < self.backoff_base_seconds:
            raise InvalidSettingValueError(
                "backoff_max_seconds", self.backoff_max_seconds, "must be >= backoff_base_seconds >= 0"
            )
        _signature_version("signature_version", self.signature_version)

    @property
    def version(self) -> SignatureVersion:
        return SignatureVersion(self.signature_version)

    def build_signer(self) -> Signer:
        """Return the signer for ``signature_version``; the matching key must be set."""
        if self.version.is_ed25519():
            if not self.ed25519_private_key:
                raise MissingRequiredSettingError(f"{self._prefix}_ED25519_PRIVATE_KEY")
            return Ed25519Signer(self.ed25519_private_key)
        if not self.signing_secret:
            raise MissingRequiredSettingError(f"{self._prefix}_SIGNING_SECRET")
        return HmacSigner(self.signing_secret)

    def build_backoff(self) -> BackoffStrategy:
        return ExponentialBackoffStrategy(
            base_delay_seconds=self.backoff_base_seconds,
            max_delay_seconds=self.backoff_max_seconds,
            use_jitter=self.backoff_jitter,
        )


@dataclasses.dataclass
class ClientSettings(Settings):
    """One receiving endpoint (``WEBHOOK_CLIENT_*``)."""

    _prefix = "WEBHOOK_CLIENT"

    name: str = "default"
    signature_validator: str = SignatureVersion.V1_HMAC.value
    signing_secret: str | None = None
    ed25519_public_key: str | None = None
    store_headers: tuple[str, ...] = ("*",)
    delete_after_days: int = 30
    timestamp_tolerance_seconds: int = 300

    def _validate(self) -> None:
        _signature_version("signature_validator", self.signature_validator)
        if self.delete_after_days < 0:
            raise InvalidSettingValueError("delete_after_days", self.delete_after_days, "must be >= 0")
        if self.timestamp_tolerance_seconds < 0:
            raise InvalidSettingValueError(
                "timestamp_tolerance_seconds", self.timestamp_tolerance_seconds, "must be >= 0"
            )
        self.store_headers = tuple(h.lower() for h in self.store_headers)

    @property
    def version(self) -> SignatureVersion:
        return SignatureVersion(self.signature_validator)

    def build_validator(self, clock: Clock | None = None) -> SignatureValidator:
        timestamps = TimestampValidator(self.timestamp_tolerance_seconds, clock)
        if self.version.is_ed25519():
            if not self.ed25519_public_key:
                raise MissingRequiredSettingError(f"{self._prefix}_ED25519_PUBLIC_KEY")
            return Ed25519Validator(self.ed25519_public_key, timestamps)
        if not self.signing_secret:
            raise MissingRequiredSettingError(f"{self._prefix}_SIGNING_SECRET")
        return HmacValidator(timestamps)


__all__ = ["ClientSettings", "HTTP_VERBS", "ServerSettings"]
