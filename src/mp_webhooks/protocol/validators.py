"""Protocol – inbound signature validators.

Both variants share one algorithm:

1. read ``webhook-id`` / ``webhook-timestamp`` / ``webhook-signature``;
2. check the timestamp *before* comparing signatures, so replay rejection is
   reported distinctly from signature mismatch;
3. rebuild the signed content from the raw body bytes;
4. accept if any candidate of the validator's own version matches.

Only the per-candidate comparison differs between HMAC and Ed25519.
"""
from __future__ import annotations

import abc
import base64
import binascii
import hashlib
import hmac
from typing import Mapping

from cryptography.exceptions import InvalidSignature

from mp_webhooks.kernel.errors import InvalidSignatureError, VerificationError
from mp_webhooks.protocol.keys import load_ed25519_public_key
from mp_webhooks.protocol.timestamp import TimestampValidator
from mp_webhooks.protocol.version import SignatureVersion
from mp_webhooks.protocol.wire import (
    HEADER_ID,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    get_header,
    parse_signature_header,
    parse_timestamp,
    signed_content,
    to_bytes,
)

__all__ = ["Ed25519Validator", "HmacValidator", "SignatureValidator"]

_ED25519_SIGNATURE_LENGTH = 64


class SignatureValidator(abc.ABC):
    """Verify the Standard Webhooks headers of an inbound request."""

    def __init__(self, timestamp_validator: TimestampValidator | None = None) -> None:
        self._timestamps = timestamp_validator or TimestampValidator()

    @abc.abstractmethod
    def version(self) -> SignatureVersion: ...

    @abc.abstractmethod
    def _matches(self, content: bytes, candidate: str, secret: str | bytes | None) -> bool:
        """Compare one received signature against *content*."""

    def verify(
        self,
        headers: Mapping[str, str],
        body: bytes,
        secret: str | bytes | None = None,
    ) -> None:
        """Raise :class:`VerificationError` unless the request is authentic and fresh."""
        webhook_id = get_header(headers, HEADER_ID)
        timestamp = parse_timestamp(get_header(headers, HEADER_TIMESTAMP))
        header = get_header(headers, HEADER_SIGNATURE)

        self._timestamps.validate(timestamp)

        if not webhook_id or not header:
            raise InvalidSignatureError(webhook_id)

        content = signed_content(webhook_id, timestamp, body)
        candidates = parse_signature_header(header).get(self.version().value, [])
        for candidate in candidates:
            if self._matches(content, candidate, secret):
                return
        raise InvalidSignatureError(webhook_id)

    def is_valid(
        self,
        headers: Mapping[str, str],
        body: bytes,
        secret: str | bytes | None = None,
    ) -> bool:
        try:
            self.verify(headers, body, secret)
        except VerificationError:
            return False
        return True


class HmacValidator(SignatureValidator):
    """``v1`` validator; the shared secret is supplied per call."""

    def version(self) -> SignatureVersion:
        return SignatureVersion.V1_HMAC

    def _matches(self, content: bytes, candidate: str, secret: str | bytes | None) -> bool:
        if not secret:
            return False
        expected = base64.b64encode(hmac.new(to_bytes(secret), content, hashlib.sha256).digest())
        return hmac.compare_digest(expected, candidate.encode("utf-8", "replace"))


class Ed25519Validator(SignatureValidator):
    """``v1a`` validator bound to one base64 Ed25519 public key.

    The ``secret`` argument of :meth:`verify` is accepted for interface
    compatibility and ignored.
    """

    def __init__(
        self,
        public_key: str | bytes,
        timestamp_validator: TimestampValidator | None = None,
    ) -> None:
        super().__init__(timestamp_validator)
        self._key = load_ed25519_public_key(public_key)

    def version(self) -> SignatureVersion:
        return SignatureVersion.V1A_ED25519

    def _matches(self, content: bytes, candidate: str, secret: str | bytes | None) -> bool:  # noqa: ARG002
        try:
            signature = base64.b64decode(candidate, validate=True)
        except (binascii.Error, ValueError):
            return False
        if len(signature) != _ED25519_SIGNATURE_LENGTH:
            return False
        try:
            self._key.verify(signature, content)
        except InvalidSignature:
            return False
        return True
