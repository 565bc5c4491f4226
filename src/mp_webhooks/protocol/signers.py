"""Protocol – outbound signers (HMAC-SHA256 ``v1`` and Ed25519 ``v1a``)."""
from __future__ import annotations

import abc
import hashlib
import hmac

from mp_webhooks.kernel.errors import InvalidKeyMaterialError
from mp_webhooks.protocol.keys import load_ed25519_private_key
from mp_webhooks.protocol.version import SignatureVersion
from mp_webhooks.protocol.wire import format_signature, signed_content, to_bytes

__all__ = ["Ed25519Signer", "HmacSigner", "Signer"]


class Signer(abc.ABC):
    """Produce a versioned signature string for ``(id, timestamp, payload)``."""

    @abc.abstractmethod
    def sign(self, webhook_id: str, timestamp: int, payload: str | bytes) -> str: ...

    @abc.abstractmethod
    def version(self) -> SignatureVersion: ...


class HmacSigner(Signer):
    """``v1,<base64(HMAC-SHA256(secret, signed_content))>``.

    The secret is an opaque shared byte string. No minimum length is enforced
    here; callers should provide at least 32 bytes.
    """

    def __init__(self, secret: str | bytes) -> None:
        if not secret:
            raise InvalidKeyMaterialError("HMAC signing secret must not be empty")
        self._secret = to_bytes(secret)

    def sign(self, webhook_id: str, timestamp: int, payload: str | bytes) -> str:
        content = signed_content(webhook_id, timestamp, payload)
        digest = hmac.new(self._secret, content, hashlib.sha256).digest()
        return format_signature(self.version(), digest)

    def version(self) -> SignatureVersion:
        return SignatureVersion.V1_HMAC


class Ed25519Signer(Signer):
    """``v1a,<base64(Ed25519-sign(private_key, signed_content))>``.

    The key is decoded in the constructor so a malformed key fails at
    configuration time instead of inside a retry loop.
    """

    def __init__(self, private_key: str | bytes) -> None:
        self._key = load_ed25519_private_key(private_key)

    def sign(self, webhook_id: str, timestamp: int, payload: str | bytes) -> str:
        content = signed_content(webhook_id, timestamp, payload)
        return format_signature(self.version(), self._key.sign(content))

    def version(self) -> SignatureVersion:
        return SignatureVersion.V1A_ED25519
