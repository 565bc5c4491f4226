"""Protocol – key material decoding and generation.

Ed25519 private keys are accepted either as a 32-byte seed or as the 64-byte
``seed || public_key`` secret key produced by libsodium, base64 encoded.
"""
from __future__ import annotations

import base64
import binascii
import secrets

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from mp_webhooks.kernel.errors import InvalidKeyMaterialError

ED25519_SEED_LENGTH = 32
ED25519_SECRET_KEY_LENGTH = 64
ED25519_PUBLIC_KEY_LENGTH = 32


def decode_base64(value: str | bytes, *, what: str) -> bytes:
    """Strict base64 decode; raises :class:`InvalidKeyMaterialError` on bad input."""
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidKeyMaterialError(f"Invalid {what} format", cause=exc) from exc
    if not decoded:
        raise InvalidKeyMaterialError(f"Invalid {what} format: empty key")
    return decoded


def load_ed25519_private_key(value: str | bytes) -> Ed25519PrivateKey:
    raw = decode_base64(value, what="Ed25519 private key")
    if len(raw) == ED25519_SECRET_KEY_LENGTH:
        raw = raw[:ED25519_SEED_LENGTH]
    if len(raw) != ED25519_SEED_LENGTH:
        raise InvalidKeyMaterialError(
            f"Invalid Ed25519 private key length: expected {ED25519_SEED_LENGTH} "
            f"or {ED25519_SECRET_KEY_LENGTH} bytes, got {len(raw)}"
        )
    return Ed25519PrivateKey.from_private_bytes(raw)


def load_ed25519_public_key(value: str | bytes) -> Ed25519PublicKey:
    raw = decode_base64(value, what="Ed25519 public key")
    if len(raw) != ED25519_PUBLIC_KEY_LENGTH:
        raise InvalidKeyMaterialError(
            f"Invalid Ed25519 public key length: expected {ED25519_PUBLIC_KEY_LENGTH} bytes, got {len(raw)}"
        )
    return Ed25519PublicKey.from_public_bytes(raw)


def generate_hmac_secret(num_bytes: int = 32) -> str:
    """Return a URL-safe random secret carrying *num_bytes* of entropy."""
    return secrets.token_urlsafe(num_bytes)


def generate_ed25519_keypair() -> tuple[str, str]:
    """Return ``(private_seed_b64, public_key_b64)`` for a fresh Ed25519 key."""
    private_key = Ed25519PrivateKey.generate()
    seed = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return base64.b64encode(seed).decode("ascii"), base64.b64encode(public).decode("ascii")


__all__ = [
    "decode_base64",
    "generate_ed25519_keypair",
    "generate_hmac_secret",
    "load_ed25519_private_key",
    "load_ed25519_public_key",
]
