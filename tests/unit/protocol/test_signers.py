"""Unit tests for HmacSigner and Ed25519Signer."""
from __future__ import annotations

import base64
import hashlib
import hmac

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from mp_webhooks.kernel.errors import InvalidKeyMaterialError
from mp_webhooks.protocol import (
    Ed25519Signer,
    HmacSigner,
    SignatureVersion,
    generate_ed25519_keypair,
    generate_hmac_secret,
)


# ---------------------------------------------------------------------------
# HmacSigner
# ---------------------------------------------------------------------------
class TestHmacSigner:
    def test_signature_matches_reference_hmac(self):
        expected = base64.b64encode(
            hmac.new(b"s3cr3t", b'msg_1.1700000000.{"a":1}', hashlib.sha256).digest()
        ).decode()
        assert HmacSigner("s3cr3t").sign("msg_1", 1700000000, b'{"a":1}') == f"v1,{expected}"

    def test_str_and_bytes_payload_sign_identically(self):
        signer = HmacSigner(b"key")
        assert signer.sign("id", 1, '{"x":1}') == signer.sign("id", 1, b'{"x":1}')

    def test_deterministic(self):
        signer = HmacSigner("key")
        assert signer.sign("id", 1, b"p") == signer.sign("id", 1, b"p")

    def test_any_field_changes_signature(self):
        signer = HmacSigner("key")
        base = signer.sign("id", 1, b"p")
        assert signer.sign("id2", 1, b"p") != base
        assert signer.sign("id", 2, b"p") != base
        assert signer.sign("id", 1, b"q") != base

    def test_version(self):
        assert HmacSigner("k").version() is SignatureVersion.V1_HMAC

    def test_empty_secret_rejected(self):
        with pytest.raises(InvalidKeyMaterialError):
            HmacSigner("")

    def test_generated_secret_is_usable(self):
        secret = generate_hmac_secret()
        assert len(secret) >= 32
        assert HmacSigner(secret).sign("id", 1, b"").startswith("v1,")


# ---------------------------------------------------------------------------
# Ed25519Signer
# ---------------------------------------------------------------------------
class TestEd25519Signer:
    def test_signature_verifies_with_public_key(self):
        private_b64, public_b64 = generate_ed25519_keypair()
        header = Ed25519Signer(private_b64).sign("id", 1700000000, b"payload")
        assert header.startswith("v1a,")
        signature = base64.b64decode(header.split(",", 1)[1])
        public = Ed25519PublicKey.from_public_bytes(base64.b64decode(public_b64))
        public.verify(signature, b"id.1700000000.payload")

    def test_accepts_64_byte_secret_key(self):
        private_b64, public_b64 = generate_ed25519_keypair()
        libsodium_key = base64.b64encode(base64.b64decode(private_b64) + base64.b64decode(public_b64))
        assert Ed25519Signer(libsodium_key).sign("id", 1, b"x") == Ed25519Signer(private_b64).sign("id", 1, b"x")

    def test_version(self):
        private_b64, _ = generate_ed25519_keypair()
        assert Ed25519Signer(private_b64).version() is SignatureVersion.V1A_ED25519

    @pytest.mark.parametrize(
        "key",
        [
            "not base64!!",
            "",
            base64.b64encode(b"\x01" * 16).decode(),
            base64.b64encode(b"\x01" * 33).decode(),
        ],
    )
    def test_invalid_key_fails_in_constructor(self, key):
        with pytest.raises(InvalidKeyMaterialError):
            Ed25519Signer(key)
