"""Protocol – Standard Webhooks signing, verification and replay protection."""
from mp_webhooks.protocol.keys import generate_ed25519_keypair, generate_hmac_secret
from mp_webhooks.protocol.signers import Ed25519Signer, HmacSigner, Signer
from mp_webhooks.protocol.timestamp import DEFAULT_TOLERANCE_SECONDS, TimestampValidator
from mp_webhooks.protocol.validators import Ed25519Validator, HmacValidator, SignatureValidator
from mp_webhooks.protocol.version import SignatureVersion
from mp_webhooks.protocol.wire import (
    HEADER_ID,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    parse_signature_header,
    signed_content,
)

__all__ = [
    "DEFAULT_TOLERANCE_SECONDS",
    "Ed25519Signer",
    "Ed25519Validator",
    "HEADER_ID",
    "HEADER_SIGNATURE",
    "HEADER_TIMESTAMP",
    "HmacSigner",
    "HmacValidator",
    "SignatureValidator",
    "SignatureVersion",
    "Signer",
    "TimestampValidator",
    "generate_ed25519_keypair",
    "generate_hmac_secret",
    "parse_signature_header",
    "signed_content",
]
