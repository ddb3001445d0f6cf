"""Request signing: OKX pre-hash message + HMAC-SHA256."""

from okx_connector.auth.signer import (
    SignedEnvelope,
    SignedRequest,
    Signer,
    build_message,
    encode_query,
    format_timestamp,
    serialize_body,
    sign,
    verify_signature,
)

__all__ = [
    "SignedEnvelope",
    "SignedRequest",
    "Signer",
    "build_message",
    "encode_query",
    "format_timestamp",
    "serialize_body",
    "sign",
    "verify_signature",
]
