"""Webhook signature signing and verification.

The marketplace signs every forwarded query with HMAC-SHA256 over the raw
request body, keyed by the agent's webhook secret, and sends the lowercase
hex digest in the ``x-mt-signature`` header.

Usage::

    from mt_sdk.protocol.signature import verify_signature

    payload = await request.body()  # raw bytes, before JSON parsing
    signature = request.headers["x-mt-signature"]

    if verify_signature(payload, signature, webhook_secret):
        # payload is authentic
        ...

Always pass the exact bytes received.  Re-serializing a parsed body can
change whitespace or key order and break an otherwise valid signature.
"""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_HEADER = "x-mt-signature"

_DIGEST_SIZE = hashlib.sha256().digest_size


def _to_bytes(payload: bytes | str) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def _hmac(payload: bytes | str, secret: str) -> hmac.HMAC:
    return hmac.new(secret.encode("utf-8"), _to_bytes(payload), hashlib.sha256)


def sign_payload(payload: bytes | str, secret: str) -> str:
    """Compute the HMAC-SHA256 signature for a webhook payload.

    Args:
        payload: The exact body bytes.  ``str`` is UTF-8 encoded.
        secret: The shared webhook secret.

    Returns:
        The 64-character lowercase hex digest.
    """
    return _hmac(payload, secret).hexdigest()


def verify_signature(
    payload: bytes | str,
    signature: str | None,
    secret: str,
) -> bool:
    """Verify an ``x-mt-signature`` value against a payload.

    Args:
        payload: The raw request body bytes.
        signature: The hex digest from the ``x-mt-signature`` header.
        secret: The shared webhook secret.

    Returns:
        ``True`` if the signature is valid, ``False`` otherwise.  Missing,
        non-hex and wrong-length signatures return ``False`` rather than
        raising.  Comparison uses ``hmac.compare_digest`` so its cost does
        not depend on where the first differing byte is.
    """
    expected = _hmac(payload, secret).digest()

    try:
        received = bytes.fromhex(signature.strip()) if signature else b""
    except (ValueError, TypeError, AttributeError):
        received = b""

    if len(received) != _DIGEST_SIZE:
        # Still run a full-length comparison so a bad length is not cheaper.
        hmac.compare_digest(expected, bytes(_DIGEST_SIZE))
        return False

    return hmac.compare_digest(expected, received)
