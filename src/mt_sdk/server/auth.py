"""Webhook authentication for the agent server.

Provides the FastAPI dependency that checks ``x-mt-signature`` against
the raw request body before any JSON parsing happens.
"""

from __future__ import annotations

import logging

from fastapi import Request

from mt_sdk.protocol import (
    SIGNATURE_HEADER,
    AuthenticationError,
    InvalidSignatureError,
    verify_signature,
)

logger = logging.getLogger(__name__)


async def verify_webhook_request(request: Request) -> bytes:
    """FastAPI dependency: authenticate the webhook and return the raw body.

    A request without a signature header is let through unless the agent
    was configured with ``require_signature``; unsigned deployments rely on
    network-level restrictions instead.

    Raises ``InvalidSignatureError`` for a bad signature and
    ``AuthenticationError`` for a missing one when signatures are required.
    Both become HTTP 401 via the app's exception handlers.
    """
    settings = request.app.state.settings
    raw = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)
    peer = request.client.host if request.client else "unknown"

    if signature is None:
        if settings.require_signature:
            logger.warning("Rejected unsigned query from %s", peer)
            raise AuthenticationError("Missing signature")
        logger.debug("Unsigned query from %s accepted", peer)
        return raw

    if not verify_signature(raw, signature, settings.webhook_secret):
        logger.warning("Rejected query from %s: invalid signature", peer)
        raise InvalidSignatureError("Invalid signature")

    return raw
