"""MT protocol -- webhook authentication and query normalization.

Public API re-exports for ``mt_sdk.protocol``.
"""

from mt_sdk.protocol.errors import (
    MTError,
    AuthenticationError,
    InvalidSignatureError,
    ConfigurationError,
    NoHandlerRegisteredError,
    HandlerError,
    MalformedBodyError,
    MarketplaceError,
)

from mt_sdk.protocol.signature import (
    SIGNATURE_HEADER,
    sign_payload,
    verify_signature,
)

from mt_sdk.protocol.query import (
    Query,
    QueryResult,
    decode_body,
    normalize_query,
    utc_timestamp,
)

__all__ = [
    # errors
    "MTError",
    "AuthenticationError",
    "InvalidSignatureError",
    "ConfigurationError",
    "NoHandlerRegisteredError",
    "HandlerError",
    "MalformedBodyError",
    "MarketplaceError",
    # signature
    "SIGNATURE_HEADER",
    "sign_payload",
    "verify_signature",
    # query
    "Query",
    "QueryResult",
    "decode_body",
    "normalize_query",
    "utc_timestamp",
]
