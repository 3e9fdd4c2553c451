"""MT SDK exception hierarchy.

All SDK-specific exceptions inherit from :class:`MTError`.
"""

from __future__ import annotations


class MTError(Exception):
    """Base exception for all MT SDK errors."""


class AuthenticationError(MTError):
    """Raised when an inbound webhook call cannot be authenticated."""


class InvalidSignatureError(AuthenticationError):
    """Raised when the ``x-mt-signature`` header does not match the body."""


class ConfigurationError(MTError):
    """Raised when the agent is misconfigured."""


class NoHandlerRegisteredError(ConfigurationError):
    """Raised when a query arrives before ``on_query()`` was called."""


class HandlerError(MTError):
    """Wraps an exception raised by the user-supplied query handler.

    The original exception is available as ``__cause__``.
    """


class MalformedBodyError(MTError):
    """Raised when a request body is not a JSON object."""


class MarketplaceError(MTError):
    """Raised when a marketplace REST call fails.

    ``status_code`` is ``None`` for transport-level failures (DNS, connect,
    timeout) and the HTTP status otherwise.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
