"""Agent webhook server: ``/health`` and ``/query``."""

from mt_sdk.server.app import configure_logging, create_app

__all__ = ["configure_logging", "create_app"]
