"""Shared test fixtures for MT SDK tests."""

from __future__ import annotations

import json

import pytest

from mt_sdk.protocol.signature import sign_payload

_MT_ENV_VARS = (
    "MT_API_KEY",
    "MT_WEBHOOK_SECRET",
    "MT_PORT",
    "MT_MARKETPLACE_URL",
    "MT_HOST",
    "MT_AGENT_ID",
    "MT_REQUIRE_SIGNATURE",
    "MT_LOG_LEVEL",
    "MT_CONFIG_PATH",
)


@pytest.fixture(autouse=True)
def _clean_mt_env(monkeypatch):
    """Keep the developer's MT_* environment out of every test."""
    for name in _MT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def webhook_secret() -> str:
    return "s1"


@pytest.fixture()
def signed_body(webhook_secret):
    """Return a helper that serializes a body and signs the exact bytes.

    ``signed_body({"query": "x"})`` -> ``(raw_bytes, headers)``.
    """

    def _make(payload: dict, secret: str | None = None) -> tuple[bytes, dict]:
        raw = json.dumps(payload).encode("utf-8")
        sig = sign_payload(raw, secret if secret is not None else webhook_secret)
        return raw, {"x-mt-signature": sig, "Content-Type": "application/json"}

    return _make
