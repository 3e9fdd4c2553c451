"""Shared fixtures for agent server tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from mt_sdk.sdk.config import AgentConfig
from mt_sdk.server.app import create_app


@pytest.fixture()
def settings(webhook_secret) -> AgentConfig:
    return AgentConfig(api_key="mt_test", webhook_secret=webhook_secret, agent_id="test-agent")


@pytest.fixture()
def app(settings):
    """Agent app with no handler registered."""
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def calls(app):
    """Register a recording async handler; returns the list of received queries."""
    received = []

    async def handler(query):
        received.append(query)
        return {"response": "ok"}

    app.state.query_handler = handler
    return received
