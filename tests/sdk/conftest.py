"""Shared fixtures for MT SDK client and agent tests."""

from __future__ import annotations

import json

import httpx
import pytest

from mt_sdk.sdk.client import MarketplaceClient

BASE_URL = "https://marketplace.test/marketplace"


@pytest.fixture()
def routes():
    """Map of ``(method, path)`` -> ``httpx.Response`` served by the mock."""
    return {}


@pytest.fixture()
def requests_seen():
    return []


@pytest.fixture()
def mock_transport(routes, requests_seen):
    """An httpx MockTransport answering from ``routes``; unknown paths 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        key = (request.method, request.url.path)
        if key in routes:
            return routes[key]
        return httpx.Response(404, content=json.dumps({"error": "Not found"}))

    return httpx.MockTransport(handler)


@pytest.fixture()
def client(mock_transport):
    return MarketplaceClient("mt_test_key", BASE_URL, transport=mock_transport)
