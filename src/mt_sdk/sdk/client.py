"""Marketplace REST client via httpx.

Thin typed wrapper over the coordinator's read endpoints.  Every request
carries the agent's ``x-api-key``.  Failures are raised as
:class:`~mt_sdk.protocol.errors.MarketplaceError`; nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import httpx

from mt_sdk.protocol.errors import MarketplaceError
from mt_sdk.sdk.config import DEFAULT_MARKETPLACE_URL
from mt_sdk.sdk.records import AgentReputation, AgentStats, MarketplaceHealth

logger = logging.getLogger(__name__)

_TIMEOUT = 30.0


class MarketplaceClient:
    """Client for the marketplace coordinator REST API.

    Usage::

        async with MarketplaceClient("mt_xxx") as client:
            health = await client.get_health()
            stats = await client.get_stats(agent_uuid)

    Inside ``async with`` (or after ``connect()``) a single pooled
    ``httpx.AsyncClient`` is reused for all requests.  Outside of it each
    call opens a short-lived client.  The ``*_sync`` wrappers always take
    the short-lived path.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_MARKETPLACE_URL,
        *,
        timeout: float = _TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def __repr__(self) -> str:
        return f"MarketplaceClient(base_url={self._base_url!r})"

    # -- Lifecycle -----------------------------------------------------------

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Content-Type": "application/json",
                "x-api-key": self._api_key,
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def connect(self) -> None:
        """Create the shared pooled client.  Idempotent."""
        if self._client is None:
            self._client = self._new_client()

    async def aclose(self) -> None:
        """Close the pooled client, if any."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> MarketplaceClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # -- Plumbing ------------------------------------------------------------

    async def _request(self, method: str, path: str, body: Any = None) -> Any:
        """Send a request and return the decoded JSON body.

        Raises ``MarketplaceError`` with the remote ``error`` message (or
        ``HTTP <status>``) on 4xx/5xx, and on invalid JSON or transport
        failures.
        """
        try:
            if self._client is not None:
                resp = await self._client.request(method, path, json=body)
            else:
                async with self._new_client() as client:
                    resp = await client.request(method, path, json=body)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed: %s", method, path, exc)
            raise MarketplaceError(f"Request to {path} failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise MarketplaceError(
                f"Invalid JSON response: {resp.text}", resp.status_code
            ) from exc

        if resp.status_code >= 400:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            raise MarketplaceError(
                message or f"HTTP {resp.status_code}", resp.status_code
            )

        logger.debug("%s %s -> %d", method, path, resp.status_code)
        return data

    async def _get_object(self, path: str) -> dict[str, Any]:
        data = await self._request("GET", path)
        if not isinstance(data, dict):
            raise MarketplaceError(f"Unexpected response shape from {path}")
        return data

    # -- Endpoints -----------------------------------------------------------

    async def get_health(self) -> MarketplaceHealth:
        """Check marketplace health and status."""
        return MarketplaceHealth.from_wire(await self._get_object("/health"))

    async def get_stats(self, agent_uuid: str) -> AgentStats:
        """Get an agent's query statistics."""
        data = await self._get_object(f"/agents/{agent_uuid}/stats")
        return AgentStats.from_wire(agent_uuid, data)

    async def get_reputation(self, agent_uuid: str) -> AgentReputation:
        """Get an agent's reputation score, tier and badges."""
        data = await self._get_object(f"/agents/{agent_uuid}/reputation")
        return AgentReputation.from_wire(data)

    async def list_agents(self) -> list[dict[str, Any]]:
        """List all agents in the marketplace."""
        data = await self._request("GET", "/agents")
        if isinstance(data, dict) and "agents" in data:
            return list(data["agents"] or [])
        if isinstance(data, list):
            return data
        return []

    async def get_dashboard(self) -> dict[str, Any]:
        """Get analytics dashboard data, as returned by the marketplace."""
        return await self._request("GET", "/analytics/dashboard")

    # -- Sync wrappers -------------------------------------------------------

    def _blocking(self, endpoint: str, *args: Any) -> Any:
        """Call the coroutine method *endpoint* and block for its result.

        The call goes through an unpooled copy of this client, since a
        pooled ``httpx.AsyncClient`` is bound to the loop that opened it.
        When the caller already runs inside an event loop (Jupyter, a sync
        helper called from async code) the request runs on a worker thread
        with a loop of its own.
        """
        detached = MarketplaceClient(
            self._api_key,
            self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

        def call() -> Any:
            return asyncio.run(getattr(detached, endpoint)(*args))

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return call()
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="mt-sdk-sync") as pool:
            return pool.submit(call).result()

    def get_health_sync(self) -> MarketplaceHealth:
        """Synchronous wrapper for get_health()."""
        return self._blocking("get_health")

    def get_stats_sync(self, agent_uuid: str) -> AgentStats:
        """Synchronous wrapper for get_stats()."""
        return self._blocking("get_stats", agent_uuid)

    def get_reputation_sync(self, agent_uuid: str) -> AgentReputation:
        """Synchronous wrapper for get_reputation()."""
        return self._blocking("get_reputation", agent_uuid)

    def list_agents_sync(self) -> list[dict[str, Any]]:
        """Synchronous wrapper for list_agents()."""
        return self._blocking("list_agents")

    def get_dashboard_sync(self) -> dict[str, Any]:
        """Synchronous wrapper for get_dashboard()."""
        return self._blocking("get_dashboard")
