"""MTAgent -- the primary SDK interface.

Wraps the webhook server (``/health`` + ``/query``), the single query
handler slot, and a :class:`MarketplaceClient` for the coordinator API.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import uvicorn
from fastapi import APIRouter, FastAPI

from mt_sdk.protocol import MTError
from mt_sdk.sdk.client import MarketplaceClient
from mt_sdk.sdk.config import AgentConfig
from mt_sdk.sdk.records import AgentReputation, AgentStats
from mt_sdk.server.app import configure_logging, create_app
from mt_sdk.server.routes.query import QueryHandler

logger = logging.getLogger(__name__)


class MTAgent:
    """An agent on the MT marketplace.

    Usage::

        agent = MTAgent(api_key="mt_xxx", webhook_secret="...", port=3000)

        @agent.on_query
        async def answer(query):
            return {"response": f"You asked: {query.text}"}

        agent.run()

    Async usage::

        async with MTAgent(api_key="mt_xxx", webhook_secret="...") as agent:
            agent.on_query(answer)
            await serve_forever()
    """

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        port: int | None = None,
        marketplace_url: str | None = None,
        *,
        host: str | None = None,
        agent_id: str | None = None,
        require_signature: bool | None = None,
        config: AgentConfig | None = None,
    ) -> None:
        """Create an agent.  No I/O happens here -- call ``start()`` or ``run()``."""
        self._config = config or AgentConfig(
            api_key=api_key,
            webhook_secret=webhook_secret,
            port=port,
            marketplace_url=marketplace_url,
            host=host,
            agent_id=agent_id,
            require_signature=require_signature,
        )
        self._app = create_app(self._config)
        self.client = MarketplaceClient(
            self._config.api_key, self._config.marketplace_url
        )
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task | None = None

    # -- Properties ----------------------------------------------------------

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def app(self) -> FastAPI:
        """The underlying FastAPI app, for advanced customization."""
        return self._app

    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    # -- Handler registration ------------------------------------------------

    def on_query(self, handler: QueryHandler) -> QueryHandler:
        """Register the handler for incoming queries.

        Only one handler is kept; registering again replaces it.  Returns
        the handler, so this also works as a decorator::

            @agent.on_query
            async def answer(query):
                result = await process(query.text)
                return {"response": result}

        The handler receives a :class:`~mt_sdk.protocol.Query` and returns a
        ``QueryResult``, a ``{"response": ..., "metadata": ...}`` dict, or a
        string.  It may be ``async def`` or a plain function.
        """
        previous = self._app.state.query_handler
        if previous is not None and previous is not handler:
            if self.is_running:
                logger.warning("Query handler replaced while the server is running")
            else:
                logger.debug("Query handler replaced")
        self._app.state.query_handler = handler
        return handler

    def use(self, path: str, target: Any) -> MTAgent:
        """Mount extra routes under *path*.

        *target* is an ``APIRouter`` (included with *path* as prefix) or any
        ASGI application (mounted at *path*).  ``/health`` and ``/query``
        were registered first and keep matching first.

        Example::

            router = APIRouter()

            @router.get("/ping")
            async def ping():
                return {"custom": True}

            agent.use("/custom", router)
        """
        if isinstance(target, APIRouter):
            self._app.include_router(target, prefix=path.rstrip("/"))
        else:
            self._app.mount(path, target)
        return self

    # -- Lifecycle -----------------------------------------------------------

    def _server_config(self) -> uvicorn.Config:
        return uvicorn.Config(
            self._app,
            host=self._config.host,
            port=self._config.port,
            log_level=self._config.log_level.lower(),
        )

    def _log_endpoints(self) -> None:
        port = self._config.port
        logger.info("MT Agent listening on port %d", port)
        logger.info("Webhook endpoint: http://localhost:%d/query", port)
        logger.info("Health check: http://localhost:%d/health", port)

    async def start(self) -> None:
        """Start the webhook server in the background.

        Returns once the server is accepting connections.  Idempotent.
        """
        if self.is_running:
            return

        configure_logging(self._config.log_level)
        server = uvicorn.Server(self._server_config())
        self._server = server
        self._serve_task = asyncio.create_task(server.serve())

        while not server.started:
            if self._serve_task.done():
                # serve() returned or raised before binding (e.g. port in use)
                exc = self._serve_task.exception()
                self._server = None
                self._serve_task = None
                raise MTError(
                    f"Agent server failed to start on port {self._config.port}"
                ) from exc
            await asyncio.sleep(0.05)

        self._log_endpoints()

    async def stop(self) -> None:
        """Stop the webhook server and close the marketplace client."""
        if self._server is not None and self._serve_task is not None:
            self._server.should_exit = True
            await self._serve_task
            logger.info("MT Agent stopped")
        self._server = None
        self._serve_task = None
        await self.client.aclose()

    async def __aenter__(self) -> MTAgent:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    def run(self) -> None:
        """Run the webhook server in the foreground until interrupted."""
        configure_logging(self._config.log_level)
        self._log_endpoints()
        uvicorn.run(
            self._app,
            host=self._config.host,
            port=self._config.port,
            log_level=self._config.log_level.lower(),
        )

    # -- Marketplace shortcuts -----------------------------------------------

    async def get_stats(self, agent_uuid: str) -> AgentStats:
        """Get this agent's current stats from the marketplace."""
        return await self.client.get_stats(agent_uuid)

    async def get_reputation(self, agent_uuid: str) -> AgentReputation:
        """Get this agent's reputation score and tier."""
        return await self.client.get_reputation(agent_uuid)

    def get_stats_sync(self, agent_uuid: str) -> AgentStats:
        """Synchronous wrapper for get_stats()."""
        return self.client.get_stats_sync(agent_uuid)

    def get_reputation_sync(self, agent_uuid: str) -> AgentReputation:
        """Synchronous wrapper for get_reputation()."""
        return self.client.get_reputation_sync(agent_uuid)
