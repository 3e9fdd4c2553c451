"""FastAPI application factory for the agent webhook server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse

from mt_sdk.protocol import AuthenticationError, NoHandlerRegisteredError
from mt_sdk.server.models import ErrorResponse, QueryEnvelope

if TYPE_CHECKING:
    from mt_sdk.sdk.config import AgentConfig

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for a running agent.

    ``basicConfig`` is a no-op when the host application already set up
    handlers, so embedding the SDK does not override its logging.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=_LOG_FORMAT,
    )
    logging.getLogger("mt_sdk").setLevel(getattr(logging, level.upper(), logging.INFO))


def create_app(settings: AgentConfig | None = None) -> FastAPI:
    """Create the agent's FastAPI application.

    Only ``/health`` and ``/query`` are registered here.  The query handler
    slot lives on ``app.state.query_handler`` and starts empty; callers
    mount extra routes after this returns, so the built-in paths match
    first.

    .. note:: TLS is expected to be terminated in front of the agent (load
       balancer, reverse proxy).  The app itself serves plain HTTP.
    """
    if settings is None:
        from mt_sdk.sdk.config import AgentConfig

        settings = AgentConfig()

    app = FastAPI(title=f"MT Agent - {settings.agent_id}", version="0.1.0")
    app.state.settings = settings
    app.state.query_handler = None

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )

    @app.exception_handler(NoHandlerRegisteredError)
    async def no_handler_error_handler(
        request: Request, exc: NoHandlerRegisteredError
    ) -> JSONResponse:
        logger.error("Query received but no handler is registered")
        envelope = QueryEnvelope(success=False, error=str(exc))
        return JSONResponse(status_code=500, content=envelope.to_json())

    from mt_sdk.server.routes.health import router as health_router
    from mt_sdk.server.routes.query import router as query_router

    app.include_router(health_router)
    app.include_router(query_router)

    return app
