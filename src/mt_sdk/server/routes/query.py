"""POST /query -- forwarded marketplace queries.

Order of operations:
1. Authenticate the raw body (dependency -- already done)
2. Decode and normalize into a Query (malformed bodies become empty queries)
3. Check a handler is registered
4. Invoke and time the handler
5. Shape the result (or failure) into a QueryEnvelope
"""

from __future__ import annotations

import inspect
import logging
import time
from typing import Any, Awaitable, Callable, Union

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from mt_sdk.protocol import (
    HandlerError,
    MalformedBodyError,
    NoHandlerRegisteredError,
    Query,
    QueryResult,
    decode_body,
    normalize_query,
)
from mt_sdk.server.auth import verify_webhook_request
from mt_sdk.server.models import QueryEnvelope

logger = logging.getLogger(__name__)

QueryHandler = Callable[[Query], Union[Awaitable[Any], Any]]

_HANDLER_ERROR_FALLBACK = "Query handler error"

router = APIRouter()


def build_query(raw: bytes) -> Query:
    """Normalize a raw body; an unparseable body yields an empty query."""
    try:
        body = decode_body(raw)
    except MalformedBodyError as exc:
        logger.warning("Malformed query body, treating as empty: %s", exc)
        body = {}
    return normalize_query(body)


async def invoke_handler(handler: QueryHandler, query: Query) -> QueryResult:
    """Call *handler* and coerce its return value.

    Coroutine functions are awaited on the event loop.  Plain callables run
    in the threadpool so a blocking handler does not stall other requests.

    Raises:
        HandlerError: Wrapping whatever the handler raised, or the
            ``TypeError`` for an unusable return value.
    """
    try:
        if inspect.iscoroutinefunction(handler):
            value = await handler(query)
        else:
            value = await run_in_threadpool(handler, query)
            if inspect.isawaitable(value):
                value = await value
        return QueryResult.coerce(value)
    except Exception as exc:
        raise HandlerError(str(exc) or _HANDLER_ERROR_FALLBACK) from exc


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


def _failure(query: Query, exc: HandlerError, duration_ms: int) -> JSONResponse:
    logger.error(
        "Handler failed for query %s after %dms",
        query.query_id,
        duration_ms,
        exc_info=exc.__cause__,
    )
    envelope = QueryEnvelope(success=False, error=str(exc), duration_ms=duration_ms)
    return JSONResponse(status_code=500, content=envelope.to_json())


@router.post("/query", response_model=QueryEnvelope)
async def handle_query(
    request: Request,
    raw: bytes = Depends(verify_webhook_request),
) -> JSONResponse:
    """Run the registered handler for a forwarded query."""
    query = build_query(raw)

    handler: QueryHandler | None = request.app.state.query_handler
    if handler is None:
        raise NoHandlerRegisteredError("No query handler registered")

    logger.debug("Handling %s", query)
    start = time.monotonic()
    try:
        result = await invoke_handler(handler, query)
    except HandlerError as exc:
        return _failure(query, exc, _elapsed_ms(start))

    duration_ms = _elapsed_ms(start)
    try:
        envelope = QueryEnvelope(
            success=True,
            response=result.response,
            metadata=result.metadata,
            duration_ms=duration_ms,
        )
        response = JSONResponse(status_code=200, content=envelope.to_json())
    except (TypeError, ValueError) as exc:
        # pydantic validation and serialization errors are ValueErrors
        error = HandlerError(f"Handler result is not serializable: {exc}")
        error.__cause__ = exc
        return _failure(query, error, duration_ms)

    logger.debug("Query %s answered in %dms", query.query_id, duration_ms)
    return response
