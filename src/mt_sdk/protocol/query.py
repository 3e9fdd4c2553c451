"""Canonical query records and inbound body normalization.

The marketplace (and older coordinators) send the same logical fields
under different names.  Each logical field has an explicit, ordered alias
list; the first alias with a truthy value wins.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from mt_sdk.protocol.errors import MalformedBodyError

QUERY_ID_FIELDS: tuple[str, ...] = ("query_id", "queryId")
TEXT_FIELDS: tuple[str, ...] = ("query", "text", "prompt")
CAPABILITY_FIELDS: tuple[str, ...] = ("capabilities", "capabilities_needed")
METADATA_FIELDS: tuple[str, ...] = ("metadata",)
TIMESTAMP_FIELDS: tuple[str, ...] = ("timestamp",)


def utc_timestamp() -> str:
    """Return a UTC timestamp: ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return ts.replace("+00:00", "Z")


@dataclass(frozen=True)
class Query:
    """A normalized inbound query, handed to the registered handler."""

    query_id: str
    text: str
    timestamp: str
    capabilities: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"Query {self.query_id} at {self.timestamp}"


@dataclass
class QueryResult:
    """What a query handler returns.

    ``cost`` is an optional per-query cost override; it is accepted for
    handlers written against the marketplace's billing API but is not part
    of the webhook response.
    """

    response: str
    metadata: dict[str, Any] | None = None
    cost: float | None = None

    @classmethod
    def coerce(cls, value: Any) -> QueryResult:
        """Build a QueryResult from a handler's return value.

        Accepts a ``QueryResult``, a mapping with a ``response`` key, or a
        bare string.  Anything else raises ``TypeError``.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(response=value)
        if isinstance(value, Mapping):
            if "response" not in value:
                raise TypeError("Handler result is missing 'response'")
            metadata = value.get("metadata")
            if metadata is not None and not isinstance(metadata, Mapping):
                raise TypeError("Handler result 'metadata' must be a mapping")
            return cls(
                response=str(value["response"]),
                metadata=dict(metadata) if metadata is not None else None,
                cost=value.get("cost"),
            )
        raise TypeError(
            f"Handler must return QueryResult, dict or str, not {type(value).__name__}"
        )


def _first(body: Mapping[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        value = body.get(name)
        if value:
            return value
    return None


def decode_body(raw: bytes) -> dict[str, Any]:
    """Parse a raw request body into a JSON object.

    Raises:
        MalformedBodyError: If the body is not valid JSON or not an object.
    """
    try:
        data = json.loads(raw) if raw else {}
    except (ValueError, RecursionError) as exc:
        # ValueError covers bad UTF-8 and bad JSON
        raise MalformedBodyError(f"Body is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedBodyError(
            f"Body must be a JSON object, got {type(data).__name__}"
        )
    return data


def normalize_query(body: Mapping[str, Any]) -> Query:
    """Build a canonical :class:`Query` from a decoded request body.

    Missing fields get defaults: a fresh UUID for ``query_id``, ``""`` for
    ``text``, no capabilities, empty metadata, and the current time.
    """
    capabilities = _first(body, CAPABILITY_FIELDS)
    if isinstance(capabilities, str):
        capabilities = (capabilities,)
    elif not isinstance(capabilities, (list, tuple)):
        capabilities = ()
    metadata = _first(body, METADATA_FIELDS)

    return Query(
        query_id=str(_first(body, QUERY_ID_FIELDS) or uuid.uuid4()),
        text=str(_first(body, TEXT_FIELDS) or ""),
        timestamp=str(_first(body, TIMESTAMP_FIELDS) or utc_timestamp()),
        capabilities=tuple(str(c) for c in capabilities),
        metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
    )
