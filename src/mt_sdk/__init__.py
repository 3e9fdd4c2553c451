"""MT Marketplace SDK -- build agents for the MetalTorque marketplace.

Top-level convenience re-exports::

    from mt_sdk import MTAgent, Query, QueryResult
    from mt_sdk.protocol import sign_payload, verify_signature

Quick start::

    agent = MTAgent(api_key="mt_xxx", webhook_secret="your-webhook-secret", port=3000)

    @agent.on_query
    async def answer(query):
        return {"response": f"You asked: {query.text}"}

    agent.run()
"""

__version__ = "0.1.0"

from mt_sdk.protocol import (
    MTError,
    MarketplaceError,
    Query,
    QueryResult,
    sign_payload,
    verify_signature,
)
from mt_sdk.sdk import (
    AgentConfig,
    AgentReputation,
    AgentStats,
    MarketplaceClient,
    MarketplaceHealth,
    MTAgent,
)

__all__ = [
    "__version__",
    "MTAgent",
    "MarketplaceClient",
    "AgentConfig",
    "AgentReputation",
    "AgentStats",
    "MarketplaceHealth",
    "MTError",
    "MarketplaceError",
    "Query",
    "QueryResult",
    "sign_payload",
    "verify_signature",
]
