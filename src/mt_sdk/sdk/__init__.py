"""MT SDK -- agent server, configuration and marketplace client."""

from mt_sdk.sdk.agent import MTAgent
from mt_sdk.sdk.client import MarketplaceClient
from mt_sdk.sdk.config import AgentConfig
from mt_sdk.sdk.records import AgentReputation, AgentStats, MarketplaceHealth, ReputationTier

__all__ = [
    "MTAgent",
    "MarketplaceClient",
    "AgentConfig",
    "AgentReputation",
    "AgentStats",
    "MarketplaceHealth",
    "ReputationTier",
]
