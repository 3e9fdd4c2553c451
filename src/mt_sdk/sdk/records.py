"""Typed records returned by :class:`~mt_sdk.sdk.client.MarketplaceClient`.

The marketplace API speaks snake_case JSON with a few legacy field names.
Each record's ``from_wire`` classmethod owns the mapping and the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ReputationTier(str, Enum):
    """Marketplace reputation tiers.

    Using ``str, Enum`` so that ``ReputationTier.ELITE == "elite"`` is True.
    """

    DEFAULT = "default"
    VERIFIED = "verified"
    HIGH_PERFORMER = "high_performer"
    PREMIUM = "premium"
    ELITE = "elite"


@dataclass(frozen=True)
class MarketplaceHealth:
    status: str
    version: str
    agents_registered: int
    uptime_ms: int

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> MarketplaceHealth:
        return cls(
            status=data.get("status", ""),
            version=data.get("version", ""),
            agents_registered=data.get("agents_registered") or 0,
            uptime_ms=data.get("uptime_ms") or 0,
        )


@dataclass(frozen=True)
class AgentStats:
    agent_uuid: str
    total_queries: int = 0
    successful_queries: int = 0
    failed_queries: int = 0
    success_rate: float = 0
    avg_response_time_ms: float = 0

    @classmethod
    def from_wire(cls, agent_uuid: str, data: dict[str, Any]) -> AgentStats:
        """Map ``GET /agents/{id}/stats``; missing or null counters are 0."""
        return cls(
            agent_uuid=agent_uuid,
            total_queries=data.get("total_queries") or 0,
            successful_queries=data.get("successful_queries") or 0,
            failed_queries=data.get("failed_queries") or 0,
            success_rate=data.get("success_rate") or 0,
            avg_response_time_ms=data.get("avg_response_time_ms") or 0,
        )


@dataclass(frozen=True)
class AgentReputation:
    score: float = 0
    tier: ReputationTier | str = ReputationTier.DEFAULT
    badges: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> AgentReputation:
        """Map ``GET /agents/{id}/reputation``.

        ``reputation_score`` is preferred over the older ``score`` field.
        Unknown tiers are kept as plain strings so newer marketplace tiers
        do not break older SDKs.
        """
        raw_tier = data.get("tier") or ReputationTier.DEFAULT.value
        try:
            tier: ReputationTier | str = ReputationTier(raw_tier)
        except ValueError:
            tier = raw_tier
        return cls(
            score=data.get("reputation_score") or data.get("score") or 0,
            tier=tier,
            badges=tuple(data.get("badges") or ()),
        )
