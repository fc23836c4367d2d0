"""
Scenario Configuration

Inbound configuration for one pipeline run: signals, current holdings or
strategy books, risk limits and the optional overrides, incident, arena and
plugin settings. Optional parts default to their disabled form so pipeline
stages never have to test for None.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field, field_validator

from .base import FundLaunchBaseConfig
from .risk import RiskLimitConfig
from ..plugins.registry import StrategyPluginRegistry
from ..types.signals import StrategySignal
from ..utils.numeric import clamp, round6

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class CurrentBookWeight(FundLaunchBaseConfig):
    """Current holding of one symbol, as a fraction of capital."""

    symbol: str
    weight: float


class StrategyBookConfig(FundLaunchBaseConfig):
    """A capital-bounded sub-portfolio driven by a subset of strategies."""

    book_id: str
    strategy_ids: List[str] = Field(default_factory=list)
    capital_share: float
    current_book: List[CurrentBookWeight] = Field(default_factory=list)


class PolicyOverrideRequest(FundLaunchBaseConfig):
    """
    Proposed change to one named risk limit field.

    Naive datetimes are treated as UTC.
    """

    policy_key: str
    requested_value: float
    requested_by: str
    requested_at: datetime
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    reason: str = ""

    @field_validator('requested_at', 'approved_at', 'expires_at')
    @classmethod
    def validate_timezone(cls, v):
        """Coerce naive datetimes to UTC."""
        return _as_utc(v)

    @property
    def is_approved(self) -> bool:
        return bool(self.approved_by and self.approved_by.strip())


class IncidentSimulationConfig(FundLaunchBaseConfig):
    """Synthetic market-stress faults applied to the baseline execution plan."""

    enable_latency_spike: bool = False
    latency_spike_multiplier: float = 1.0
    enable_venue_reject_burst: bool = False
    venue_reject_ratio: float = 0.0
    enable_feed_dropout: bool = False
    feed_dropout_ratio: float = 0.0

    @classmethod
    def disabled(cls) -> 'IncidentSimulationConfig':
        return cls()

    @property
    def any_enabled(self) -> bool:
        return self.enable_latency_spike or self.enable_venue_reject_burst or self.enable_feed_dropout

    def normalized(self) -> 'IncidentSimulationConfig':
        """Return a copy with the multiplier floored at 0.25 and ratios in [0, 1]."""
        return IncidentSimulationConfig(
            enable_latency_spike=self.enable_latency_spike,
            latency_spike_multiplier=round6(max(0.25, self.latency_spike_multiplier)),
            enable_venue_reject_burst=self.enable_venue_reject_burst,
            venue_reject_ratio=round6(clamp(self.venue_reject_ratio, 0.0, 1.0)),
            enable_feed_dropout=self.enable_feed_dropout,
            feed_dropout_ratio=round6(clamp(self.feed_dropout_ratio, 0.0, 1.0))
        )


class AgentArenaConfig(FundLaunchBaseConfig):
    """Capital renegotiation between strategy books."""

    enabled: bool = False
    negotiation_rounds: int = 3
    max_shift_per_round: float = 0.05
    min_convergence_score: float = 0.85

    @classmethod
    def disabled(cls) -> 'AgentArenaConfig':
        return cls()

    def normalized(self) -> 'AgentArenaConfig':
        """Return a copy with rounds >= 1 and shift/convergence in their bands."""
        return AgentArenaConfig(
            enabled=self.enabled,
            negotiation_rounds=max(1, self.negotiation_rounds),
            max_shift_per_round=round6(clamp(self.max_shift_per_round, 0.01, 0.25)),
            min_convergence_score=round6(clamp(self.min_convergence_score, 0.50, 0.99))
        )


class FundLaunchScenario(FundLaunchBaseConfig):
    """
    Everything one run consumes.

    When ``strategy_books`` is non-empty the allocator runs in multi-book
    mode and ``current_book`` is ignored.
    """

    signals: List[StrategySignal]
    limits: RiskLimitConfig
    current_book: List[CurrentBookWeight] = Field(default_factory=list)
    strategy_books: List[StrategyBookConfig] = Field(default_factory=list)
    policy_overrides: List[PolicyOverrideRequest] = Field(default_factory=list)
    incident: IncidentSimulationConfig = Field(default_factory=IncidentSimulationConfig.disabled)
    agent_arena: AgentArenaConfig = Field(default_factory=AgentArenaConfig.disabled)
    plugin_registry: StrategyPluginRegistry = Field(default_factory=StrategyPluginRegistry.empty)
    fixed_timestamp: Optional[datetime] = None

    class Config:
        arbitrary_types_allowed = True

    @field_validator('fixed_timestamp')
    @classmethod
    def validate_timezone(cls, v):
        """Coerce a naive timestamp to UTC."""
        return _as_utc(v)

    @property
    def uses_strategy_books(self) -> bool:
        return len(self.strategy_books) > 0
