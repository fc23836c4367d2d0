"""
Governance Types

Policy override audit records, routing-policy recommendations and the
agent arena ledger.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .enums import (
    ArenaDecision, ArenaPolicyState, FeedbackPolicyState, GuardrailDecision,
    OverrideStatus, Priority
)


@dataclass(frozen=True)
class PolicyOverrideAuditEntry:
    """Audit outcome of one override request."""
    policy_key: str
    requested_value: float
    prior_value: Optional[float]
    applied_value: Optional[float]
    status: OverrideStatus
    reason: str
    requested_by: str
    approved_by: Optional[str]
    requested_at: datetime
    approved_at: Optional[datetime]
    evaluated_at: datetime


@dataclass(frozen=True)
class RoutingPolicyRecommendation:
    """Proposed route change for one ``symbol:book_id`` scope."""
    scope: str
    current_route: str
    proposed_route: str
    priority: Priority
    confidence: float
    rationale: str
    guardrail_decision: GuardrailDecision
    guardrail_reason: str


@dataclass(frozen=True)
class FeedbackLoopSummary:
    recommendation_count: int
    approved_count: int
    blocked_count: int
    monitor_count: int
    policy_state: FeedbackPolicyState


@dataclass(frozen=True)
class FeedbackLoopResult:
    recommendations: Tuple[RoutingPolicyRecommendation, ...]
    summary: FeedbackLoopSummary


@dataclass(frozen=True)
class AgentArenaBid:
    """One agent's request and grant in one negotiation round."""
    round: int
    agent_id: str
    prior_capital_share: float
    requested_capital_share: float
    granted_capital_share: float
    utility_score: float
    confidence: float
    decision: ArenaDecision
    rationale: str


@dataclass(frozen=True)
class AgentArenaBookOutcome:
    agent_id: str
    start_capital_share: float
    final_capital_share: float
    net_shift: float
    avg_utility_score: float


@dataclass(frozen=True)
class AgentArenaSummary:
    enabled: bool
    rounds_executed: int
    participating_agents: int
    convergence_score: float
    policy_state: ArenaPolicyState


@dataclass(frozen=True)
class AgentArenaResult:
    bids: Tuple[AgentArenaBid, ...]
    outcomes: Tuple[AgentArenaBookOutcome, ...]
    summary: AgentArenaSummary
