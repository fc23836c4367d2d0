"""
Run Result Types

The immutable aggregate returned by a pipeline run and the flat summary
derived from it. Reporting and export code formats these values; it never
recomputes them.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Tuple

from .execution import ExecutionIntent, IncidentSimulationResult, TcaAnalysisResult
from .governance import AgentArenaResult, FeedbackLoopResult, PolicyOverrideAuditEntry
from .portfolio import AllocationDraft, RiskDecision, StrategyBookAllocationSummary
from .runtime import PlatformTelemetry, RuntimeEvent, StrategyPluginLifecycleEvent
from .signals import CompositeSignal

if TYPE_CHECKING:
    from ..config.risk import RiskLimitConfig


@dataclass(frozen=True)
class PlatformRunResult:
    """Every stage output of one run, plus its audit trail."""
    timestamp: datetime
    run_id: str
    effective_limits: 'RiskLimitConfig'
    signals: Tuple[CompositeSignal, ...]
    allocations: Tuple[AllocationDraft, ...]
    strategy_books: Tuple[StrategyBookAllocationSummary, ...]
    risk: RiskDecision
    execution_intents: Tuple[ExecutionIntent, ...]
    incident: IncidentSimulationResult
    tca: TcaAnalysisResult
    feedback: FeedbackLoopResult
    agent_arena: AgentArenaResult
    telemetry: PlatformTelemetry
    policy_audit: Tuple[PolicyOverrideAuditEntry, ...]
    plugin_lifecycle: Tuple[StrategyPluginLifecycleEvent, ...]
    runtime_events: Tuple[RuntimeEvent, ...]

    @property
    def total_execution_notional(self) -> float:
        return sum(intent.notional for intent in self.execution_intents)


@dataclass(frozen=True)
class PlatformRunSummary:
    """Headline counts and values for one run."""
    run_id: str
    signal_symbol_count: int
    allocation_count: int
    strategy_book_count: int
    risk_approved: bool
    breach_count: int
    execution_intent_count: int
    gross_exposure: float
    net_exposure: float
    turnover: float
    total_execution_notional: float
    top_signal_symbol: str
    top_signal_score: float
    fleet_health_score: float
    control_state: str
    applied_override_count: int
    pending_override_count: int
    plugin_lifecycle_event_count: int
    incident_timeline_event_count: int
    replay_frame_count: int
    active_fault_count: int
    rejected_notional: float
    added_latency_ms: float
    tca_avg_fill_rate: float
    tca_avg_slippage_bps: float
    tca_total_estimated_cost: float
    feedback_recommendation_count: int
    feedback_policy_state: str
    agent_arena_rounds: int
    agent_arena_agents: int
    agent_arena_convergence_score: float
    agent_arena_policy_state: str
    runtime_event_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
