"""
Fund launch data types.

Frozen dataclasses and enums shared by every pipeline stage.
"""

from .enums import (
    TradeAction, Urgency, Route, Regime, FaultType, ReplayOutcome, QualityBand,
    Priority, GuardrailDecision, FeedbackPolicyState, ArenaDecision,
    ArenaPolicyState, OverrideStatus, PluginHook, HookStatus, ControlState
)
from .signals import StrategySignal, CompositeSignal
from .portfolio import (
    DEFAULT_BOOK_ID, MULTI_BOOK_ID, AllocationDraft, StrategyBookAllocationSummary,
    MultiBookAllocationResult, RiskDecision
)
from .runtime import (
    RuntimeEvent, StrategyPluginContext, StrategyPluginLifecycleEvent, PlatformTelemetry
)
from .execution import (
    ExecutionIntent, MarketRegimeSnapshot, IncidentReplayFrame, IncidentSimulationResult,
    TcaFillMetric, TcaRouteSummary, TcaSummary, TcaAnalysisResult
)
from .governance import (
    PolicyOverrideAuditEntry, RoutingPolicyRecommendation, FeedbackLoopSummary,
    FeedbackLoopResult, AgentArenaBid, AgentArenaBookOutcome, AgentArenaSummary,
    AgentArenaResult
)
from .results import PlatformRunResult, PlatformRunSummary

__all__ = [
    # Enums
    'TradeAction', 'Urgency', 'Route', 'Regime', 'FaultType', 'ReplayOutcome',
    'QualityBand', 'Priority', 'GuardrailDecision', 'FeedbackPolicyState',
    'ArenaDecision', 'ArenaPolicyState', 'OverrideStatus', 'PluginHook',
    'HookStatus', 'ControlState',

    # Signals and portfolio
    'StrategySignal', 'CompositeSignal',
    'DEFAULT_BOOK_ID', 'MULTI_BOOK_ID', 'AllocationDraft',
    'StrategyBookAllocationSummary', 'MultiBookAllocationResult', 'RiskDecision',

    # Execution, incident and TCA
    'ExecutionIntent', 'MarketRegimeSnapshot', 'IncidentReplayFrame',
    'IncidentSimulationResult', 'TcaFillMetric', 'TcaRouteSummary', 'TcaSummary',
    'TcaAnalysisResult',

    # Governance
    'PolicyOverrideAuditEntry', 'RoutingPolicyRecommendation', 'FeedbackLoopSummary',
    'FeedbackLoopResult', 'AgentArenaBid', 'AgentArenaBookOutcome',
    'AgentArenaSummary', 'AgentArenaResult',

    # Runtime
    'RuntimeEvent', 'StrategyPluginContext', 'StrategyPluginLifecycleEvent',
    'PlatformTelemetry', 'PlatformRunResult', 'PlatformRunSummary'
]
