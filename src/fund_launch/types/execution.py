"""
Execution Types

Order intents, incident simulation output and transaction-cost analysis
records. Intents are paired positionally between the baseline plan and the
incident-adjusted plan, so both sequences keep the planner's ordering.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .enums import FaultType, QualityBand, Regime, ReplayOutcome, Route, TradeAction, Urgency
from .portfolio import DEFAULT_BOOK_ID
from .runtime import RuntimeEvent


@dataclass(frozen=True)
class ExecutionIntent:
    """Sized and routed order for one allocation delta."""
    symbol: str
    side: TradeAction
    delta_weight: float
    notional: float
    route: Route
    urgency: Urgency
    book_id: str = DEFAULT_BOOK_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'side': self.side.value,
            'delta_weight': self.delta_weight,
            'notional': self.notional,
            'route': self.route.value,
            'urgency': self.urgency.value,
            'book_id': self.book_id
        }


@dataclass(frozen=True)
class MarketRegimeSnapshot:
    """Regime parameters used by the incident simulator and TCA."""
    regime: Regime
    volatility_multiplier: float
    liquidity_multiplier: float
    spread_bps: float


@dataclass(frozen=True)
class IncidentReplayFrame:
    """One before/after step of the incident replay."""
    step: int
    symbol: str
    baseline_notional: float
    adjusted_notional: float
    baseline_route: Route
    adjusted_route: Route
    outcome: ReplayOutcome


@dataclass(frozen=True)
class IncidentSimulationResult:
    regime: MarketRegimeSnapshot
    timeline: Tuple[RuntimeEvent, ...]
    active_faults: Tuple[FaultType, ...]
    adjusted_intents: Tuple[ExecutionIntent, ...]
    replay_frames: Tuple[IncidentReplayFrame, ...]
    rejected_notional: float
    added_latency_ms: float

    def has_fault(self, fault: FaultType) -> bool:
        return fault in self.active_faults


@dataclass(frozen=True)
class TcaFillMetric:
    """Realized-vs-intended fill quality for one intent pair."""
    symbol: str
    book_id: str
    route: Route
    intended_notional: float
    executed_notional: float
    fill_rate: float
    slippage_bps: float
    estimated_cost: float
    quality_band: QualityBand


@dataclass(frozen=True)
class TcaRouteSummary:
    route: Route
    intent_count: int
    avg_fill_rate: float
    avg_slippage_bps: float
    total_estimated_cost: float
    poor_quality_count: int


@dataclass(frozen=True)
class TcaSummary:
    avg_fill_rate: float
    avg_slippage_bps: float
    total_estimated_cost: float
    poor_quality_count: int
    blocked_intent_count: int


@dataclass(frozen=True)
class TcaAnalysisResult:
    fill_metrics: Tuple[TcaFillMetric, ...]
    route_summaries: Tuple[TcaRouteSummary, ...]
    summary: TcaSummary
