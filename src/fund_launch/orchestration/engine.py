"""
Fund Launch Engine
==================

Runs the full deterministic pipeline for one scenario:

    limits → policy overrides → plugin INITIALIZE → aggregation
    → plugin COMPOSITE_PUBLISHED → allocation → risk gate → execution plan
    → incident simulation → TCA → feedback loop → agent arena → telemetry
    → plugin RUN_COMPLETED

Each run owns its own event log; nothing is shared between runs, so
several engines or runs may execute side by side.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from .components import (
    AgentArenaEngine, CapitalAllocator, ExecutionPlanner, FeedbackLoopEngine,
    IncidentSimulator, PolicyOverrideEngine, RiskGate, SignalAggregator, TcaAnalyzer,
    TelemetryBuilder
)
from .utils.event_log import RuntimeEventLog
from ..config.scenario import FundLaunchScenario
from ..types.enums import OverrideStatus
from ..types.results import PlatformRunResult, PlatformRunSummary
from ..utils.logging_config import PipelineStageLogger

logger = logging.getLogger(__name__)


def build_run_id(timestamp: datetime) -> str:
    """Run id of the form RUN-YYYYMMDDTHHMMSSZ, from the UTC timestamp."""
    return timestamp.astimezone(timezone.utc).strftime("RUN-%Y%m%dT%H%M%SZ")


class FundLaunchEngine:
    """
    Pipeline orchestrator.

    Components are stateless and may be swapped for testing; defaults are
    created when not supplied.
    """

    def __init__(self,
                 aggregator: Optional[SignalAggregator] = None,
                 allocator: Optional[CapitalAllocator] = None,
                 risk_gate: Optional[RiskGate] = None,
                 planner: Optional[ExecutionPlanner] = None,
                 override_engine: Optional[PolicyOverrideEngine] = None,
                 incident_simulator: Optional[IncidentSimulator] = None,
                 tca_analyzer: Optional[TcaAnalyzer] = None,
                 feedback_engine: Optional[FeedbackLoopEngine] = None,
                 arena_engine: Optional[AgentArenaEngine] = None,
                 telemetry_builder: Optional[TelemetryBuilder] = None):
        self.aggregator = aggregator or SignalAggregator()
        self.allocator = allocator or CapitalAllocator(self.aggregator)
        self.risk_gate = risk_gate or RiskGate()
        self.planner = planner or ExecutionPlanner()
        self.override_engine = override_engine or PolicyOverrideEngine()
        self.incident_simulator = incident_simulator or IncidentSimulator()
        self.tca_analyzer = tca_analyzer or TcaAnalyzer()
        self.feedback_engine = feedback_engine or FeedbackLoopEngine()
        self.arena_engine = arena_engine or AgentArenaEngine()
        self.telemetry_builder = telemetry_builder or TelemetryBuilder()
        self.stage_logger = PipelineStageLogger(__name__)

    def run(self, scenario: FundLaunchScenario) -> PlatformRunResult:
        """
        Execute the pipeline.

        Args:
            scenario: Validated scenario

        Returns:
            PlatformRunResult with every stage output and the event log

        Raises:
            ConfigValidationError: If limits, overrides or strategy books are
                invalid; raised before any stage output is produced
        """
        timestamp = scenario.fixed_timestamp or datetime.now(timezone.utc)
        run_id = build_run_id(timestamp)
        stages = self.stage_logger
        event_log = RuntimeEventLog()
        stages.stage_started("run", run_id, {
            'signals': len(scenario.signals),
            'books': len(scenario.strategy_books)
        })

        scenario.limits.validate_limits()
        if scenario.uses_strategy_books:
            self.allocator.validate_books(scenario.strategy_books)

        overrides = self.override_engine.apply(scenario.limits, scenario.policy_overrides, timestamp)
        limits = overrides.effective_limits
        stages.stage_completed("policy_overrides", run_id, {
            'requests': len(overrides.audit_trail),
            'applied': overrides.count(OverrideStatus.APPLIED)
        })

        registry = scenario.plugin_registry
        initialized = registry.execute_initialize(scenario.signals, timestamp, run_id)
        lifecycle = list(initialized.events)
        stages.stage_completed("plugin_initialize", run_id, {'signals': len(initialized.signals)})

        signals = self.aggregator.build(initialized.signals)
        lifecycle.extend(registry.execute_composite_published(signals, timestamp, run_id))
        stages.stage_completed("aggregation", run_id, {'symbols': len(signals)})

        if scenario.uses_strategy_books:
            books_result = self.allocator.allocate_books(initialized.signals, scenario.strategy_books, limits)
            allocations = books_result.portfolio_allocations
            book_summaries = books_result.book_summaries
        else:
            allocations = self.allocator.allocate(signals, scenario.current_book, limits)
            book_summaries = (self.allocator.summarize_single_book(allocations),)
        stages.stage_completed("allocation", run_id, {
            'allocations': len(allocations),
            'books': len(book_summaries)
        })

        risk = self.risk_gate.evaluate(allocations, limits)
        if not risk.approved:
            stages.stage_warning("risk_gate", run_id, f"Risk gate rejected: {risk.detail}")
        stages.stage_completed("risk_gate", run_id, {'approved': risk.approved})

        intents = self.planner.build(allocations, risk, limits)
        stages.stage_completed("execution_planning", run_id, {'intents': len(intents)})

        incident = self.incident_simulator.run(signals, intents, scenario.incident, timestamp, event_log)
        stages.stage_completed("incident_simulation", run_id, {
            'regime': incident.regime.regime.value,
            'faults': len(incident.active_faults)
        })

        tca = self.tca_analyzer.analyze(intents, incident.adjusted_intents, incident, timestamp, event_log)
        stages.stage_completed("tca", run_id, {'fills': len(tca.fill_metrics)})

        feedback = self.feedback_engine.build_recommendations(tca, risk, incident, timestamp, event_log)
        stages.stage_completed("feedback_loop", run_id, {
            'recommendations': feedback.summary.recommendation_count
        })

        arena = self.arena_engine.run(book_summaries, tca, feedback, incident, risk,
                                      scenario.agent_arena, timestamp, event_log)
        stages.stage_completed("agent_arena", run_id, {'state': arena.summary.policy_state.value})

        telemetry = self.telemetry_builder.build(allocations, risk, intents, incident)

        result = PlatformRunResult(
            timestamp=timestamp,
            run_id=run_id,
            effective_limits=limits,
            signals=signals,
            allocations=allocations,
            strategy_books=book_summaries,
            risk=risk,
            execution_intents=intents,
            incident=incident,
            tca=tca,
            feedback=feedback,
            agent_arena=arena,
            telemetry=telemetry,
            policy_audit=overrides.audit_trail,
            plugin_lifecycle=tuple(lifecycle),
            runtime_events=event_log.snapshot()
        )

        lifecycle.extend(registry.execute_run_completed(result, timestamp, run_id))
        result = replace(result, plugin_lifecycle=tuple(lifecycle))
        stages.stage_completed("run", run_id, {
            'control_state': telemetry.control_state.value,
            'events': len(result.runtime_events)
        })
        return result

    @staticmethod
    def build_summary(run: PlatformRunResult) -> PlatformRunSummary:
        """Flatten a run result into headline counts and values."""
        top_signal = min(run.signals, key=lambda s: (-abs(s.composite_score), s.symbol), default=None)
        audit = run.policy_audit

        return PlatformRunSummary(
            run_id=run.run_id,
            signal_symbol_count=len(run.signals),
            allocation_count=len(run.allocations),
            strategy_book_count=len(run.strategy_books),
            risk_approved=run.risk.approved,
            breach_count=len(run.risk.breaches),
            execution_intent_count=len(run.execution_intents),
            gross_exposure=run.risk.gross_exposure,
            net_exposure=run.risk.net_exposure,
            turnover=run.risk.turnover,
            total_execution_notional=run.total_execution_notional,
            top_signal_symbol=top_signal.symbol if top_signal else "(none)",
            top_signal_score=top_signal.composite_score if top_signal else 0.0,
            fleet_health_score=run.telemetry.fleet_health_score,
            control_state=run.telemetry.control_state.value,
            applied_override_count=sum(1 for a in audit if a.status == OverrideStatus.APPLIED),
            pending_override_count=sum(1 for a in audit if a.status == OverrideStatus.PENDING_APPROVAL),
            plugin_lifecycle_event_count=len(run.plugin_lifecycle),
            incident_timeline_event_count=len(run.incident.timeline),
            replay_frame_count=len(run.incident.replay_frames),
            active_fault_count=len(run.incident.active_faults),
            rejected_notional=run.incident.rejected_notional,
            added_latency_ms=run.incident.added_latency_ms,
            tca_avg_fill_rate=run.tca.summary.avg_fill_rate,
            tca_avg_slippage_bps=run.tca.summary.avg_slippage_bps,
            tca_total_estimated_cost=run.tca.summary.total_estimated_cost,
            feedback_recommendation_count=run.feedback.summary.recommendation_count,
            feedback_policy_state=run.feedback.summary.policy_state.value,
            agent_arena_rounds=run.agent_arena.summary.rounds_executed,
            agent_arena_agents=run.agent_arena.summary.participating_agents,
            agent_arena_convergence_score=run.agent_arena.summary.convergence_score,
            agent_arena_policy_state=run.agent_arena.summary.policy_state.value,
            runtime_event_count=len(run.runtime_events)
        )
