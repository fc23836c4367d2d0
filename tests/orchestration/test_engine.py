"""
End-to-end tests for the fund launch engine.
"""

import json

import pytest

from fund_launch import FundLaunchEngine, FundLaunchScenario, RiskLimitConfig
from fund_launch.config import StrategyBookConfig
from fund_launch.orchestration import build_run_id
from fund_launch.plugins import StrategyPlugin, StrategyPluginRegistry, create_deterministic_registry
from fund_launch.types import (
    ArenaPolicyState, ControlState, FeedbackPolicyState, HookStatus, OverrideStatus, PluginHook
)
from fund_launch.validation import ConfigValidationError


class FailingObserver(StrategyPlugin):
    def on_initialize(self, strategy_signals, context):
        return None

    def on_run_completed(self, run, context):
        raise RuntimeError("observer offline")


class CountingPlugin(StrategyPlugin):
    def __init__(self, strategy_id):
        super().__init__(strategy_id)
        self.calls = 0

    def on_initialize(self, strategy_signals, context):
        self.calls += 1
        return None


class TestRunId:
    """Test run id derivation."""

    def test_run_id_format(self, fixed_timestamp):
        """Run ids encode the UTC timestamp."""
        assert build_run_id(fixed_timestamp) == "RUN-20260222T120000Z"


class TestSingleBookRun:
    """Test a single-book run with every optional stage disabled."""

    def test_run(self, base_scenario):
        """The deterministic single book is approved and planned."""
        run = FundLaunchEngine().run(base_scenario)

        assert run.run_id == "RUN-20260222T120000Z"
        assert run.timestamp == base_scenario.fixed_timestamp
        assert run.effective_limits == base_scenario.limits
        assert run.risk.approved
        assert [i.symbol for i in run.execution_intents] == ["XOM", "META", "MSFT", "AAPL", "NVDA"]
        assert [b.book_id for b in run.strategy_books] == ["CORE"]
        assert run.incident.active_faults == ()
        assert run.agent_arena.summary.policy_state == ArenaPolicyState.DISABLED
        assert run.telemetry.control_state == ControlState.RUNNING
        assert run.plugin_lifecycle == ()
        assert run.policy_audit == ()

    def test_events(self, base_scenario):
        """Without faults or arena only the core stages publish events."""
        run = FundLaunchEngine().run(base_scenario)
        assert [e.event_type for e in run.runtime_events] == [
            "REGIME_SELECTED", "REPLAY_READY", "TCA_ANALYSIS_READY", "FEEDBACK_READY"
        ]

    def test_summary(self, base_scenario):
        """The summary flattens the headline values."""
        engine = FundLaunchEngine()
        summary = engine.build_summary(engine.run(base_scenario))

        assert summary.signal_symbol_count == 6
        assert summary.allocation_count == 6
        assert summary.strategy_book_count == 1
        assert summary.execution_intent_count == 5
        assert summary.top_signal_symbol == "MSFT"
        assert summary.top_signal_score == 1.0278
        assert summary.feedback_recommendation_count == 1
        assert summary.feedback_policy_state == FeedbackPolicyState.OBSERVE_ONLY.value
        assert summary.control_state == "RUNNING"
        assert summary.runtime_event_count == 4
        assert summary.total_execution_notional == pytest.approx(
            sum(i.notional for i in engine.run(base_scenario).execution_intents), abs=1e-6
        )

    def test_rejected_run(self, base_scenario):
        """A turnover breach blocks execution and halts the arena."""
        limits = base_scenario.limits.with_value('max_turnover', 0.1)
        scenario = base_scenario.model_copy(update={
            'limits': limits,
            'agent_arena': base_scenario.agent_arena.model_copy(update={'enabled': True}),
        })
        run = FundLaunchEngine().run(scenario)

        assert not run.risk.approved
        assert run.execution_intents == ()
        assert run.telemetry.control_state == ControlState.SAFE_MODE
        assert run.agent_arena.summary.policy_state == ArenaPolicyState.HALTED

    def test_invalid_limits_fail_fast(self, base_scenario):
        """Invalid limits raise before any stage runs."""
        bad = RiskLimitConfig.model_construct(**{**base_scenario.limits.model_dump(), 'max_turnover': 0.0})
        scenario = base_scenario.model_copy(update={'limits': bad})
        with pytest.raises(ConfigValidationError):
            FundLaunchEngine().run(scenario)

    def test_empty_scenario(self, risk_limits, fixed_timestamp):
        """No signals and no holdings produce an empty but valid run."""
        run = FundLaunchEngine().run(FundLaunchScenario(signals=[], limits=risk_limits,
                                                        fixed_timestamp=fixed_timestamp))
        summary = FundLaunchEngine.build_summary(run)

        assert run.allocations == ()
        assert run.risk.approved
        assert summary.top_signal_symbol == "(none)"
        assert summary.top_signal_score == 0.0


class TestFullRun:
    """Test a multi-book run with overrides, incidents and the arena."""

    def test_run(self, full_scenario):
        """Every stage contributes to the result."""
        run = FundLaunchEngine().run(full_scenario)

        assert run.effective_limits.max_turnover == 0.75
        assert run.effective_limits.max_gross_exposure == 0.95
        assert [a.status for a in run.policy_audit] == [
            OverrideStatus.APPLIED, OverrideStatus.PENDING_APPROVAL
        ]
        assert [b.book_id for b in run.strategy_books] == ["ALPHA", "DEFENSIVE"]
        assert run.risk.approved
        assert len(run.execution_intents) == 6
        assert run.telemetry.control_state == ControlState.DEGRADED
        assert run.agent_arena.summary.participating_agents == 2
        assert run.agent_arena.summary.rounds_executed == 3
        assert len(run.agent_arena.bids) == 6
        final = sum(o.final_capital_share for o in run.agent_arena.outcomes)
        assert final == pytest.approx(1.0, abs=1e-9)

    def test_zero_book_shares_fail_before_plugins(self, full_scenario):
        """Books with no positive capital share raise before any plugin hook runs."""
        plugin = CountingPlugin("TREND_CORE")
        books = [
            StrategyBookConfig(book_id="alpha", strategy_ids=["TREND_CORE"], capital_share=0.0),
            StrategyBookConfig(book_id="defensive", strategy_ids=["MEAN_REV"], capital_share=-0.5),
        ]
        scenario = full_scenario.model_copy(update={
            'strategy_books': books,
            'plugin_registry': StrategyPluginRegistry([plugin])
        })

        with pytest.raises(ConfigValidationError) as exc_info:
            FundLaunchEngine().run(scenario)
        assert exc_info.value.field_name == "strategy_books.capital_share"
        assert plugin.calls == 0

    def test_event_stream(self, full_scenario):
        """Events are numbered 1..n in publication order."""
        run = FundLaunchEngine().run(full_scenario)

        assert [e.sequence for e in run.runtime_events] == list(range(1, len(run.runtime_events) + 1))
        assert [e.event_type for e in run.runtime_events] == [
            "REGIME_SELECTED", "FAULT_INJECTED", "ORDER_REJECTED", "FEED_DEGRADED", "REPLAY_READY",
            "TCA_ANALYSIS_READY", "FEEDBACK_READY", "AGENT_ARENA_STARTED", "AGENT_ARENA_ROUND",
            "AGENT_ARENA_ROUND", "AGENT_ARENA_ROUND", "AGENT_ARENA_COMPLETED",
        ]
        assert len(run.incident.timeline) == 5

    def test_summary_counts(self, full_scenario):
        """Override, incident and arena counts reach the summary."""
        summary = FundLaunchEngine.build_summary(FundLaunchEngine().run(full_scenario))

        assert summary.applied_override_count == 1
        assert summary.pending_override_count == 1
        assert summary.strategy_book_count == 2
        assert summary.active_fault_count == 3
        assert summary.replay_frame_count == 6
        assert summary.incident_timeline_event_count == 5
        assert summary.agent_arena_agents == 2
        assert summary.runtime_event_count == 12

    def test_deterministic(self, full_scenario):
        """Two runs of the same scenario serialize identically."""
        engine = FundLaunchEngine()
        first, second = engine.run(full_scenario), engine.run(full_scenario)

        assert json.dumps(engine.build_summary(first).to_dict(), sort_keys=True) == \
            json.dumps(engine.build_summary(second).to_dict(), sort_keys=True)
        assert first.agent_arena.bids == second.agent_arena.bids
        assert [e.to_dict() for e in first.runtime_events] == [e.to_dict() for e in second.runtime_events]
        assert first == second

    def test_independent_engines(self, full_scenario):
        """Separate engine instances produce the same result."""
        assert FundLaunchEngine().run(full_scenario) == FundLaunchEngine().run(full_scenario)


class TestPluginRun:
    """Test plugin hooks across a run."""

    def test_deterministic_registry(self, base_scenario):
        """Four plugins each see three hooks."""
        scenario = base_scenario.model_copy(update={'plugin_registry': create_deterministic_registry()})
        run = FundLaunchEngine().run(scenario)

        assert len(run.plugin_lifecycle) == 12
        assert [e.hook for e in run.plugin_lifecycle[-4:]] == [PluginHook.RUN_COMPLETED] * 4
        assert all(e.status == HookStatus.SUCCESS for e in run.plugin_lifecycle)

    def test_plugins_change_signals(self, base_scenario):
        """INITIALIZE transforms reach the composite scores."""
        plain = FundLaunchEngine().run(base_scenario)
        scenario = base_scenario.model_copy(update={'plugin_registry': create_deterministic_registry()})
        plugged = FundLaunchEngine().run(scenario)

        plain_scores = {s.symbol: s.composite_score for s in plain.signals}
        plugged_scores = {s.symbol: s.composite_score for s in plugged.signals}
        assert plugged_scores["META"] == pytest.approx(-0.32 * 0.92 * 0.67, abs=1e-6)
        assert plugged_scores["XOM"] == plain_scores["XOM"]

    def test_failing_observer_does_not_abort(self, base_scenario):
        """A failing RUN_COMPLETED hook is recorded and the run still returns."""
        registry = StrategyPluginRegistry([FailingObserver("TREND_CORE")])
        run = FundLaunchEngine().run(base_scenario.model_copy(update={'plugin_registry': registry}))

        failed = [e for e in run.plugin_lifecycle if e.failed]
        assert len(failed) == 1
        assert failed[0].hook == PluginHook.RUN_COMPLETED
        assert failed[0].detail == "observer offline"
        assert run.risk.approved
