"""
Tests for execution intent sizing and routing.
"""

import pytest

from fund_launch.orchestration.components import ExecutionPlanner
from fund_launch.orchestration.components.execution_planner import urgency_for_delta
from fund_launch.types import AllocationDraft, RiskDecision, Route, TradeAction, Urgency


class TestExecutionPlanner:
    """Test ExecutionPlanner.build."""

    def test_deterministic_plan(self, single_book_plan):
        """Intents are sorted by notional and AMZN falls below the minimum order."""
        intents = single_book_plan.intents

        assert [i.symbol for i in intents] == ["XOM", "META", "MSFT", "AAPL", "NVDA"]
        assert [i.urgency for i in intents] == [
            Urgency.HIGH, Urgency.HIGH, Urgency.HIGH, Urgency.MEDIUM, Urgency.LOW
        ]
        assert [i.route for i in intents] == [
            Route.LIT_SMART, Route.LIT_SMART, Route.LIT_SMART, Route.LIT_SMART, Route.INTERNAL_CROSS
        ]
        assert intents[0].notional == pytest.approx(737043, abs=10)
        assert intents[0].side == TradeAction.SELL

    def test_notional_is_delta_times_capital(self, single_book_plan):
        """Notional equals |delta| × capital base."""
        for intent in single_book_plan.intents:
            assert intent.notional == pytest.approx(abs(intent.delta_weight) * 3_000_000, abs=1e-6)
            assert intent.notional >= 15000

    def test_rejected_risk_plans_nothing(self, single_book_plan):
        """No intents are produced when risk is rejected."""
        rejected = RiskDecision(False, "REJECTED", "Turnover", 0.0, 0.0, 0.0, ("Turnover",))
        assert ExecutionPlanner().build(single_book_plan.allocations, rejected, single_book_plan.limits) == ()

    def test_immaterial_deltas_skipped(self, risk_limits):
        """Deltas within the materiality tolerance never become orders."""
        allocations = [AllocationDraft("AAA", 0.1, 0.1000005, 0.0000005, TradeAction.HOLD, "")]
        approved = RiskDecision(True, "APPROVED", "", 0.1, 0.1, 0.0, ())
        assert ExecutionPlanner().build(allocations, approved, risk_limits.with_value('min_order_notional', 0)) == ()

    def test_ties_broken_by_symbol(self, risk_limits):
        """Equal notionals are ordered by symbol."""
        allocations = [
            AllocationDraft("BBB", 0.0, 0.02, 0.02, TradeAction.BUY, ""),
            AllocationDraft("AAA", 0.0, -0.02, -0.02, TradeAction.SELL, ""),
        ]
        approved = RiskDecision(True, "APPROVED", "", 0.04, 0.0, 0.04, ())
        intents = ExecutionPlanner().build(allocations, approved, risk_limits)
        assert [i.symbol for i in intents] == ["AAA", "BBB"]
        assert intents[0].to_dict()['route'] == "INTERNAL_CROSS"

    @pytest.mark.parametrize("delta,expected", [
        (0.10, Urgency.HIGH), (-0.12, Urgency.HIGH), (0.05, Urgency.MEDIUM),
        (-0.0999, Urgency.MEDIUM), (0.0499, Urgency.LOW)
    ])
    def test_urgency_thresholds(self, delta, expected):
        """Urgency is banded on |delta|."""
        assert urgency_for_delta(delta) == expected
