"""
Tests for routing-policy recommendations.
"""

import pytest

from fund_launch.orchestration.components import FeedbackLoopEngine, TcaAnalyzer
from fund_launch.orchestration.components.feedback_loop import (
    NO_ACTION_RECOMMENDATION, propose_route, select_confidence, select_priority
)
from fund_launch.types import (
    FeedbackPolicyState, GuardrailDecision, Priority, QualityBand, RiskDecision, Route,
    TcaAnalysisResult, TcaFillMetric, TcaSummary
)


def metric(symbol, route, fill, slippage, band, book_id="CORE"):
    return TcaFillMetric(symbol, book_id, route, 100000.0, 100000.0 * fill, fill, slippage, 0.0, band)


def tca_of(*metrics):
    return TcaAnalysisResult(fill_metrics=tuple(metrics), route_summaries=(),
                             summary=TcaSummary(0.0, 0.0, 0.0, 0, 0))


@pytest.fixture
def stressed_tca(single_book_plan, stressed_incident, fixed_timestamp, event_log):
    return TcaAnalyzer().analyze(single_book_plan.intents, stressed_incident.adjusted_intents,
                                 stressed_incident, fixed_timestamp, event_log)


class TestRecommendationRules:
    """Test route, priority and confidence selection."""

    @pytest.mark.parametrize("route,band,fill,expected", [
        (Route.REJECTED_BY_VENUE, QualityBand.BLOCKED, 0.0, Route.INTERNAL_CROSS_FAILOVER),
        (Route.CANCELLED_FEED_GAP, QualityBand.BLOCKED, 0.0, Route.SAFE_PASSIVE),
        (Route.LIT_SMART, QualityBand.POOR, 0.6, Route.INTERNAL_CROSS),
        (Route.LIT_SMART_FAILOVER, QualityBand.DEGRADED, 1.0, Route.INTERNAL_CROSS_FAILOVER),
        (Route.INTERNAL_CROSS, QualityBand.DEGRADED, 0.9, Route.SAFE_PASSIVE),
        (Route.SAFE_PASSIVE, QualityBand.DEGRADED, 0.8, Route.SAFE_PASSIVE),
        (Route.SAFE_PASSIVE, QualityBand.DEGRADED, 0.6, Route.INTERNAL_CROSS),
    ])
    def test_propose_route(self, route, band, fill, expected):
        """Proposals depend on band, current route and fill rate."""
        assert propose_route(metric("AAA", route, fill, 10.0, band)) == expected

    def test_priority(self):
        """Poor fills and very low fill rates are high priority."""
        assert select_priority(QualityBand.BLOCKED, 0.0) == Priority.HIGH
        assert select_priority(QualityBand.DEGRADED, 0.5) == Priority.HIGH
        assert select_priority(QualityBand.DEGRADED, 0.8) == Priority.MEDIUM
        assert select_priority(QualityBand.GOOD, 0.9) == Priority.LOW

    def test_confidence_bounded(self):
        """Confidence stays within [0.45, 0.98]."""
        assert select_confidence(QualityBand.BLOCKED, 0.0, 56.925) == 0.98
        assert select_confidence(QualityBand.DEGRADED, 0.8, 9.125) == 0.7396


class TestFeedbackLoopEngine:
    """Test FeedbackLoopEngine.build_recommendations."""

    def test_stressed_recommendations(self, stressed_tca, single_book_plan, stressed_incident,
                                      fixed_timestamp, event_log):
        """Blocked and degraded fills produce one guardrailed recommendation each."""
        result = FeedbackLoopEngine().build_recommendations(
            stressed_tca, single_book_plan.risk, stressed_incident, fixed_timestamp, event_log
        )

        summary = [(r.scope, r.priority, r.proposed_route, r.guardrail_decision)
                   for r in result.recommendations]
        assert summary == [
            ("XOM:CORE", Priority.HIGH, "INTERNAL_CROSS_FAILOVER", GuardrailDecision.APPROVED),
            ("AAPL:CORE", Priority.MEDIUM, "SAFE_PASSIVE", GuardrailDecision.MONITOR),
            ("META:CORE", Priority.MEDIUM, "INTERNAL_CROSS_FAILOVER", GuardrailDecision.MONITOR),
            ("MSFT:CORE", Priority.MEDIUM, "INTERNAL_CROSS_FAILOVER", GuardrailDecision.MONITOR),
        ]
        assert result.recommendations[0].current_route == "REJECTED_BY_VENUE"
        assert result.summary.approved_count == 1
        assert result.summary.monitor_count == 3
        assert result.summary.policy_state == FeedbackPolicyState.ACTIVE_TUNING
        assert event_log.snapshot()[-1].event_type == "FEEDBACK_READY"

    def test_rejected_risk_blocks_everything(self, stressed_tca, stressed_incident, fixed_timestamp, event_log):
        """A rejected risk decision blocks every recommendation."""
        rejected = RiskDecision(False, "REJECTED", "Turnover", 0.0, 0.0, 0.0, ("Turnover",))
        result = FeedbackLoopEngine().build_recommendations(
            stressed_tca, rejected, stressed_incident, fixed_timestamp, event_log
        )

        assert all(r.guardrail_decision == GuardrailDecision.BLOCKED for r in result.recommendations)
        assert result.recommendations[0].guardrail_reason == "Risk gate is not approved."
        assert result.summary.policy_state == FeedbackPolicyState.GUARDRAILED_ONLY

    def test_no_candidates(self, single_book_plan, stressed_incident, fixed_timestamp, event_log):
        """Without low-quality fills a single no-action recommendation is returned."""
        tca = tca_of(metric("AAA", Route.INTERNAL_CROSS, 1.0, 6.0, QualityBand.STRONG))
        result = FeedbackLoopEngine().build_recommendations(
            tca, single_book_plan.risk, stressed_incident, fixed_timestamp, event_log
        )

        assert result.recommendations == (NO_ACTION_RECOMMENDATION,)
        assert result.summary.recommendation_count == 1
        assert result.summary.policy_state == FeedbackPolicyState.OBSERVE_ONLY

    def test_one_recommendation_per_scope(self, single_book_plan, stressed_incident, fixed_timestamp, event_log):
        """Within a scope the highest priority candidate wins; on a tie the first is kept."""
        tca = tca_of(
            metric("AAA", Route.INTERNAL_CROSS, 0.9, 14.0, QualityBand.DEGRADED),
            metric("AAA", Route.LIT_SMART, 0.6, 25.0, QualityBand.POOR),
            metric("BBB", Route.INTERNAL_CROSS, 0.9, 14.0, QualityBand.DEGRADED),
            metric("BBB", Route.LIT_SMART_FAILOVER, 0.9, 14.0, QualityBand.DEGRADED),
            metric("AAA", Route.LIT_SMART, 0.6, 25.0, QualityBand.POOR, book_id="ALPHA"),
        )
        result = FeedbackLoopEngine().build_recommendations(
            tca, single_book_plan.risk, stressed_incident, fixed_timestamp, event_log
        )
        by_scope = {r.scope: r for r in result.recommendations}

        assert sorted(by_scope) == ["AAA:ALPHA", "AAA:CORE", "BBB:CORE"]
        assert by_scope["AAA:CORE"].current_route == "LIT_SMART"
        assert by_scope["BBB:CORE"].current_route == "INTERNAL_CROSS"
        assert [r.scope for r in result.recommendations] == ["AAA:ALPHA", "AAA:CORE", "BBB:CORE"]
