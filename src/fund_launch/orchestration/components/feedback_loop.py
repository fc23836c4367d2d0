"""
Feedback Loop Engine - Routing Policy Recommendations

Turns low-quality fills into routing-policy recommendations, one per
``symbol:book_id`` scope, gated by guardrails on risk state, regime and
active faults.
"""

import logging
from datetime import datetime
from typing import Dict, List

from ..utils.event_log import RuntimeEventLog
from ...types.enums import (
    FaultType, FeedbackPolicyState, GuardrailDecision, Priority, QualityBand, Regime, Route
)
from ...types.execution import IncidentSimulationResult, TcaAnalysisResult, TcaFillMetric
from ...types.governance import FeedbackLoopResult, FeedbackLoopSummary, RoutingPolicyRecommendation
from ...types.portfolio import RiskDecision
from ...utils.numeric import clamp, round4

logger = logging.getLogger(__name__)

CANDIDATE_BANDS = (QualityBand.DEGRADED, QualityBand.POOR, QualityBand.BLOCKED)

POOR_ROUTE_PROPOSALS = {
    Route.REJECTED_BY_VENUE: Route.INTERNAL_CROSS_FAILOVER,
    Route.CANCELLED_FEED_GAP: Route.SAFE_PASSIVE,
    Route.LIT_SMART: Route.INTERNAL_CROSS,
}
DEGRADED_ROUTE_PROPOSALS = {
    Route.LIT_SMART_FAILOVER: Route.INTERNAL_CROSS_FAILOVER,
    Route.LIT_SMART: Route.INTERNAL_CROSS,
    Route.INTERNAL_CROSS_FAILOVER: Route.SAFE_PASSIVE,
    Route.INTERNAL_CROSS: Route.SAFE_PASSIVE,
}

BAND_CONFIDENCE_BASE = {
    QualityBand.BLOCKED: 0.86,
    QualityBand.POOR: 0.79,
    QualityBand.DEGRADED: 0.65,
}
DEFAULT_CONFIDENCE_BASE = 0.55

NO_ACTION_RECOMMENDATION = RoutingPolicyRecommendation(
    scope="GLOBAL",
    current_route="UNCHANGED",
    proposed_route="UNCHANGED",
    priority=Priority.LOW,
    confidence=0.58,
    rationale="No low-quality fills detected in current replay window.",
    guardrail_decision=GuardrailDecision.MONITOR,
    guardrail_reason="Observe additional cycles before tuning."
)


def propose_route(metric: TcaFillMetric) -> Route:
    if metric.quality_band in (QualityBand.POOR, QualityBand.BLOCKED):
        return POOR_ROUTE_PROPOSALS.get(metric.route, Route.SAFE_PASSIVE)
    if metric.route == Route.SAFE_PASSIVE:
        return Route.INTERNAL_CROSS if metric.fill_rate < 0.70 else Route.SAFE_PASSIVE
    return DEGRADED_ROUTE_PROPOSALS.get(metric.route, Route.SAFE_PASSIVE)


def select_priority(band: QualityBand, fill_rate: float) -> Priority:
    if band.is_poor or fill_rate < 0.55:
        return Priority.HIGH
    if band == QualityBand.DEGRADED:
        return Priority.MEDIUM
    return Priority.LOW


def select_confidence(band: QualityBand, fill_rate: float, slippage_bps: float) -> float:
    base = BAND_CONFIDENCE_BASE.get(band, DEFAULT_CONFIDENCE_BASE)
    fill_penalty = (1.0 - clamp(fill_rate, 0.0, 1.0)) * 0.22
    slippage_boost = min(0.10, slippage_bps / 200.0)
    return round4(clamp(base + fill_penalty + slippage_boost, 0.45, 0.98))


class FeedbackLoopEngine:
    """Builds guardrailed routing-policy recommendations from TCA results."""

    def build_recommendations(self, tca: TcaAnalysisResult, risk: RiskDecision,
                              incident: IncidentSimulationResult, timestamp: datetime,
                              event_log: RuntimeEventLog) -> FeedbackLoopResult:
        """
        Build recommendations.

        Args:
            tca: TCA result
            risk: Risk decision of the run
            incident: Incident result (regime and active faults)
            timestamp: Run timestamp
            event_log: Run-owned event log

        Returns:
            FeedbackLoopResult; never empty, a MONITOR no-action
            recommendation stands in when no fill qualifies
        """
        best_by_scope: Dict[str, RoutingPolicyRecommendation] = {}
        for metric in tca.fill_metrics:
            if metric.quality_band not in CANDIDATE_BANDS:
                continue
            candidate = self._build_recommendation(metric, risk, incident)
            current = best_by_scope.get(candidate.scope)
            if current is None or self._rank(candidate) > self._rank(current):
                best_by_scope[candidate.scope] = candidate

        recommendations: List[RoutingPolicyRecommendation] = sorted(
            best_by_scope.values(), key=lambda r: (-r.priority.rank, r.scope)
        )
        if not recommendations:
            recommendations = [NO_ACTION_RECOMMENDATION]

        summary = self._summarize(recommendations)
        event_log.publish(
            "FEEDBACK_READY", "FEEDBACK_LOOP_ENGINE",
            f"Recommendations={summary.recommendation_count}, approved={summary.approved_count}, "
            f"blocked={summary.blocked_count}.",
            summary.recommendation_count, timestamp
        )
        logger.info(f"Feedback loop: {summary.recommendation_count} recommendations, "
                    f"state={summary.policy_state.value}")

        return FeedbackLoopResult(recommendations=tuple(recommendations), summary=summary)

    @staticmethod
    def _rank(recommendation: RoutingPolicyRecommendation):
        return recommendation.priority.rank, recommendation.confidence

    @staticmethod
    def _build_recommendation(metric: TcaFillMetric, risk: RiskDecision,
                              incident: IncidentSimulationResult) -> RoutingPolicyRecommendation:
        proposed = propose_route(metric)

        if not risk.approved:
            decision, reason = GuardrailDecision.BLOCKED, "Risk gate is not approved."
        elif incident.regime.regime == Regime.STRESS and proposed == Route.LIT_SMART:
            decision, reason = GuardrailDecision.BLOCKED, "Stress regime blocks lit expansion."
        elif incident.has_fault(FaultType.VENUE_REJECT_BURST) and proposed.is_lit:
            decision, reason = GuardrailDecision.BLOCKED, "Venue reject burst active for lit routing."
        elif metric.quality_band == QualityBand.DEGRADED:
            decision, reason = GuardrailDecision.MONITOR, "Require one more cycle before route switch."
        else:
            decision, reason = GuardrailDecision.APPROVED, "Within guardrails."

        return RoutingPolicyRecommendation(
            scope=f"{metric.symbol}:{metric.book_id}",
            current_route=metric.route.value,
            proposed_route=proposed.value,
            priority=select_priority(metric.quality_band, metric.fill_rate),
            confidence=select_confidence(metric.quality_band, metric.fill_rate, metric.slippage_bps),
            rationale=(f"FillRate={metric.fill_rate:.3f}, Slippage={metric.slippage_bps:.2f}bps, "
                       f"Quality={metric.quality_band.value}."),
            guardrail_decision=decision,
            guardrail_reason=reason
        )

    @staticmethod
    def _summarize(recommendations: List[RoutingPolicyRecommendation]) -> FeedbackLoopSummary:
        def count(decision: GuardrailDecision) -> int:
            return sum(1 for r in recommendations if r.guardrail_decision == decision)

        approved = count(GuardrailDecision.APPROVED)
        blocked = count(GuardrailDecision.BLOCKED)
        if approved > 0:
            state = FeedbackPolicyState.ACTIVE_TUNING
        elif blocked > 0:
            state = FeedbackPolicyState.GUARDRAILED_ONLY
        else:
            state = FeedbackPolicyState.OBSERVE_ONLY

        return FeedbackLoopSummary(
            recommendation_count=len(recommendations),
            approved_count=approved,
            blocked_count=blocked,
            monitor_count=count(GuardrailDecision.MONITOR),
            policy_state=state
        )
