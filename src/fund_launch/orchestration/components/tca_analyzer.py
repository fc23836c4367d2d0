"""
TCA Analyzer - Transaction Cost Analysis

Scores realized-vs-intended fills for each baseline/adjusted intent pair and
aggregates them per route.

Slippage model (bps):
    route base + urgency adjustment + (1 - fill rate) × 8 + volatility × 2.25
"""

import logging
from datetime import datetime
from typing import Sequence, Tuple

import pandas as pd

from ..utils.event_log import RuntimeEventLog
from ...types.enums import QualityBand, Route, Urgency
from ...types.execution import (
    ExecutionIntent, IncidentSimulationResult, MarketRegimeSnapshot, TcaAnalysisResult,
    TcaFillMetric, TcaRouteSummary, TcaSummary
)
from ...utils.numeric import clamp, round6

logger = logging.getLogger(__name__)

ROUTE_BASE_BPS = {
    Route.INTERNAL_CROSS: 3.8,
    Route.SAFE_PASSIVE: 4.2,
    Route.LIT_SMART: 6.3,
    Route.INTERNAL_CROSS_FAILOVER: 7.1,
    Route.LIT_SMART_FAILOVER: 9.6,
    Route.REJECTED_BY_VENUE: 42.0,
    Route.CANCELLED_FEED_GAP: 31.0,
}
DEFAULT_ROUTE_BASE_BPS = 8.2

URGENCY_ADJUSTMENT_BPS = {
    Urgency.HIGH: 1.6,
    Urgency.MEDIUM: 0.9,
    Urgency.BLOCKED: 4.0,
}
DEFAULT_URGENCY_ADJUSTMENT_BPS = 0.4

# (min fill rate, max slippage bps, band), checked in order
QUALITY_THRESHOLDS = (
    (0.95, 8.0, QualityBand.STRONG),
    (0.85, 12.0, QualityBand.GOOD),
    (0.70, 18.0, QualityBand.DEGRADED),
)


def compute_slippage_bps(route: Route, urgency: Urgency, fill_rate: float,
                         regime: MarketRegimeSnapshot) -> float:
    route_base = ROUTE_BASE_BPS.get(route, DEFAULT_ROUTE_BASE_BPS)
    urgency_adj = URGENCY_ADJUSTMENT_BPS.get(urgency, DEFAULT_URGENCY_ADJUSTMENT_BPS)
    fill_penalty = (1.0 - clamp(fill_rate, 0.0, 1.0)) * 8.0
    volatility_adj = regime.volatility_multiplier * 2.25
    return round6(route_base + urgency_adj + fill_penalty + volatility_adj)


def determine_quality_band(fill_rate: float, slippage_bps: float,
                           executed_notional: float) -> QualityBand:
    if executed_notional <= 0:
        return QualityBand.BLOCKED
    for min_fill, max_slippage, band in QUALITY_THRESHOLDS:
        if fill_rate >= min_fill and slippage_bps <= max_slippage:
            return band
    return QualityBand.POOR


class TcaAnalyzer:
    """Transaction cost analysis over the incident-adjusted execution plan."""

    def analyze(self, baseline_intents: Sequence[ExecutionIntent],
                executed_intents: Sequence[ExecutionIntent],
                incident: IncidentSimulationResult,
                timestamp: datetime,
                event_log: RuntimeEventLog) -> TcaAnalysisResult:
        """
        Analyze fills.

        Args:
            baseline_intents: Planned intents
            executed_intents: Incident-adjusted intents, same ordering
            incident: Incident result providing the regime
            timestamp: Run timestamp
            event_log: Run-owned event log

        Returns:
            TcaAnalysisResult with per-intent metrics, route summaries and totals
        """
        metrics = []
        for baseline, executed in zip(baseline_intents, executed_intents):
            intended = max(0.0, baseline.notional)
            actual = max(0.0, executed.notional)
            fill_rate = 0.0 if intended <= 0 else round6(actual / intended)
            slippage = compute_slippage_bps(executed.route, executed.urgency, fill_rate, incident.regime)

            metrics.append(TcaFillMetric(
                symbol=baseline.symbol,
                book_id=baseline.book_id,
                route=executed.route,
                intended_notional=intended,
                executed_notional=actual,
                fill_rate=fill_rate,
                slippage_bps=slippage,
                estimated_cost=round6(actual * (slippage / 10000.0)),
                quality_band=determine_quality_band(fill_rate, slippage, actual)
            ))

        route_summaries = self.summarize_routes(metrics)
        summary = self._summarize(metrics)

        event_log.publish(
            "TCA_ANALYSIS_READY", "TCA_ENGINE",
            f"TCA metrics ready: {len(metrics)} intents, avg fill {summary.avg_fill_rate:.3f}.",
            summary.avg_slippage_bps, timestamp
        )
        logger.info(
            f"TCA: {len(metrics)} fills, avg slippage {summary.avg_slippage_bps:.2f}bps, "
            f"{summary.poor_quality_count} poor"
        )

        return TcaAnalysisResult(
            fill_metrics=tuple(metrics),
            route_summaries=route_summaries,
            summary=summary
        )

    @staticmethod
    def summarize_routes(metrics: Sequence[TcaFillMetric]) -> Tuple[TcaRouteSummary, ...]:
        """Aggregate fill metrics per route, ordered by route name."""
        if not metrics:
            return ()

        frame = pd.DataFrame({
            'route': [m.route.value for m in metrics],
            'fill_rate': [m.fill_rate for m in metrics],
            'slippage_bps': [m.slippage_bps for m in metrics],
            'estimated_cost': [m.estimated_cost for m in metrics],
            'poor': [m.quality_band.is_poor for m in metrics],
        })
        grouped = frame.groupby('route', sort=True).agg(
            intent_count=('fill_rate', 'size'),
            avg_fill_rate=('fill_rate', 'mean'),
            avg_slippage_bps=('slippage_bps', 'mean'),
            total_estimated_cost=('estimated_cost', 'sum'),
            poor_quality_count=('poor', 'sum'),
        )

        return tuple(
            TcaRouteSummary(
                route=Route(route),
                intent_count=int(row.intent_count),
                avg_fill_rate=round6(row.avg_fill_rate),
                avg_slippage_bps=round6(row.avg_slippage_bps),
                total_estimated_cost=round6(row.total_estimated_cost),
                poor_quality_count=int(row.poor_quality_count)
            )
            for route, row in grouped.iterrows()
        )

    @staticmethod
    def _summarize(metrics: Sequence[TcaFillMetric]) -> TcaSummary:
        count = len(metrics)
        return TcaSummary(
            avg_fill_rate=round6(sum(m.fill_rate for m in metrics) / count) if count else 0.0,
            avg_slippage_bps=round6(sum(m.slippage_bps for m in metrics) / count) if count else 0.0,
            total_estimated_cost=round6(sum(m.estimated_cost for m in metrics)),
            poor_quality_count=sum(1 for m in metrics if m.quality_band.is_poor),
            blocked_intent_count=sum(1 for m in metrics if m.quality_band == QualityBand.BLOCKED)
        )
