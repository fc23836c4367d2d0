"""
Incident Simulator - Synthetic Market Stress

Selects a market regime from composite signal strength and applies the
configured faults to the baseline execution plan, in fixed order:

    latency spike → venue reject burst → feed dropout

The adjusted plan keeps the baseline ordering, so baseline and adjusted
intents pair up positionally in the replay and in TCA.
"""

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, ROUND_FLOOR
from typing import List, Sequence, Tuple

from ..utils.event_log import RuntimeEventLog
from ...config.scenario import IncidentSimulationConfig
from ...types.enums import FaultType, Regime, ReplayOutcome, Route, Urgency
from ...types.execution import (
    ExecutionIntent, IncidentReplayFrame, IncidentSimulationResult, MarketRegimeSnapshot
)
from ...types.signals import CompositeSignal
from ...utils.numeric import clamp, round6

logger = logging.getLogger(__name__)

STRESS_SCORE_THRESHOLD = 0.80
VOLATILE_SCORE_THRESHOLD = 0.45

REGIME_PROFILES = {
    Regime.STRESS: MarketRegimeSnapshot(Regime.STRESS, 1.65, 0.62, 19.5),
    Regime.VOLATILE: MarketRegimeSnapshot(Regime.VOLATILE, 1.30, 0.78, 11.2),
    Regime.CALM: MarketRegimeSnapshot(Regime.CALM, 1.05, 1.00, 5.1),
}


def select_regime(signals: Sequence[CompositeSignal]) -> MarketRegimeSnapshot:
    """Pick the regime from the average absolute composite score."""
    avg_abs_score = (sum(abs(s.composite_score) for s in signals) / len(signals)) if signals else 0.0
    if avg_abs_score >= STRESS_SCORE_THRESHOLD:
        return REGIME_PROFILES[Regime.STRESS]
    if avg_abs_score >= VOLATILE_SCORE_THRESHOLD:
        return REGIME_PROFILES[Regime.VOLATILE]
    return REGIME_PROFILES[Regime.CALM]


def affected_count(total: int, ratio: float) -> int:
    """Number of intents a fault touches: at least one, at most all."""
    if total <= 0 or ratio <= 0:
        return 0
    touched = int((Decimal(total) * Decimal(repr(float(ratio)))).to_integral_value(rounding=ROUND_FLOOR))
    return min(total, max(1, touched))


class IncidentSimulator:
    """
    Applies incident faults to a baseline execution plan.

    Every mutation publishes a runtime event; regime selection and replay
    completion are published even when no fault is enabled.
    """

    def run(self, signals: Sequence[CompositeSignal],
            baseline_intents: Sequence[ExecutionIntent],
            config: IncidentSimulationConfig,
            timestamp: datetime,
            event_log: RuntimeEventLog) -> IncidentSimulationResult:
        """
        Simulate incidents.

        Args:
            signals: Composite signals used for regime selection
            baseline_intents: Planned execution intents
            config: Incident configuration (use IncidentSimulationConfig.disabled() for none)
            timestamp: Run timestamp
            event_log: Run-owned event log

        Returns:
            IncidentSimulationResult
        """
        config = config.normalized()
        regime = select_regime(signals)
        event_log.publish(
            "REGIME_SELECTED", "MARKET_REGIME_SIMULATOR",
            f"{regime.regime.value} regime selected. Spread={regime.spread_bps:.1f}bps",
            regime.volatility_multiplier, timestamp
        )

        adjusted: List[ExecutionIntent] = list(baseline_intents)
        active_faults: List[FaultType] = []
        rejected_notional = 0.0
        added_latency_ms = round6(4.0 * regime.volatility_multiplier)

        if config.enable_latency_spike and adjusted:
            active_faults.append(FaultType.LATENCY_SPIKE)
            added_latency_ms += self._inject_latency_spike(adjusted, config, timestamp, event_log)

        if config.enable_venue_reject_burst and adjusted:
            active_faults.append(FaultType.VENUE_REJECT_BURST)
            rejected_notional += self._inject_venue_rejects(adjusted, config, timestamp, event_log)

        if config.enable_feed_dropout and adjusted:
            active_faults.append(FaultType.FEED_DROPOUT)
            self._inject_feed_dropout(adjusted, config, timestamp, event_log)

        frames = self.build_replay_frames(baseline_intents, adjusted)
        event_log.publish(
            "REPLAY_READY", "INCIDENT_SIMULATOR",
            f"Replay frames ready: {len(frames)}.", len(frames), timestamp
        )

        faults = tuple(sorted(set(active_faults), key=lambda f: f.value))
        logger.info(
            f"Incident simulation: regime={regime.regime.value}, "
            f"faults={[f.value for f in faults]}, frames={len(frames)}"
        )

        return IncidentSimulationResult(
            regime=regime,
            timeline=event_log.snapshot(),
            active_faults=faults,
            adjusted_intents=tuple(adjusted),
            replay_frames=frames,
            rejected_notional=round6(rejected_notional),
            added_latency_ms=round6(added_latency_ms)
        )

    def _inject_latency_spike(self, intents: List[ExecutionIntent], config: IncidentSimulationConfig,
                              timestamp: datetime, event_log: RuntimeEventLog) -> float:
        multiplier = config.latency_spike_multiplier
        added = round6((10 + len(intents)) * max(1.0, multiplier))
        event_log.publish(
            "FAULT_INJECTED", "INCIDENT_SIMULATOR",
            f"Latency spike injected (x{multiplier:.2f}).", multiplier, timestamp
        )

        for index, intent in enumerate(intents):
            if intent.route == Route.REJECTED_BY_VENUE:
                continue
            if intent.urgency == Urgency.HIGH:
                intents[index] = replace(intent, route=Route.LIT_SMART_FAILOVER)
            elif intent.urgency == Urgency.MEDIUM:
                intents[index] = replace(intent, route=Route.INTERNAL_CROSS_FAILOVER)
        return added

    def _inject_venue_rejects(self, intents: List[ExecutionIntent], config: IncidentSimulationConfig,
                              timestamp: datetime, event_log: RuntimeEventLog) -> float:
        count = affected_count(len(intents), config.venue_reject_ratio)
        ranked = sorted(range(len(intents)), key=lambda i: (-intents[i].notional, intents[i].symbol))

        rejected = 0.0
        for index in ranked[:count]:
            prior = intents[index]
            if prior.notional <= 0:
                continue
            rejected += prior.notional
            intents[index] = replace(prior, notional=0.0, route=Route.REJECTED_BY_VENUE,
                                     urgency=Urgency.BLOCKED)
            event_log.publish(
                "ORDER_REJECTED", "VENUE_ADAPTER",
                f"{prior.symbol} rejected by venue burst protection.", prior.notional, timestamp
            )
        return rejected

    def _inject_feed_dropout(self, intents: List[ExecutionIntent], config: IncidentSimulationConfig,
                             timestamp: datetime, event_log: RuntimeEventLog) -> None:
        ratio = config.feed_dropout_ratio
        count = affected_count(len(intents), ratio)
        ranked = sorted(range(len(intents)), key=lambda i: (intents[i].symbol, intents[i].book_id))

        for index in ranked[:count]:
            prior = intents[index]
            if prior.notional <= 0:
                continue
            trimmed = round6(prior.notional * (1.0 - clamp(ratio, 0.0, 1.0)))
            intents[index] = replace(
                prior,
                notional=max(0.0, trimmed),
                route=Route.CANCELLED_FEED_GAP if trimmed <= 0 else Route.SAFE_PASSIVE,
                urgency=Urgency.LOW
            )
            event_log.publish(
                "FEED_DEGRADED", "MARKET_DATA_GATEWAY",
                f"{prior.symbol} downgraded due to feed dropout.", ratio, timestamp
            )

    @staticmethod
    def build_replay_frames(baseline: Sequence[ExecutionIntent],
                            adjusted: Sequence[ExecutionIntent]) -> Tuple[IncidentReplayFrame, ...]:
        """Pair baseline and adjusted intents positionally into replay frames."""
        frames = []
        for step, (before, after) in enumerate(zip(baseline, adjusted), start=1):
            if after.notional <= 0 < before.notional:
                outcome = ReplayOutcome.REJECTED
            elif after.notional < before.notional:
                outcome = ReplayOutcome.THROTTLED
            elif before.route != after.route:
                outcome = ReplayOutcome.REROUTED
            else:
                outcome = ReplayOutcome.UNCHANGED

            frames.append(IncidentReplayFrame(
                step=step,
                symbol=before.symbol,
                baseline_notional=before.notional,
                adjusted_notional=after.notional,
                baseline_route=before.route,
                adjusted_route=after.route,
                outcome=outcome
            ))
        return tuple(frames)
