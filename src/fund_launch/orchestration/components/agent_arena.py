"""
Agent Arena Engine - Multi-Agent Capital Renegotiation

Each strategy book acts as an agent bidding for capital share over a fixed
number of rounds, based on its TCA and feedback performance. Each round:

    1. request = max(0.01, prior + clamp(utility bias - risk penalty, ±max shift))
    2. normalize requests to sum to 1
    3. granted = normalize(0.35 × prior + 0.65 × normalized request)

Shares are held in read-only mapping snapshots; every round produces a new
mapping. Normalized shares always sum to exactly 1, with rounding drift
assigned to the alphabetically-first book.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import List, Mapping, Sequence

from ..utils.event_log import RuntimeEventLog
from ...config.scenario import AgentArenaConfig
from ...types.enums import ArenaDecision, ArenaPolicyState, GuardrailDecision
from ...types.execution import IncidentSimulationResult, TcaAnalysisResult
from ...types.governance import (
    AgentArenaBid, AgentArenaBookOutcome, AgentArenaResult, AgentArenaSummary, FeedbackLoopResult
)
from ...types.portfolio import RiskDecision, StrategyBookAllocationSummary
from ...utils.numeric import MATERIALITY_TOLERANCE, clamp, round4, round6

logger = logging.getLogger(__name__)

DEFAULT_AVG_FILL = 0.70
DEFAULT_AVG_SLIPPAGE_BPS = 10.0
MIN_REQUESTED_SHARE = 0.01
PRIOR_BLEND_WEIGHT = 0.35
REQUEST_BLEND_WEIGHT = 0.65


@dataclass(frozen=True)
class AgentPerformanceSnapshot:
    """Per-book performance inputs to a bid."""
    utility_score: float
    utility_bias: float
    risk_penalty: float
    confidence: float
    rationale: str


def normalize_shares(shares: Mapping[str, float]) -> Mapping[str, float]:
    """
    Normalize shares to sum to 1.

    Negative values count as 0; if nothing is positive every book gets an
    equal share. Rounding drift goes to the alphabetically-first book.
    """
    if not shares:
        return MappingProxyType({})

    total = sum(max(0.0, v) for v in shares.values())
    if total <= 0:
        equal = round6(1.0 / len(shares))
        return MappingProxyType({key: equal for key in shares})

    normalized = {key: round6(max(0.0, value) / total) for key, value in shares.items()}
    drift = round6(1.0 - sum(normalized.values()))
    if drift != 0:
        first = min(normalized)
        normalized[first] = round6(normalized[first] + drift)
    return MappingProxyType(normalized)


def compute_convergence(last_round_shift: float, max_shift: float, participants: int) -> float:
    if participants <= 0 or max_shift <= 0:
        return 1.0
    return round6(clamp(1.0 - last_round_shift / (participants * max_shift), 0.0, 1.0))


def decide(prior: float, granted: float) -> ArenaDecision:
    if granted > prior + MATERIALITY_TOLERANCE:
        return ArenaDecision.INCREASE
    if granted < prior - MATERIALITY_TOLERANCE:
        return ArenaDecision.DECREASE
    return ArenaDecision.HOLD


class AgentArenaEngine:
    """Runs the capital negotiation between strategy books."""

    def run(self, strategy_books: Sequence[StrategyBookAllocationSummary],
            tca: TcaAnalysisResult,
            feedback: FeedbackLoopResult,
            incident: IncidentSimulationResult,
            risk: RiskDecision,
            config: AgentArenaConfig,
            timestamp: datetime,
            event_log: RuntimeEventLog) -> AgentArenaResult:
        """
        Run the negotiation.

        Args:
            strategy_books: Book summaries; each book is one agent
            tca: TCA result scoring each book's fills
            feedback: Feedback result; recommendations are attributed to a
                book when their scope ends with ``:<book_id>``
            incident: Incident result (active faults feed the risk penalty)
            risk: Risk decision of the run
            config: Arena configuration (use AgentArenaConfig.disabled() for none)
            timestamp: Run timestamp
            event_log: Run-owned event log

        Returns:
            AgentArenaResult; a DISABLED summary with no bids when the arena
            is disabled or there are no participants
        """
        config = config.normalized()
        participants = sorted(strategy_books, key=lambda b: b.book_id)

        if not config.enabled or not participants:
            logger.info(f"Agent arena disabled ({len(participants)} potential participants)")
            return AgentArenaResult(
                bids=(),
                outcomes=(),
                summary=AgentArenaSummary(
                    enabled=False,
                    rounds_executed=0,
                    participating_agents=len(participants),
                    convergence_score=0.0,
                    policy_state=ArenaPolicyState.DISABLED
                )
            )

        book_ids = [book.book_id for book in participants]
        start_shares = normalize_shares({b.book_id: b.capital_share for b in participants})
        performance = {book_id: self._performance_snapshot(book_id, tca, feedback, incident)
                       for book_id in book_ids}

        event_log.publish(
            "AGENT_ARENA_STARTED", "AGENT_ARENA_ENGINE",
            f"Agent arena started with {len(participants)} participants.",
            len(participants), timestamp
        )

        shares = start_shares
        bids: List[AgentArenaBid] = []
        last_round_shift = 0.0
        max_shift = config.max_shift_per_round

        for round_number in range(1, config.negotiation_rounds + 1):
            requested = {}
            for book_id in book_ids:
                perf = performance[book_id]
                shift = clamp(perf.utility_bias - perf.risk_penalty, -max_shift, max_shift)
                requested[book_id] = round6(max(MIN_REQUESTED_SHARE, shares[book_id] + shift))
            normalized_requested = normalize_shares(requested)

            granted = normalize_shares({
                book_id: round6(shares[book_id] * PRIOR_BLEND_WEIGHT
                                + normalized_requested[book_id] * REQUEST_BLEND_WEIGHT)
                for book_id in book_ids
            })

            last_round_shift = 0.0
            for book_id in book_ids:
                prior = shares[book_id]
                last_round_shift += abs(granted[book_id] - prior)
                perf = performance[book_id]
                bids.append(AgentArenaBid(
                    round=round_number,
                    agent_id=book_id,
                    prior_capital_share=prior,
                    requested_capital_share=normalized_requested[book_id],
                    granted_capital_share=granted[book_id],
                    utility_score=perf.utility_score,
                    confidence=perf.confidence,
                    decision=decide(prior, granted[book_id]),
                    rationale=perf.rationale
                ))

            shares = granted
            event_log.publish(
                "AGENT_ARENA_ROUND", "AGENT_ARENA_ENGINE",
                f"Round {round_number} completed; aggregate shift={round6(last_round_shift):.4f}.",
                round6(last_round_shift), timestamp
            )
            logger.debug(f"Arena round {round_number}: shares={dict(shares)}")

        convergence = compute_convergence(last_round_shift, max_shift, len(participants))
        state = self._resolve_policy_state(risk, feedback, convergence, config.min_convergence_score)

        outcomes = []
        for book_id in book_ids:
            utilities = [b.utility_score for b in bids if b.agent_id == book_id]
            outcomes.append(AgentArenaBookOutcome(
                agent_id=book_id,
                start_capital_share=start_shares[book_id],
                final_capital_share=shares[book_id],
                net_shift=round6(shares[book_id] - start_shares[book_id]),
                avg_utility_score=round6(sum(utilities) / len(utilities)) if utilities else 0.0
            ))

        event_log.publish(
            "AGENT_ARENA_COMPLETED", "AGENT_ARENA_ENGINE",
            f"Agent arena completed with state={state.value}.", convergence, timestamp
        )
        logger.info(f"Agent arena completed: {config.negotiation_rounds} rounds, "
                    f"convergence={convergence:.4f}, state={state.value}")

        return AgentArenaResult(
            bids=tuple(sorted(bids, key=lambda b: (b.round, b.agent_id))),
            outcomes=tuple(outcomes),
            summary=AgentArenaSummary(
                enabled=True,
                rounds_executed=config.negotiation_rounds,
                participating_agents=len(participants),
                convergence_score=convergence,
                policy_state=state
            )
        )

    @staticmethod
    def _performance_snapshot(book_id: str, tca: TcaAnalysisResult, feedback: FeedbackLoopResult,
                              incident: IncidentSimulationResult) -> AgentPerformanceSnapshot:
        key = book_id.upper()
        metrics = [m for m in tca.fill_metrics if m.book_id.upper() == key]
        avg_fill = (sum(m.fill_rate for m in metrics) / len(metrics)) if metrics else DEFAULT_AVG_FILL
        avg_slippage = ((sum(m.slippage_bps for m in metrics) / len(metrics)) if metrics
                        else DEFAULT_AVG_SLIPPAGE_BPS)
        poor = sum(1 for m in metrics if m.quality_band.is_poor)

        # Attribution by scope suffix; a symbol containing ":<book_id>" would also match.
        scoped = [r for r in feedback.recommendations if r.scope.upper().endswith(f":{key}")]
        approved = sum(1 for r in scoped if r.guardrail_decision == GuardrailDecision.APPROVED)
        blocked = sum(1 for r in scoped if r.guardrail_decision == GuardrailDecision.BLOCKED)

        return AgentPerformanceSnapshot(
            utility_score=round6(avg_fill * 100 - avg_slippage * 2.4 - poor * 4
                                 + approved * 3 - blocked * 5),
            utility_bias=round6((avg_fill - 0.72) * 0.18 - (avg_slippage - 10) / 500
                                + approved * 0.02 - blocked * 0.02),
            risk_penalty=round6(len(incident.active_faults) * 0.012 + poor * 0.01),
            confidence=round4(clamp(0.55 + avg_fill * 0.25 - blocked * 0.04, 0.35, 0.98)),
            rationale=(f"Fill={avg_fill:.3f}, Slip={avg_slippage:.2f}bps, Poor={poor}, "
                       f"Approved={approved}, Blocked={blocked}.")
        )

    @staticmethod
    def _resolve_policy_state(risk: RiskDecision, feedback: FeedbackLoopResult,
                              convergence: float, min_convergence: float) -> ArenaPolicyState:
        if not risk.approved:
            return ArenaPolicyState.HALTED
        if feedback.summary.blocked_count > 0:
            return ArenaPolicyState.GUARDRAILED
        if convergence >= min_convergence:
            return ArenaPolicyState.CONVERGED
        if convergence >= min_convergence * 0.75:
            return ArenaPolicyState.STABILIZING
        return ArenaPolicyState.DIVERGENT
