"""
Risk Gate - Atomic Allocation Approval

Checks gross exposure, net exposure, turnover and per-symbol caps. Any
single breach rejects the whole allocation set.
"""

import logging
from typing import Sequence

from ...config.risk import RiskLimitConfig
from ...types.portfolio import AllocationDraft, RiskDecision
from ...utils.numeric import MATERIALITY_TOLERANCE, round6

logger = logging.getLogger(__name__)


class RiskGate:
    """Pure limit check over an allocation set."""

    def evaluate(self, allocations: Sequence[AllocationDraft],
                 limits: RiskLimitConfig) -> RiskDecision:
        """
        Evaluate allocations against limits.

        Args:
            allocations: Allocation drafts
            limits: Risk limits

        Returns:
            RiskDecision, approved only if every check passes
        """
        limits.validate_limits()
        tolerance = MATERIALITY_TOLERANCE

        gross = sum(abs(a.target_weight) for a in allocations)
        net = sum(a.target_weight for a in allocations)
        turnover = sum(abs(a.delta_weight) for a in allocations)

        breaches = []
        if gross > limits.max_gross_exposure + tolerance:
            breaches.append(f"GrossExposure:{gross:.6f}>{limits.max_gross_exposure:.6f}")
        if abs(net) > limits.max_abs_net_exposure + tolerance:
            breaches.append(f"NetExposure:{abs(net):.6f}>{limits.max_abs_net_exposure:.6f}")
        if turnover > limits.max_turnover + tolerance:
            breaches.append(f"Turnover:{turnover:.6f}>{limits.max_turnover:.6f}")
        for allocation in allocations:
            weight = abs(allocation.target_weight)
            if weight > limits.max_abs_weight_per_symbol + tolerance:
                breaches.append(
                    f"SymbolCap:{allocation.symbol}:{weight:.6f}>{limits.max_abs_weight_per_symbol:.6f}"
                )

        approved = not breaches
        if approved:
            logger.info(f"Risk gate approved: gross={gross:.4f}, net={net:.4f}, turnover={turnover:.4f}")
        else:
            logger.warning(f"Risk gate rejected allocation set with {len(breaches)} breaches")

        return RiskDecision(
            approved=approved,
            code="APPROVED" if approved else "REJECTED",
            detail="All limits satisfied." if approved else "; ".join(breaches),
            gross_exposure=round6(gross),
            net_exposure=round6(net),
            turnover=round6(turnover),
            breaches=tuple(breaches)
        )
