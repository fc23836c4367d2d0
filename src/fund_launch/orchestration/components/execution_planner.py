"""
Execution Planner - Order Intent Sizing and Routing

Converts an approved allocation's deltas into sized, routed order intents.
"""

import logging
from typing import Sequence, Tuple

from ...config.risk import RiskLimitConfig
from ...types.enums import Route, Urgency
from ...types.execution import ExecutionIntent
from ...types.portfolio import AllocationDraft, RiskDecision
from ...utils.numeric import is_material, round6

logger = logging.getLogger(__name__)

LIT_ROUTE_NOTIONAL_THRESHOLD = 125000.0
HIGH_URGENCY_DELTA = 0.10
MEDIUM_URGENCY_DELTA = 0.05


def urgency_for_delta(delta: float) -> Urgency:
    size = abs(delta)
    if size >= HIGH_URGENCY_DELTA:
        return Urgency.HIGH
    if size >= MEDIUM_URGENCY_DELTA:
        return Urgency.MEDIUM
    return Urgency.LOW


class ExecutionPlanner:
    """Builds order intents; a rejected risk decision yields no orders."""

    def build(self, allocations: Sequence[AllocationDraft], risk: RiskDecision,
              limits: RiskLimitConfig) -> Tuple[ExecutionIntent, ...]:
        """
        Build execution intents.

        Args:
            allocations: Allocation drafts
            risk: Risk decision for the same allocations
            limits: Risk limits (capital base and minimum order notional)

        Returns:
            Intents sorted by descending notional, then symbol
        """
        if not risk.approved:
            logger.warning("Risk decision rejected; no execution intents planned")
            return ()

        intents = []
        for allocation in allocations:
            if not is_material(allocation.delta_weight):
                continue

            notional = round6(abs(allocation.delta_weight) * limits.capital_base)
            if notional < limits.min_order_notional:
                logger.debug(f"Dropping {allocation.symbol}: notional {notional:.2f} below minimum")
                continue

            intents.append(ExecutionIntent(
                symbol=allocation.symbol,
                side=allocation.action,
                delta_weight=allocation.delta_weight,
                notional=notional,
                route=(Route.LIT_SMART if notional >= LIT_ROUTE_NOTIONAL_THRESHOLD
                       else Route.INTERNAL_CROSS),
                urgency=urgency_for_delta(allocation.delta_weight),
                book_id=allocation.book_id
            ))

        intents.sort(key=lambda i: (-i.notional, i.symbol))
        logger.info(f"Planned {len(intents)} execution intents")
        return tuple(intents)
