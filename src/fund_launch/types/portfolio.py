"""
Portfolio Types

Allocation drafts, strategy book summaries and the atomic risk decision.
"""

from dataclasses import dataclass
from typing import Tuple

from .enums import TradeAction

DEFAULT_BOOK_ID = "CORE"
MULTI_BOOK_ID = "MULTI_BOOK"


@dataclass(frozen=True)
class AllocationDraft:
    """
    Allocation intent for one symbol.

    At portfolio level ``book_id`` is MULTI_BOOK_ID when more than one
    strategy book contributed to the symbol.
    """
    symbol: str
    current_weight: float
    target_weight: float
    delta_weight: float
    action: TradeAction
    rationale: str
    book_id: str = DEFAULT_BOOK_ID


@dataclass(frozen=True)
class StrategyBookAllocationSummary:
    """Per-book allocation roll-up; capital_share is normalized across books."""
    book_id: str
    capital_share: float
    allocation_count: int
    gross_exposure: float
    net_exposure: float
    turnover: float


@dataclass(frozen=True)
class MultiBookAllocationResult:
    """Portfolio-level allocations plus the book summaries they came from."""
    portfolio_allocations: Tuple[AllocationDraft, ...]
    book_summaries: Tuple[StrategyBookAllocationSummary, ...]


@dataclass(frozen=True)
class RiskDecision:
    """Single accept/reject decision covering the whole allocation set."""
    approved: bool
    code: str
    detail: str
    gross_exposure: float
    net_exposure: float
    turnover: float
    breaches: Tuple[str, ...]
