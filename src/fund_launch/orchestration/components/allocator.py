"""
Capital Allocator - Target Weight Construction

Turns composite scores into target portfolio weights under risk limits,
either for a single book or for several strategy books that each hold an
independent share of capital.

Single-book algorithm:
    1. Subtract the mean composite score (long/short balance)
    2. Scale by max_gross_exposure / Σ|adjusted score|
    3. Clamp each weight to ±max_abs_weight_per_symbol
    4. Rescale uniformly if gross exposure still exceeds the cap
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .aggregator import SignalAggregator
from ...config.risk import RiskLimitConfig
from ...config.scenario import CurrentBookWeight, StrategyBookConfig
from ...types.enums import TradeAction
from ...types.portfolio import (
    DEFAULT_BOOK_ID, MULTI_BOOK_ID, AllocationDraft, MultiBookAllocationResult,
    StrategyBookAllocationSummary
)
from ...types.signals import CompositeSignal, StrategySignal
from ...utils.numeric import MATERIALITY_TOLERANCE, round6, truncate6
from ...validation.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


def action_for_delta(delta: float) -> TradeAction:
    if abs(delta) <= MATERIALITY_TOLERANCE:
        return TradeAction.HOLD
    return TradeAction.BUY if delta > 0 else TradeAction.SELL


@dataclass(frozen=True)
class _NormalizedBook:
    book_id: str
    strategy_ids: Tuple[str, ...]
    capital_share: float
    current_book: Tuple[CurrentBookWeight, ...]


class CapitalAllocator:
    """
    Capital allocator for single-book and multi-book runs.

    All outputs are rounded to 6 decimals and ordered by symbol (allocations)
    or book id (book summaries).
    """

    def __init__(self, aggregator: SignalAggregator = None):
        self.aggregator = aggregator or SignalAggregator()

    def allocate(self, signals: Sequence[CompositeSignal],
                 current_book: Sequence[CurrentBookWeight],
                 limits: RiskLimitConfig) -> Tuple[AllocationDraft, ...]:
        """
        Build single-book allocation drafts.

        Args:
            signals: Composite signals, one per symbol
            current_book: Current holdings
            limits: Risk limits bounding the targets

        Returns:
            One draft per symbol in the union of signals and current holdings

        Raises:
            ConfigValidationError: If limits are invalid or a symbol appears
                twice in the current book
        """
        limits.validate_limits()
        current = self._current_weights(current_book)

        symbols = [s.symbol for s in signals]
        scores = np.array([s.composite_score for s in signals], dtype=float)
        targets = self._target_weights(symbols, scores, limits)

        drafts = []
        for symbol in sorted(set(targets) | set(current)):
            current_weight = current.get(symbol, 0.0)
            target_weight = targets.get(symbol, 0.0)
            delta = round6(target_weight - current_weight)
            action = action_for_delta(delta)
            rationale = ("No material change required." if action == TradeAction.HOLD
                         else f"Rebalance to align with aggregated score for {symbol}.")
            drafts.append(AllocationDraft(
                symbol=symbol,
                current_weight=current_weight,
                target_weight=target_weight,
                delta_weight=delta,
                action=action,
                rationale=rationale
            ))

        logger.debug(f"Allocated {len(drafts)} symbols under gross cap {limits.max_gross_exposure}")
        return tuple(drafts)

    def allocate_books(self, strategy_signals: Sequence[StrategySignal],
                       strategy_books: Sequence[StrategyBookConfig],
                       limits: RiskLimitConfig) -> MultiBookAllocationResult:
        """
        Allocate each strategy book independently and roll up to portfolio level.

        Each book only sees the signals of its own strategies and is bounded
        by the limits scaled to its normalized capital share.

        Args:
            strategy_signals: Raw strategy signals
            strategy_books: Strategy book configurations
            limits: Portfolio-level risk limits

        Returns:
            MultiBookAllocationResult with portfolio drafts and book summaries

        Raises:
            ConfigValidationError: If limits are invalid or the books'
                total capital share is not positive
        """
        limits.validate_limits()

        books = self._normalize_books(strategy_books)
        if not books:
            logger.warning("No strategy book has any strategy assigned; nothing to allocate")
            return MultiBookAllocationResult(portfolio_allocations=(), book_summaries=())

        total_share = self._total_share(books)
        books = [book for book in books if book.capital_share > 0]

        book_drafts: List[AllocationDraft] = []
        summaries = []
        for book in books:
            share = round6(book.capital_share / total_share)
            strategy_set = set(book.strategy_ids)
            signals = [s for s in strategy_signals
                       if s.strategy_id.strip().upper() in strategy_set]

            composites = self.aggregator.build(signals)
            drafts = [replace(d, book_id=book.book_id)
                      for d in self.allocate(composites, book.current_book, limits.scaled(share))]
            book_drafts.extend(drafts)

            summaries.append(StrategyBookAllocationSummary(
                book_id=book.book_id,
                capital_share=share,
                allocation_count=len(drafts),
                gross_exposure=round6(sum(abs(d.target_weight) for d in drafts)),
                net_exposure=round6(sum(d.target_weight for d in drafts)),
                turnover=round6(sum(abs(d.delta_weight) for d in drafts))
            ))
            logger.info(f"Book {book.book_id}: share={share:.6f}, {len(drafts)} allocations")

        return MultiBookAllocationResult(
            portfolio_allocations=self._roll_up(book_drafts),
            book_summaries=tuple(sorted(summaries, key=lambda s: s.book_id))
        )

    def validate_books(self, strategy_books: Sequence[StrategyBookConfig]) -> None:
        """
        Check strategy book capital shares without allocating.

        Books with no strategies are ignored; if any remain, their total
        capital share must be positive.

        Raises:
            ConfigValidationError: If the total capital share is not positive
        """
        books = self._normalize_books(strategy_books)
        if books:
            self._total_share(books)

    @staticmethod
    def _total_share(books: Sequence[_NormalizedBook]) -> float:
        total_share = sum(book.capital_share for book in books)
        if total_share <= 0:
            raise ConfigValidationError("strategy_books.capital_share", total_share,
                                        "total strategy book capital share must be positive")
        return total_share

    @staticmethod
    def summarize_single_book(allocations: Sequence[AllocationDraft]) -> StrategyBookAllocationSummary:
        """Summary for the implicit single book holding all capital."""
        return StrategyBookAllocationSummary(
            book_id=DEFAULT_BOOK_ID,
            capital_share=1.0,
            allocation_count=len(allocations),
            gross_exposure=round6(sum(abs(a.target_weight) for a in allocations)),
            net_exposure=round6(sum(a.target_weight for a in allocations)),
            turnover=round6(sum(abs(a.delta_weight) for a in allocations))
        )

    def _target_weights(self, symbols: List[str], scores: np.ndarray,
                        limits: RiskLimitConfig) -> Dict[str, float]:
        if not symbols:
            return {}

        adjusted = scores - scores.mean()
        total_abs = float(np.abs(adjusted).sum())
        if total_abs <= 0:
            return {symbol: 0.0 for symbol in symbols}

        raw = adjusted / total_abs * limits.max_gross_exposure
        targets = np.array([round6(w) for w in raw], dtype=float)
        cap = limits.max_abs_weight_per_symbol
        targets = np.clip(targets, -cap, cap)

        gross = float(np.abs(targets).sum())
        if gross > limits.max_gross_exposure and gross > 0:
            scale = limits.max_gross_exposure / gross
            rescaled = targets * scale
            targets = np.array([round6(w) for w in rescaled], dtype=float)
            # rounding drift across many symbols can still overshoot the cap
            if float(np.abs(targets).sum()) > limits.max_gross_exposure + MATERIALITY_TOLERANCE:
                targets = np.array([truncate6(w) for w in rescaled], dtype=float)

        return {symbol: float(weight) for symbol, weight in zip(symbols, targets)}

    @staticmethod
    def _current_weights(current_book: Sequence[CurrentBookWeight]) -> Dict[str, float]:
        current: Dict[str, float] = {}
        for holding in current_book:
            symbol = holding.symbol.strip().upper()
            if symbol in current:
                raise ConfigValidationError("current_book", symbol,
                                            "symbol appears more than once")
            current[symbol] = round6(holding.weight)
        return current

    @staticmethod
    def _normalize_books(strategy_books: Sequence[StrategyBookConfig]) -> List[_NormalizedBook]:
        books = []
        for book in strategy_books:
            strategy_ids = tuple(sorted({s.strip().upper() for s in book.strategy_ids if s.strip()}))
            if not strategy_ids:
                continue
            books.append(_NormalizedBook(
                book_id=book.book_id.strip().upper(),
                strategy_ids=strategy_ids,
                capital_share=round6(max(0.0, book.capital_share)),
                current_book=tuple(book.current_book)
            ))
        return sorted(books, key=lambda b: b.book_id)

    @staticmethod
    def _roll_up(book_drafts: Sequence[AllocationDraft]) -> Tuple[AllocationDraft, ...]:
        grouped: Dict[str, List[AllocationDraft]] = {}
        for draft in book_drafts:
            grouped.setdefault(draft.symbol, []).append(draft)

        rolled = []
        for symbol in sorted(grouped):
            drafts = grouped[symbol]
            books = sorted({d.book_id for d in drafts})
            current = round6(sum(d.current_weight for d in drafts))
            target = round6(sum(d.target_weight for d in drafts))
            delta = round6(target - current)
            action = action_for_delta(delta)
            joined = "|".join(books)
            rationale = (f"No material multi-book change required ({joined})."
                         if action == TradeAction.HOLD
                         else f"Roll-up from strategy books ({joined}).")
            rolled.append(AllocationDraft(
                symbol=symbol,
                current_weight=current,
                target_weight=target,
                delta_weight=delta,
                action=action,
                rationale=rationale,
                book_id=books[0] if len(books) == 1 else MULTI_BOOK_ID
            ))
        return tuple(rolled)
