"""
Signal Aggregator - Composite Signal Construction

Collapses per-strategy signals into one confidence-weighted composite score
per symbol.
"""

import logging
from typing import Dict, List, Sequence, Tuple

from ...types.signals import CompositeSignal, StrategySignal
from ...utils.numeric import round6

logger = logging.getLogger(__name__)


class SignalAggregator:
    """
    Builds composite signals from raw strategy signals.

    The composite score of a symbol is the sum of alpha × confidence over
    every contributing signal. Output is ordered by symbol.
    """

    def build(self, signals: Sequence[StrategySignal]) -> Tuple[CompositeSignal, ...]:
        """
        Aggregate raw signals by symbol.

        Args:
            signals: Raw strategy signals, normalized before use

        Returns:
            Composite signals sorted by symbol; empty for empty input
        """
        grouped: Dict[str, List[StrategySignal]] = {}
        for signal in signals:
            normalized = signal.normalized()
            grouped.setdefault(normalized.symbol, []).append(normalized)

        composites = []
        for symbol in sorted(grouped):
            contributions = grouped[symbol]
            score = round6(sum(s.alpha_score * s.confidence for s in contributions))
            contributors = tuple(sorted({s.strategy_id for s in contributions}))
            composites.append(CompositeSignal(symbol, score, contributors))
            logger.debug(f"Composite {symbol}: score={score:.6f} from {len(contributors)} strategies")

        logger.info(f"Aggregated {len(signals)} signals into {len(composites)} composite signals")
        return tuple(composites)
