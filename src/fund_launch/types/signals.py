"""
Strategy Signal Types

Raw per-strategy signals and the per-symbol composite produced from them.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple

from ..utils.numeric import clamp, round6


@dataclass(frozen=True)
class StrategySignal:
    """
    Raw alpha signal emitted by one strategy for one symbol.

    alpha_score is expected in [-1, 1] and confidence in [0, 1]; values
    outside those ranges are clamped by ``normalized`` rather than rejected.
    """
    strategy_id: str
    symbol: str
    alpha_score: float
    confidence: float

    def normalized(self) -> 'StrategySignal':
        """Return a copy with trimmed upper-case ids and clamped scores."""
        return replace(
            self,
            strategy_id=self.strategy_id.strip().upper(),
            symbol=self.symbol.strip().upper(),
            alpha_score=round6(clamp(self.alpha_score, -1.0, 1.0)),
            confidence=round6(clamp(self.confidence, 0.0, 1.0))
        )


@dataclass(frozen=True)
class CompositeSignal:
    """Blended alpha for one symbol across contributing strategies."""
    symbol: str
    composite_score: float
    contributors: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'symbol': self.symbol,
            'composite_score': self.composite_score,
            'contributors': list(self.contributors)
        }
