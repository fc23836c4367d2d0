"""
Bundled strategy plugins and the deterministic registry used by the demo
scenario.
"""

from dataclasses import replace
from typing import List, Sequence

from .base import StrategyPlugin
from .registry import StrategyPluginRegistry
from ..types.runtime import StrategyPluginContext
from ..types.signals import StrategySignal
from ..utils.numeric import clamp, round6


class NoOpStrategyPlugin(StrategyPlugin):
    """Passes signals through untouched."""

    def on_initialize(self, strategy_signals: Sequence[StrategySignal],
                      context: StrategyPluginContext) -> List[StrategySignal]:
        return list(strategy_signals)


class ConfidenceFloorPlugin(StrategyPlugin):
    """Raises every signal's confidence to at least ``min_confidence``."""

    def __init__(self, strategy_id: str, min_confidence: float):
        super().__init__(strategy_id)
        self.min_confidence = min_confidence

    def on_initialize(self, strategy_signals: Sequence[StrategySignal],
                      context: StrategyPluginContext) -> List[StrategySignal]:
        return [
            replace(signal, confidence=max(self.min_confidence, signal.confidence))
            for signal in strategy_signals
        ]


class AlphaScalePlugin(StrategyPlugin):
    """Scales alpha by ``alpha_scale``; the result stays within [-1, 1]."""

    def __init__(self, strategy_id: str, alpha_scale: float):
        super().__init__(strategy_id)
        self.alpha_scale = alpha_scale

    def on_initialize(self, strategy_signals: Sequence[StrategySignal],
                      context: StrategyPluginContext) -> List[StrategySignal]:
        scaled = []
        for signal in strategy_signals:
            adjusted = round6(signal.alpha_score * self.alpha_scale)
            scaled.append(replace(signal, alpha_score=clamp(adjusted, -1.0, 1.0)))
        return scaled


def create_deterministic_registry() -> StrategyPluginRegistry:
    """Registry wiring one plugin to each of the four demo strategies."""
    return StrategyPluginRegistry([
        ConfidenceFloorPlugin("TREND_CORE", 0.70),
        AlphaScalePlugin("MEAN_REV", 0.92),
        NoOpStrategyPlugin("MACRO_REGIME"),
        NoOpStrategyPlugin("QUALITY_LONG")
    ])
