"""
Strategy Plugin Contract

Per-strategy hooks invoked by the pipeline at three points of a run:

    INITIALIZE           → may rewrite the strategy's raw signals
    COMPOSITE_PUBLISHED  → observes the composite signals
    RUN_COMPLETED        → observes the finished run result

How plugins are discovered or loaded is up to the caller; the pipeline only
sees a StrategyPluginRegistry built from plugin instances.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..types.runtime import StrategyPluginContext
from ..types.signals import CompositeSignal, StrategySignal

if TYPE_CHECKING:
    from ..types.results import PlatformRunResult


class StrategyPlugin(ABC):
    """
    Base class for strategy plugins.

    Subclasses must implement ``on_initialize``; the observer hooks default
    to doing nothing. Any exception raised by a hook is isolated by the
    registry and recorded as a FAILED lifecycle event.
    """

    def __init__(self, strategy_id: str):
        self.strategy_id = strategy_id

    @abstractmethod
    def on_initialize(self, strategy_signals: Sequence[StrategySignal],
                      context: StrategyPluginContext) -> Optional[List[StrategySignal]]:
        """
        Transform the raw signals of this plugin's strategy.

        Args:
            strategy_signals: Raw signals whose strategy id matches this plugin
            context: Invocation context

        Returns:
            Replacement signals, or None to keep the input unchanged
        """
        pass

    def on_composite_published(self, composite_signals: Sequence[CompositeSignal],
                               context: StrategyPluginContext) -> None:
        pass

    def on_run_completed(self, run: 'PlatformRunResult', context: StrategyPluginContext) -> None:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(strategy_id='{self.strategy_id}')"
