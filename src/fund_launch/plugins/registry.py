"""
Strategy Plugin Registry
========================

Dispatches lifecycle hooks to per-strategy plugins. Every hook invocation
is isolated: a failing plugin is recorded as a FAILED lifecycle event and
the pipeline continues with unmodified data.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .base import StrategyPlugin
from ..types.enums import HookStatus, PluginHook
from ..types.runtime import StrategyPluginContext, StrategyPluginLifecycleEvent
from ..types.signals import CompositeSignal, StrategySignal
from ..validation.exceptions import PluginHookFailure

if TYPE_CHECKING:
    from ..types.results import PlatformRunResult

logger = logging.getLogger(__name__)

COMPOSITE_OBSERVED_DETAIL = "Composite signals observed."
RUN_COMPLETED_DETAIL = "Run completion acknowledged."


def normalize_strategy_key(strategy_id: str) -> str:
    return strategy_id.strip().upper()


@dataclass(frozen=True)
class StrategyPluginHookResult:
    """Signals emitted by the INITIALIZE hooks plus their lifecycle events."""
    signals: Tuple[StrategySignal, ...]
    events: Tuple[StrategyPluginLifecycleEvent, ...]


class StrategyPluginRegistry:
    """
    Ordered mapping from normalized strategy id to one plugin.

    When two plugins share a strategy id the later registration wins.
    """

    def __init__(self, plugins: Iterable[StrategyPlugin] = ()):
        self._plugins: Dict[str, StrategyPlugin] = {}
        for plugin in plugins:
            self._plugins[normalize_strategy_key(plugin.strategy_id)] = plugin

    @classmethod
    def empty(cls) -> 'StrategyPluginRegistry':
        return cls()

    @property
    def strategy_ids(self) -> Tuple[str, ...]:
        return tuple(sorted(self._plugins))

    def get(self, strategy_id: str) -> Optional[StrategyPlugin]:
        return self._plugins.get(normalize_strategy_key(strategy_id))

    def __len__(self) -> int:
        return len(self._plugins)

    def execute_initialize(self, input_signals: Sequence[StrategySignal],
                           timestamp: datetime, run_id: str) -> StrategyPluginHookResult:
        """
        Run INITIALIZE hooks over raw signals grouped by strategy.

        Groups are visited in order of first appearance. Strategies without
        a plugin pass through, as do plugins that return None or fail.

        Args:
            input_signals: Raw strategy signals
            timestamp: Run timestamp
            run_id: Run identifier

        Returns:
            StrategyPluginHookResult with emitted signals and lifecycle events
        """
        groups: Dict[str, List[StrategySignal]] = {}
        for signal in input_signals:
            groups.setdefault(normalize_strategy_key(signal.strategy_id), []).append(signal)

        emitted: List[StrategySignal] = []
        lifecycle: List[StrategyPluginLifecycleEvent] = []

        for strategy_id, grouped in groups.items():
            plugin = self._plugins.get(strategy_id)
            if plugin is None:
                emitted.extend(grouped)
                continue

            context = StrategyPluginContext(strategy_id, timestamp, run_id)
            try:
                transformed = plugin.on_initialize(tuple(grouped), context)
            except Exception as e:
                failure = PluginHookFailure(strategy_id, PluginHook.INITIALIZE.value, e)
                logger.warning(f"{failure}: {failure.detail}")
                emitted.extend(grouped)
                lifecycle.append(self._event(strategy_id, PluginHook.INITIALIZE,
                                             HookStatus.FAILED, failure.detail, timestamp))
                continue

            transformed = list(grouped) if transformed is None else list(transformed)
            emitted.extend(transformed)
            lifecycle.append(self._event(strategy_id, PluginHook.INITIALIZE, HookStatus.SUCCESS,
                                         f"{len(transformed)} signals emitted.", timestamp))

        return StrategyPluginHookResult(signals=tuple(emitted), events=tuple(lifecycle))

    def execute_composite_published(self, composite_signals: Sequence[CompositeSignal],
                                    timestamp: datetime,
                                    run_id: str) -> Tuple[StrategyPluginLifecycleEvent, ...]:
        """Notify every plugin, ordered by strategy id, of the composite signals."""
        return self._broadcast(
            PluginHook.COMPOSITE_PUBLISHED,
            lambda plugin, context: plugin.on_composite_published(tuple(composite_signals), context),
            COMPOSITE_OBSERVED_DETAIL, timestamp, run_id
        )

    def execute_run_completed(self, run: 'PlatformRunResult', timestamp: datetime,
                              run_id: str) -> Tuple[StrategyPluginLifecycleEvent, ...]:
        """Notify every plugin, ordered by strategy id, that the run finished."""
        return self._broadcast(
            PluginHook.RUN_COMPLETED,
            lambda plugin, context: plugin.on_run_completed(run, context),
            RUN_COMPLETED_DETAIL, timestamp, run_id
        )

    def _broadcast(self, hook: PluginHook,
                   invoke: Callable[[StrategyPlugin, StrategyPluginContext], None],
                   success_detail: str, timestamp: datetime,
                   run_id: str) -> Tuple[StrategyPluginLifecycleEvent, ...]:
        lifecycle = []
        for strategy_id in self.strategy_ids:
            context = StrategyPluginContext(strategy_id, timestamp, run_id)
            try:
                invoke(self._plugins[strategy_id], context)
            except Exception as e:
                failure = PluginHookFailure(strategy_id, hook.value, e)
                logger.warning(f"{failure}: {failure.detail}")
                lifecycle.append(self._event(strategy_id, hook, HookStatus.FAILED,
                                             failure.detail, timestamp))
                continue
            lifecycle.append(self._event(strategy_id, hook, HookStatus.SUCCESS,
                                         success_detail, timestamp))
        return tuple(lifecycle)

    @staticmethod
    def _event(strategy_id: str, hook: PluginHook, status: HookStatus, detail: str,
               timestamp: datetime) -> StrategyPluginLifecycleEvent:
        return StrategyPluginLifecycleEvent(
            strategy_id=strategy_id,
            hook=hook,
            status=status,
            detail=detail,
            timestamp=timestamp
        )
