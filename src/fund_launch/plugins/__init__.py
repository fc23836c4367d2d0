"""
Strategy plugins: the hook contract, the registry and bundled plugins.
"""

from .base import StrategyPlugin
from .registry import StrategyPluginRegistry, StrategyPluginHookResult
from .builtin import (
    NoOpStrategyPlugin, ConfidenceFloorPlugin, AlphaScalePlugin,
    create_deterministic_registry
)

__all__ = [
    'StrategyPlugin',
    'StrategyPluginRegistry',
    'StrategyPluginHookResult',
    'NoOpStrategyPlugin',
    'ConfidenceFloorPlugin',
    'AlphaScalePlugin',
    'create_deterministic_registry'
]
