"""
Runtime Types

Audit events, plugin lifecycle records and platform telemetry.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from .enums import ControlState, HookStatus, PluginHook


@dataclass(frozen=True)
class RuntimeEvent:
    """Append-only audit record published to the runtime event log."""
    sequence: int
    timestamp: datetime
    event_type: str
    source: str
    detail: str
    impact_score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sequence': self.sequence,
            'timestamp': self.timestamp.isoformat(),
            'event_type': self.event_type,
            'source': self.source,
            'detail': self.detail,
            'impact_score': self.impact_score
        }


@dataclass(frozen=True)
class StrategyPluginContext:
    """Context handed to every plugin hook invocation."""
    strategy_id: str
    timestamp: datetime
    run_id: str


@dataclass(frozen=True)
class StrategyPluginLifecycleEvent:
    strategy_id: str
    hook: PluginHook
    status: HookStatus
    detail: str
    timestamp: datetime

    @property
    def failed(self) -> bool:
        return self.status == HookStatus.FAILED


@dataclass(frozen=True)
class PlatformTelemetry:
    """Health snapshot derived from risk, execution and incident outputs."""
    fleet_health_score: float
    critical_flags: int
    warning_flags: int
    execution_intent_count: int
    estimated_latency_ms: float
    control_state: ControlState
