"""
Orchestration Module - Fund Launch Pipeline Coordination
========================================================

FundLaunchEngine runs the pipeline components in order against one
scenario and returns an immutable run result.
"""

from .components import (
    SignalAggregator,
    CapitalAllocator,
    RiskGate,
    ExecutionPlanner,
    PolicyOverrideEngine,
    PolicyOverrideResult,
    IncidentSimulator,
    TcaAnalyzer,
    FeedbackLoopEngine,
    AgentArenaEngine,
    TelemetryBuilder
)
from .engine import FundLaunchEngine, build_run_id
from .utils import RuntimeEventLog

__all__ = [
    # Engine
    'FundLaunchEngine',
    'build_run_id',

    # Components
    'SignalAggregator',
    'CapitalAllocator',
    'RiskGate',
    'ExecutionPlanner',
    'PolicyOverrideEngine',
    'PolicyOverrideResult',
    'IncidentSimulator',
    'TcaAnalyzer',
    'FeedbackLoopEngine',
    'AgentArenaEngine',
    'TelemetryBuilder',

    # Utilities
    'RuntimeEventLog'
]
