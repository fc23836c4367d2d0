"""
Pipeline Components

One component per pipeline stage, in execution order:
- Signal aggregation
- Capital allocation (single book or strategy books)
- Risk gating
- Execution planning
- Incident simulation
- Transaction cost analysis
- Routing feedback loop
- Agent arena capital renegotiation

plus the policy override engine that resolves effective limits and the
telemetry builder. Each component is stateless and can be used on its own.
"""

from .aggregator import SignalAggregator
from .allocator import CapitalAllocator
from .risk_gate import RiskGate
from .execution_planner import ExecutionPlanner
from .policy_overrides import PolicyOverrideEngine, PolicyOverrideResult
from .incident_simulator import IncidentSimulator
from .tca_analyzer import TcaAnalyzer
from .feedback_loop import FeedbackLoopEngine
from .agent_arena import AgentArenaEngine
from .telemetry import TelemetryBuilder

__all__ = [
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
    'TelemetryBuilder'
]
