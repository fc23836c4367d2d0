"""
Fixtures running the early pipeline stages on the deterministic scenario.
"""

from types import SimpleNamespace

import pytest

from fund_launch.orchestration.components import (
    CapitalAllocator, ExecutionPlanner, IncidentSimulator, RiskGate, SignalAggregator
)


@pytest.fixture
def single_book_plan(strategy_signals, current_book, risk_limits):
    """Composite signals, allocations, risk decision and intents for the single book."""
    composites = SignalAggregator().build(strategy_signals)
    allocations = CapitalAllocator().allocate(composites, current_book, risk_limits)
    risk = RiskGate().evaluate(allocations, risk_limits)
    intents = ExecutionPlanner().build(allocations, risk, risk_limits)
    return SimpleNamespace(
        composites=composites,
        allocations=allocations,
        risk=risk,
        intents=intents,
        limits=risk_limits
    )


@pytest.fixture
def stressed_incident(single_book_plan, incident_config, fixed_timestamp, event_log):
    """Incident result with all three faults applied to the single-book plan."""
    return IncidentSimulator().run(single_book_plan.composites, single_book_plan.intents,
                                   incident_config, fixed_timestamp, event_log)
