"""
Pydantic Configuration System

Validated, immutable configuration objects for a fund launch run.

Usage:
    from fund_launch.config import ScenarioLoader

    loader = ScenarioLoader()
    scenario = loader.load_from_yaml("scenario.yaml")
"""

from .base import FundLaunchBaseConfig
from .risk import RiskLimitConfig
from .scenario import (
    CurrentBookWeight,
    StrategyBookConfig,
    PolicyOverrideRequest,
    IncidentSimulationConfig,
    AgentArenaConfig,
    FundLaunchScenario
)
from .loader import ScenarioLoader

__all__ = [
    'FundLaunchBaseConfig',
    'RiskLimitConfig',
    'CurrentBookWeight',
    'StrategyBookConfig',
    'PolicyOverrideRequest',
    'IncidentSimulationConfig',
    'AgentArenaConfig',
    'FundLaunchScenario',
    'ScenarioLoader'
]
