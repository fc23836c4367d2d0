"""
Fund Launch Platform

Deterministic fund-launch pipeline: strategy signals → portfolio targets →
risk approval → execution intents → incident simulation → transaction cost
analysis → routing feedback → agent capital renegotiation.
"""

__version__ = "0.1.0"

from .config import FundLaunchScenario, RiskLimitConfig, ScenarioLoader
from .orchestration import FundLaunchEngine

__all__ = [
    'FundLaunchEngine',
    'FundLaunchScenario',
    'RiskLimitConfig',
    'ScenarioLoader',
    '__version__'
]
