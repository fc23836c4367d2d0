"""
Shared fixtures: a deterministic launch scenario with 12 signals across
4 strategies on 6 symbols, plus multi-book, override, incident and arena
variants of it.
"""

from datetime import datetime, timedelta, timezone

import pytest

from fund_launch.config import (
    AgentArenaConfig,
    CurrentBookWeight,
    FundLaunchScenario,
    IncidentSimulationConfig,
    PolicyOverrideRequest,
    RiskLimitConfig,
    StrategyBookConfig,
)
from fund_launch.orchestration.utils import RuntimeEventLog
from fund_launch.types import StrategySignal

FIXED_TIMESTAMP = datetime(2026, 2, 22, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_timestamp():
    return FIXED_TIMESTAMP


@pytest.fixture
def event_log():
    return RuntimeEventLog()


@pytest.fixture
def strategy_signals():
    return [
        StrategySignal("TREND_CORE", "AAPL", 0.82, 0.90),
        StrategySignal("TREND_CORE", "MSFT", 0.74, 0.88),
        StrategySignal("TREND_CORE", "NVDA", 0.65, 0.84),
        StrategySignal("MEAN_REV", "AAPL", -0.21, 0.64),
        StrategySignal("MEAN_REV", "AMZN", 0.41, 0.71),
        StrategySignal("MEAN_REV", "META", -0.32, 0.67),
        StrategySignal("MACRO_REGIME", "MSFT", 0.19, 0.61),
        StrategySignal("MACRO_REGIME", "NVDA", 0.22, 0.58),
        StrategySignal("MACRO_REGIME", "XOM", -0.28, 0.73),
        StrategySignal("QUALITY_LONG", "AAPL", 0.36, 0.76),
        StrategySignal("QUALITY_LONG", "MSFT", 0.33, 0.79),
        StrategySignal("QUALITY_LONG", "AMZN", 0.29, 0.72),
    ]


@pytest.fixture
def current_book():
    return [
        CurrentBookWeight(symbol="AAPL", weight=0.09),
        CurrentBookWeight(symbol="MSFT", weight=0.08),
        CurrentBookWeight(symbol="NVDA", weight=0.05),
        CurrentBookWeight(symbol="AMZN", weight=0.02),
        CurrentBookWeight(symbol="META", weight=-0.03),
        CurrentBookWeight(symbol="XOM", weight=0.01),
    ]


@pytest.fixture
def risk_limits():
    return RiskLimitConfig(
        max_abs_weight_per_symbol=0.24,
        max_gross_exposure=0.95,
        max_turnover=0.70,
        max_abs_net_exposure=0.22,
        min_order_notional=15000,
        capital_base=3_000_000,
    )


@pytest.fixture
def strategy_books():
    return [
        StrategyBookConfig(
            book_id="alpha",
            strategy_ids=["TREND_CORE", "QUALITY_LONG"],
            capital_share=0.55,
            current_book=[
                CurrentBookWeight(symbol="AAPL", weight=0.09),
                CurrentBookWeight(symbol="MSFT", weight=0.08),
                CurrentBookWeight(symbol="NVDA", weight=0.05),
                CurrentBookWeight(symbol="AMZN", weight=0.02),
            ],
        ),
        StrategyBookConfig(
            book_id="defensive",
            strategy_ids=["MEAN_REV", "MACRO_REGIME"],
            capital_share=0.45,
            current_book=[
                CurrentBookWeight(symbol="META", weight=-0.03),
                CurrentBookWeight(symbol="XOM", weight=0.01),
            ],
        ),
    ]


@pytest.fixture
def policy_overrides():
    return [
        PolicyOverrideRequest(
            policy_key="MaxTurnover",
            requested_value=0.75,
            requested_by="pm.desk",
            requested_at=FIXED_TIMESTAMP - timedelta(hours=2),
            approved_by="risk.officer",
            approved_at=FIXED_TIMESTAMP - timedelta(hours=1),
            expires_at=FIXED_TIMESTAMP + timedelta(days=1),
            reason="Launch-day rebalance window",
        ),
        PolicyOverrideRequest(
            policy_key="MaxGrossExposure",
            requested_value=0.98,
            requested_by="pm.desk",
            requested_at=FIXED_TIMESTAMP - timedelta(minutes=30),
            reason="Awaiting approval",
        ),
    ]


@pytest.fixture
def incident_config():
    return IncidentSimulationConfig(
        enable_latency_spike=True,
        latency_spike_multiplier=1.8,
        enable_venue_reject_burst=True,
        venue_reject_ratio=0.25,
        enable_feed_dropout=True,
        feed_dropout_ratio=0.2,
    )


@pytest.fixture
def arena_config():
    return AgentArenaConfig(
        enabled=True,
        negotiation_rounds=3,
        max_shift_per_round=0.05,
        min_convergence_score=0.85,
    )


@pytest.fixture
def base_scenario(strategy_signals, current_book, risk_limits):
    return FundLaunchScenario(
        signals=strategy_signals,
        current_book=current_book,
        limits=risk_limits,
        fixed_timestamp=FIXED_TIMESTAMP,
    )


@pytest.fixture
def full_scenario(strategy_signals, strategy_books, risk_limits, policy_overrides,
                  incident_config, arena_config):
    return FundLaunchScenario(
        signals=strategy_signals,
        strategy_books=strategy_books,
        limits=risk_limits,
        policy_overrides=policy_overrides,
        incident=incident_config,
        agent_arena=arena_config,
        fixed_timestamp=FIXED_TIMESTAMP,
    )
