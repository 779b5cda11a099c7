"""
Shared fixtures for engine testing.
"""

import pytest

from wealth_projection.config import DEFAULT_ASSETS
from wealth_projection.models import (
    AssetCategory,
    AssetClass,
    IncomeFrequency,
    IncomeSource,
    SimulationConfig,
    WithdrawalStrategy,
)

START_YEAR = 2025


@pytest.fixture
def default_assets():
    """75/25 equity/fixed-income mix with jumps."""
    return [AssetClass(**a) for a in DEFAULT_ASSETS]


@pytest.fixture
def flat_asset():
    """Single riskless, jump-free asset with zero drift."""
    return [AssetClass(category=AssetCategory.US_EQUITY, weight=100, expected_return=0.0, volatility=0.0)]


@pytest.fixture
def make_flat_assets():
    """Factory for a single deterministic asset with a chosen drift."""
    def _make(mu: float = 0.0):
        return [AssetClass(category=AssetCategory.US_EQUITY, weight=100, expected_return=mu, volatility=0.0)]
    return _make


@pytest.fixture
def make_config():
    """Factory for SimulationConfig with quiet defaults (no cash flows, no inflation)."""
    def _make(**overrides):
        params = {
            "initial_wealth": 100_000,
            "income_sources": [],
            "goals": [],
            "savings_rate": 0.0,
            "retirement_delay_years": 0,
            "time_horizon_years": 10,
            "withdrawal_rate": 0.0,
            "withdrawal_strategy": WithdrawalStrategy.FIXED_REAL,
            "inflation_rate": 0.0,
            "start_year": START_YEAR,
        }
        params.update(overrides)
        return SimulationConfig(**params)
    return _make


@pytest.fixture
def salary():
    """Yearly salary that stops at retirement."""
    return IncomeSource(
        name="Salary",
        amount=120_000,
        frequency=IncomeFrequency.YEARLY,
        growth_rate=0.03,
        start_year=START_YEAR,
        stops_at_retirement=True,
    )


@pytest.fixture
def standard_config(make_config, salary):
    """Ten working years then twenty retired years, fixed-real withdrawals."""
    return make_config(
        initial_wealth=150_000,
        income_sources=[salary],
        savings_rate=20,
        retirement_delay_years=10,
        time_horizon_years=30,
        withdrawal_rate=0.04,
        inflation_rate=0.025,
    )


@pytest.fixture
def tolerance():
    """Tolerances for statistical tests."""
    return {
        "median_rel": 0.05,  # 5% relative tolerance for medians
        "mean": 0.01,
        "exact": 1e-9,
    }
