"""
Monthly cash-flow policy: savings while accumulating, income and withdrawals in retirement.

All per-month operations work on a vector of wealth values, one per
iteration, so a whole chunk of paths advances together.
"""

from dataclasses import dataclass
from typing import NamedTuple, Sequence

import numpy as np

from ..config import MONTHS_PER_YEAR
from ..models import IncomeSource, SimulationConfig, WithdrawalStrategy


def annual_income(
    sources: Sequence[IncomeSource],
    year_offset: int,
    start_year: int,
    is_retired: bool,
) -> float:
    """
    Total income for a simulated year.

    Each source is gated by its own calendar bounds and by its
    stops_at_retirement flag, then compounded from its base amount.
    """
    calendar_year = start_year + year_offset
    total = 0.0
    for s in sources:
        if is_retired and s.stops_at_retirement:
            continue
        if s.start_year is not None and calendar_year < s.start_year:
            continue
        if s.end_year is not None and calendar_year > s.end_year:
            continue
        total += s.annual_amount * ((1.0 + s.growth_rate) ** year_offset)
    return total


def start_net_flow_monthly(config: SimulationConfig) -> float:
    """Net monthly flow in the first simulated month (negative = withdrawal)."""
    if config.retirement_delay_years == 0:
        return -config.initial_wealth * config.withdrawal_rate / MONTHS_PER_YEAR
    income = annual_income(config.income_sources, 0, config.start_year, False)
    return income * (config.savings_rate / 100.0) / MONTHS_PER_YEAR


@dataclass
class PathCashState:
    """Per-iteration state carried across months."""
    fixed_real_baseline: np.ndarray

    @classmethod
    def for_paths(cls, n_paths: int) -> "PathCashState":
        return cls(fixed_real_baseline=np.zeros(n_paths))


class CashFlow(NamedTuple):
    wealth: np.ndarray
    withdrawal: np.ndarray
    savings: np.ndarray


class CashFlowScheduler:
    """Computes the cash flow for a given month index (1-based)."""

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.retirement_start_month = config.retirement_start_month
        self.immediately_retired = config.retirement_delay_years == 0

        # Income only depends on the year index and phase; compute it once
        years = config.time_horizon_years
        self._working_income = np.array([
            annual_income(config.income_sources, y, config.start_year, False) for y in range(years)
        ])
        self._retired_income = np.array([
            annual_income(config.income_sources, y, config.start_year, True) for y in range(years)
        ])

    @staticmethod
    def year_index(month: int) -> int:
        return (month - 1) // MONTHS_PER_YEAR

    def is_retired(self, month: int) -> bool:
        return month > self.retirement_start_month

    def monthly_savings(self, month: int) -> float:
        income = self._working_income[self.year_index(month)]
        return income * (self.config.savings_rate / 100.0) / MONTHS_PER_YEAR

    def monthly_retirement_income(self, month: int) -> float:
        return self._retired_income[self.year_index(month)] / MONTHS_PER_YEAR

    def years_since_retirement(self, month: int) -> int:
        return max(0, (month - (self.retirement_start_month + 1)) // MONTHS_PER_YEAR)

    def capture_baseline(self, month: int, wealth: np.ndarray, state: PathCashState) -> None:
        """Record the FIXED_REAL baseline in the first retirement month."""
        if month != self.retirement_start_month + 1:
            return
        if self.immediately_retired:
            transition = np.full_like(wealth, self.config.initial_wealth)
        else:
            transition = wealth
        state.fixed_real_baseline = transition * self.config.withdrawal_rate

    def apply(self, month: int, wealth: np.ndarray, state: PathCashState) -> CashFlow:
        """
        Apply this month's cash flow to post-return wealth.

        Paths at zero wealth withdraw nothing but still receive savings
        and income, so they can recover.
        """
        zeros = np.zeros_like(wealth)
        solvent = wealth > 0

        if not self.is_retired(month):
            savings = np.full_like(wealth, self.monthly_savings(month))
            return CashFlow(wealth + savings, zeros, savings)

        wealth = wealth + self.monthly_retirement_income(month)

        if self.config.withdrawal_strategy == WithdrawalStrategy.PERCENT_PORTFOLIO:
            withdrawal = wealth * (self.config.withdrawal_rate / MONTHS_PER_YEAR)
        else:
            self.capture_baseline(month, wealth, state)
            inflation = (1.0 + self.config.inflation_rate) ** self.years_since_retirement(month)
            withdrawal = state.fixed_real_baseline * inflation / MONTHS_PER_YEAR

        withdrawal = np.where(solvent, withdrawal, 0.0)
        return CashFlow(wealth - withdrawal, withdrawal, zeros)
