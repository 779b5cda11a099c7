"""
Pydantic models for the wealth projection engine.
All data models and validation logic.
"""

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, conint

from .config import (
    DEFAULT_CRISIS_DURATION,
    DEFAULT_INFLATION_RATE,
    DEFAULT_ITERATIONS,
    MAX_ITERATIONS,
    MIN_ITERATIONS,
)


# ============================
# Enumerations
# ============================
class AssetCategory(str, Enum):
    """Asset class labels; stress rules key off these"""
    US_EQUITY = "US Equity"
    INTL_EQUITY = "Intl Equity"
    FIXED_INCOME = "Fixed Income"
    REAL_ESTATE = "Real Estate"
    PRIVATE_EQUITY = "Private Equity"
    CRYPTO = "Crypto/Alts"


class IncomeFrequency(str, Enum):
    YEARLY = "Yearly"
    MONTHLY = "Monthly"


class WithdrawalStrategy(str, Enum):
    """Retirement withdrawal policy"""
    FIXED_REAL = "FIXED_REAL"  # % of wealth at retirement, inflation-adjusted
    PERCENT_PORTFOLIO = "PERCENT_PORTFOLIO"  # % of live wealth every month


class StressScenario(str, Enum):
    NONE = "None"
    GFC_2008 = "2008 Financial Crisis"
    INFLATION_SHOCK = "Hyperinflation Shock"
    TECH_BUBBLE = "Tech Bubble Burst"


# ============================
# Portfolio Models
# ============================
class AssetClass(BaseModel):
    """Statistical parameters for one asset class in the portfolio mix"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    category: AssetCategory
    weight: float  # percent of portfolio, nominally summing to 100
    expected_return: float  # annual drift (mu)
    volatility: float = Field(ge=0.0)  # annual diffusion sigma
    jump_intensity: float = Field(default=0.0, ge=0.0)  # annual jump arrival rate
    jump_mean: float = 0.0  # mean log jump size
    jump_sd: float = Field(default=0.0, ge=0.0)  # sd of log jump size


# ============================
# Income & Goal Models
# ============================
class IncomeSource(BaseModel):
    """Recurring income stream (salary, pension, Social Security, etc.)"""
    model_config = ConfigDict(allow_inf_nan=False)

    name: str = "Income"
    amount: float
    frequency: IncomeFrequency = IncomeFrequency.YEARLY
    growth_rate: float = 0.03
    start_year: Optional[int] = None  # calendar year the source starts
    end_year: Optional[int] = None  # calendar year the source stops (inclusive)
    stops_at_retirement: bool = False

    @property
    def annual_amount(self) -> float:
        if self.frequency == IncomeFrequency.MONTHLY:
            return self.amount * 12.0
        return self.amount


class Goal(BaseModel):
    """Wealth target in today's purchasing power"""
    model_config = ConfigDict(allow_inf_nan=False)

    name: str = "Goal"
    target_amount: float
    target_year: int


# ============================
# Main Configuration Model
# ============================
class SimulationConfig(BaseModel):
    """Complete cash-flow and horizon configuration for one simulation run"""
    model_config = ConfigDict(allow_inf_nan=False)

    initial_wealth: float = Field(default=150_000, ge=0.0)
    income_sources: List[IncomeSource] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)

    savings_rate: float = 20.0  # percent of annual income saved while accumulating
    retirement_delay_years: conint(ge=0) = 0
    time_horizon_years: conint(ge=1, le=100) = 30
    withdrawal_rate: float = 0.04
    withdrawal_strategy: WithdrawalStrategy = WithdrawalStrategy.FIXED_REAL
    inflation_rate: float = DEFAULT_INFLATION_RATE
    start_year: int = Field(default_factory=lambda: date.today().year)

    # Crisis window, in years from start
    crisis_start_year: conint(ge=0) = 0
    crisis_duration: conint(ge=0) = DEFAULT_CRISIS_DURATION

    # Carried for the presentation layer; not read by the engine
    tax_rate: float = 0.25
    current_age: Optional[int] = None
    stress_severity: float = 10.0

    @property
    def months(self) -> int:
        return self.time_horizon_years * 12

    @property
    def retirement_start_month(self) -> int:
        return self.retirement_delay_years * 12


class SavedScenario(BaseModel):
    """Plain-data scenario record handed to persistence collaborators"""
    name: str = "Base"
    config: SimulationConfig
    assets: List[AssetClass]


class SimulateRequest(BaseModel):
    """Request body for the simulate endpoint"""
    assets: List[AssetClass]
    config: SimulationConfig
    scenario: StressScenario = StressScenario.NONE
    iterations: conint(ge=MIN_ITERATIONS, le=MAX_ITERATIONS) = DEFAULT_ITERATIONS
    client_id: str = "default"  # newer requests supersede older ones per client


class CompositionRequest(BaseModel):
    assets: List[AssetClass]
    initial_wealth: float
    median_terminal_wealth: float


class DiagnosticsRequest(BaseModel):
    assets: List[AssetClass]
    scenario: StressScenario = StressScenario.NONE
    sims: conint(ge=1000, le=MAX_ITERATIONS) = 20_000


# ============================
# Response Models
# ============================
class SimulationYearResult(BaseModel):
    """Percentile bands for one yearly checkpoint"""
    year: int
    worst_case: float
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    worst_case_real: float
    p10_real: float
    p25_real: float
    p50_real: float
    p75_real: float
    p90_real: float
    median_withdrawal: float = 0.0
    median_savings: float = 0.0


class GoalResult(BaseModel):
    goal_name: str
    probability: float  # 0-100
    expected_amount: float  # median deflated wealth at the goal year
    shortfall: float  # target minus deflated p10, floored at 0


class RiskPathPoint(BaseModel):
    year: int
    value: float
    peak: float
    drawdown: float


class ValidationStats(BaseModel):
    """Audit record of effective model inputs (not used for control flow)"""
    effective_return: float
    effective_volatility: float
    assumed_correlation: float
    jump_frequency: float
    start_net_flow_monthly: float


class SimulationSummary(BaseModel):
    probability_of_success: float  # percent of paths with terminal wealth > 0
    median_terminal_wealth: float
    median_terminal_wealth_real: float
    worst_drawdown: float  # percent, on the representative adverse path
    worst_year_return: float  # fraction, trailing 12 months
    safe_withdrawal_rate: float  # percent


class SimulationResult(BaseModel):
    """Results from a Monte Carlo simulation"""
    data: List[SimulationYearResult]
    summary: SimulationSummary
    risk_path: List[RiskPathPoint]
    failing_paths: List[List[float]]
    goals: List[GoalResult]
    validation: ValidationStats


class CompositionRow(BaseModel):
    """Per-asset slice of the projected portfolio"""
    category: AssetCategory
    start: float
    end: float
    drift: float
    volatility: float
    theoretical_cagr: float  # percent
