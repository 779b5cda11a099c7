"""
Core Monte Carlo simulation engine for wealth projection.
"""

import logging
import math
from typing import Optional, Sequence

from ..config import BASELINE_CORRELATION, DEFAULT_ITERATIONS
from ..models import (
    AssetClass,
    SimulationConfig,
    SimulationResult,
    SimulationSummary,
    StressScenario,
    ValidationStats,
)
from .aggregation import deflator, yearly_results
from .cash_flows import start_net_flow_monthly
from .goals import evaluate_goals
from .parameters import portfolio_parameters
from .paths import PathEnsemble, PathSimulator
from .risk import (
    failing_paths,
    max_drawdown,
    representative_path,
    risk_path,
    worst_trailing_year_return,
)
from .stress import CrisisWindow, stressed_parameters

logger = logging.getLogger(__name__)


def _check_finite(assets: Sequence[AssetClass], config: SimulationConfig) -> None:
    for a in assets:
        values = (a.weight, a.expected_return, a.volatility, a.jump_intensity, a.jump_mean, a.jump_sd)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"asset {a.category.value} has non-finite parameters")
    rates = (config.initial_wealth, config.savings_rate, config.withdrawal_rate, config.inflation_rate)
    if not all(math.isfinite(v) for v in rates):
        raise ValueError("config rates must be finite")


class Engine:
    """Monte Carlo simulation engine for one wealth projection request."""

    def __init__(
        self,
        assets: Sequence[AssetClass],
        config: SimulationConfig,
        scenario: StressScenario = StressScenario.NONE,
        iterations: int = DEFAULT_ITERATIONS,
        seed: Optional[int] = None,
    ):
        """
        Initialize the Monte Carlo engine.

        Args:
            assets: Asset mix with percentage weights
            config: Cash-flow, horizon and crisis-window configuration
            scenario: Stress scenario applied during the crisis window
            iterations: Number of independent paths to simulate
            seed: Optional seed; None draws fresh randomness every run

        Raises:
            ValueError: On malformed input (no assets, non-positive iterations,
                        non-finite rates)
        """
        if iterations < 1:
            raise ValueError("iterations must be positive")
        if not assets:
            raise ValueError("asset list must not be empty")
        _check_finite(assets, config)
        if sum(a.weight for a in assets) <= 0:
            raise ValueError("asset weights must sum to a positive total")

        self.assets = list(assets)
        self.config = config
        self.scenario = scenario
        self.iterations = iterations
        self.seed = seed
        self._prep_params()

    def _prep_params(self):
        """Precompute baseline and stressed portfolio parameters."""
        self.base_params = portfolio_parameters(self.assets, BASELINE_CORRELATION)
        self.stress_params = stressed_parameters(self.assets, self.scenario)
        self.crisis = CrisisWindow.from_config(self.config, self.scenario)

    def validation_stats(self) -> ValidationStats:
        return ValidationStats(
            effective_return=self.base_params.mu,
            effective_volatility=self.base_params.sigma,
            assumed_correlation=BASELINE_CORRELATION,
            jump_frequency=self.base_params.lam,
            start_net_flow_monthly=start_net_flow_monthly(self.config),
        )

    def simulate_paths(self) -> PathEnsemble:
        simulator = PathSimulator(self.config, self.base_params, self.stress_params, self.crisis)
        return simulator.simulate(self.iterations, seed=self.seed)

    def run(self) -> SimulationResult:
        """
        Run the Monte Carlo simulation.

        Returns:
            SimulationResult with yearly percentile bands, summary, risk path,
            failing path sample, goal results and validation stats
        """
        logger.info(
            "Running %d iterations over %d years (scenario=%s)",
            self.iterations, self.config.time_horizon_years, self.scenario.value,
        )
        ensemble = self.simulate_paths()

        data = yearly_results(ensemble, self.config)
        terminal = ensemble.terminal
        years = self.config.time_horizon_years

        adverse = representative_path(ensemble.wealth)
        summary = SimulationSummary(
            probability_of_success=float((terminal > 0).mean() * 100.0),
            median_terminal_wealth=data[years].p50,
            median_terminal_wealth_real=data[years].p50 / deflator(self.config.inflation_rate, years),
            worst_drawdown=max_drawdown(adverse) * 100.0,
            worst_year_return=worst_trailing_year_return(adverse),
            safe_withdrawal_rate=self.config.withdrawal_rate * 100.0,
        )
        logger.info("Simulation finished: success probability %.1f%%", summary.probability_of_success)

        return SimulationResult(
            data=data,
            summary=summary,
            risk_path=risk_path(adverse, self.config.start_year, years),
            failing_paths=failing_paths(ensemble.wealth),
            goals=evaluate_goals(ensemble.wealth, self.config),
            validation=self.validation_stats(),
        )


def run_simulation(
    assets: Sequence[AssetClass],
    config: SimulationConfig,
    scenario: StressScenario = StressScenario.NONE,
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
) -> SimulationResult:
    """Stateless entry point: build an Engine and run it once."""
    return Engine(assets, config, scenario, iterations, seed).run()
