"""
Percentile bands across the path ensemble at yearly checkpoints.
"""

from typing import Dict, List

import numpy as np

from ..config import MONTHS_PER_YEAR
from ..models import SimulationConfig, SimulationYearResult
from .paths import PathEnsemble

# Standard percentile levels for analysis
PERCENTILES: Dict[str, float] = {
    "p10": 0.10,
    "p25": 0.25,
    "p50": 0.50,
    "p75": 0.75,
    "p90": 0.90,
}


def rank_index(n: int, pct: float) -> int:
    """Index into an ascending array of n values for percentile pct."""
    return min(int(n * pct), n - 1)


def deflator(inflation_rate: float, years: float) -> float:
    return (1.0 + inflation_rate) ** years


def _median_yearly_sum(monthly: np.ndarray, year: int) -> float:
    """Median across paths of the 12 monthly values leading up to year."""
    if year == 0:
        return 0.0
    start = (year - 1) * MONTHS_PER_YEAR + 1
    sums = np.sort(monthly[:, start:start + MONTHS_PER_YEAR].sum(axis=1))
    return float(sums[rank_index(len(sums), 0.5)])


def yearly_results(ensemble: PathEnsemble, config: SimulationConfig) -> List[SimulationYearResult]:
    """
    Collapse the ensemble into one SimulationYearResult per year 0..T.

    All percentiles for a year are read from one sorted array, so they are
    non-decreasing by construction.
    """
    n = ensemble.n_paths
    out: List[SimulationYearResult] = []

    for y in range(config.time_horizon_years + 1):
        values = np.sort(ensemble.wealth[:, y * MONTHS_PER_YEAR])
        d = deflator(config.inflation_rate, y)

        nominal = {name: float(values[rank_index(n, pct)]) for name, pct in PERCENTILES.items()}
        nominal["worst_case"] = float(values[0])
        real = {f"{name}_real": value / d for name, value in nominal.items()}

        out.append(SimulationYearResult(
            year=config.start_year + y,
            **nominal,
            **real,
            median_withdrawal=_median_yearly_sum(ensemble.withdrawals, y),
            median_savings=_median_yearly_sum(ensemble.savings, y),
        ))
    return out
