"""
Monte Carlo jump-diffusion engine for wealth projection.
"""

from .engine import Engine, run_simulation
from .parameters import PortfolioParameters, portfolio_parameters, uniform_correlation_matrix
from .paths import PathEnsemble, PathSimulator
from .stress import CrisisWindow, crisis_correlation, stress_adjusted_assets, stressed_parameters

__all__ = [
    "Engine",
    "run_simulation",
    "PortfolioParameters",
    "portfolio_parameters",
    "uniform_correlation_matrix",
    "PathEnsemble",
    "PathSimulator",
    "CrisisWindow",
    "crisis_correlation",
    "stress_adjusted_assets",
    "stressed_parameters",
]
