"""
Aggregate portfolio parameters from a mix of asset classes.

Jumps are pooled: intensities, means and sds are weight-averaged into one
portfolio-level compound Poisson process rather than simulated per asset.
Per-step jump counts are capped, and the drift compensation accounts for
the cap once it starts to bind.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.stats import poisson

from ..config import MAX_JUMPS_PER_STEP
from ..models import AssetClass

logger = logging.getLogger(__name__)

# Below this probability of hitting the jump cap the classic compensator is used
CAP_TAIL_TOLERANCE = 1e-12


@dataclass(frozen=True)
class PortfolioParameters:
    """Aggregate jump-diffusion parameters for the whole portfolio."""
    mu: float         # annual drift
    sigma: float      # annual diffusion volatility
    variance: float   # sigma ** 2
    lam: float        # annual jump intensity
    jump_mean: float  # mean log jump size
    jump_sd: float    # sd of log jump size

    @property
    def jump_compensator(self) -> float:
        """E[e^J] - 1 for J ~ Normal(jump_mean, jump_sd)."""
        return math.exp(self.jump_mean + 0.5 * self.jump_sd ** 2) - 1.0

    def jump_drag(self, dt: float, max_jumps: int = MAX_JUMPS_PER_STEP) -> float:
        """
        log E[e^J] for the summed jump J of one step, with counts capped at max_jumps.

        Equals lam * jump_compensator * dt while the cap is practically
        unreachable. Past that the capped count distribution is used, so
        the compensated step stays a martingale and bounded for any lam.
        """
        rate = self.lam * dt
        if rate <= 0:
            return 0.0
        if poisson.sf(max_jumps - 1, rate) < CAP_TAIL_TOLERANCE:
            return rate * self.jump_compensator

        k = np.arange(max_jumps + 1)
        probs = poisson.pmf(k, rate)
        probs[-1] = poisson.sf(max_jumps - 1, rate)  # all mass at or above the cap
        growth = self.jump_mean + 0.5 * self.jump_sd ** 2
        return math.log1p(float(probs @ np.expm1(k * growth)))

    def step_drift(self, dt: float, max_jumps: int = MAX_JUMPS_PER_STEP) -> float:
        """Compensated log drift for one step of length dt (years)."""
        return (self.mu - 0.5 * self.variance) * dt - self.jump_drag(dt, max_jumps)


def uniform_correlation_matrix(n: int, rho: float) -> np.ndarray:
    """n x n matrix with 1.0 on the diagonal and rho everywhere else."""
    corr = np.full((n, n), rho, dtype=float)
    np.fill_diagonal(corr, 1.0)
    return corr


def _weights(assets: Sequence[AssetClass]) -> np.ndarray:
    w = np.array([a.weight for a in assets], dtype=float) / 100.0
    total = w.sum()
    if not math.isclose(total, 1.0, abs_tol=1e-6):
        logger.warning("Asset weights sum to %.2f%%, not 100%%", total * 100.0)
    return w


def portfolio_parameters(assets: Sequence[AssetClass], correlation: float) -> PortfolioParameters:
    """
    Reduce an asset list to one PortfolioParameters set.

    Args:
        assets: Asset classes with percentage weights
        correlation: Pairwise correlation applied to every off-diagonal pair

    Raises:
        ValueError: If the asset list is empty
    """
    if not assets:
        raise ValueError("asset list must not be empty")

    w = _weights(assets)
    vols = np.array([a.volatility for a in assets], dtype=float)
    corr = uniform_correlation_matrix(len(assets), correlation)

    cov = np.outer(vols, vols) * corr
    variance = float(w @ cov @ w)
    variance = max(variance, 0.0)  # negative rho can push rounding below zero

    return PortfolioParameters(
        mu=float(w @ np.array([a.expected_return for a in assets])),
        sigma=math.sqrt(variance),
        variance=variance,
        lam=float(w @ np.array([a.jump_intensity for a in assets])),
        jump_mean=float(w @ np.array([a.jump_mean for a in assets])),
        jump_sd=float(w @ np.array([a.jump_sd for a in assets])),
    )
