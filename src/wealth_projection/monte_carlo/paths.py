"""
Monthly jump-diffusion path simulation.

Each month: pick baseline or stressed parameters, draw a pooled compound
Poisson jump and a Gaussian diffusion shock, grow wealth by the compensated
log return, then apply the cash-flow policy and floor at zero.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config import CHUNK_SIZE, DT, MAX_JUMPS_PER_STEP, MAX_WORKERS, USE_PARALLEL_PROCESSING
from ..models import SimulationConfig
from .cash_flows import CashFlowScheduler, PathCashState
from .parameters import PortfolioParameters
from .stress import CrisisWindow

logger = logging.getLogger(__name__)


@dataclass
class PathEnsemble:
    """Raw per-iteration records, shape (n_paths, months + 1)."""
    wealth: np.ndarray
    withdrawals: np.ndarray
    savings: np.ndarray

    @property
    def n_paths(self) -> int:
        return self.wealth.shape[0]

    @property
    def months(self) -> int:
        return self.wealth.shape[1] - 1

    @property
    def terminal(self) -> np.ndarray:
        return self.wealth[:, -1]

    @classmethod
    def concatenate(cls, parts: Sequence["PathEnsemble"]) -> "PathEnsemble":
        return cls(
            wealth=np.concatenate([p.wealth for p in parts], axis=0),
            withdrawals=np.concatenate([p.withdrawals for p in parts], axis=0),
            savings=np.concatenate([p.savings for p in parts], axis=0),
        )


def draw_jump_impact(
    rng: np.random.Generator,
    n: int,
    params: PortfolioParameters,
    dt: float = DT,
    max_jumps: int = MAX_JUMPS_PER_STEP,
) -> np.ndarray:
    """
    Summed log jump size for one step, per path.

    Counts come from numpy's direct Poisson sampler and are capped at
    max_jumps. The sum of k Normal(m, s) draws is sampled as
    Normal(k*m, sqrt(k)*s).
    """
    impact = np.zeros(n)
    if params.lam <= 0:
        return impact
    counts = np.minimum(rng.poisson(params.lam * dt, size=n), max_jumps)
    hit = counts > 0
    if hit.any():
        k = counts[hit].astype(float)
        impact[hit] = k * params.jump_mean + np.sqrt(k) * params.jump_sd * rng.standard_normal(k.size)
    return impact


class PathSimulator:
    """Advances independent wealth paths month by month."""

    def __init__(
        self,
        config: SimulationConfig,
        base_params: PortfolioParameters,
        stress_params: PortfolioParameters,
        crisis: CrisisWindow,
        dt: float = DT,
    ):
        self.config = config
        self.base_params = base_params
        self.stress_params = stress_params
        self.crisis = crisis
        self.dt = dt
        self.scheduler = CashFlowScheduler(config)
        self._base_drift = base_params.step_drift(dt)
        self._stress_drift = stress_params.step_drift(dt)

    def params_for(self, month: int) -> Tuple[PortfolioParameters, float]:
        """Parameters and compensated step drift in force for month."""
        if self.crisis.is_active(month):
            return self.stress_params, self._stress_drift
        return self.base_params, self._base_drift

    def simulate_chunk(self, n_paths: int, rng: np.random.Generator) -> PathEnsemble:
        """Simulate n_paths independent paths with a dedicated generator."""
        steps = self.config.months
        wealth = np.zeros((n_paths, steps + 1))
        withdrawals = np.zeros((n_paths, steps + 1))
        savings = np.zeros((n_paths, steps + 1))
        wealth[:, 0] = self.config.initial_wealth

        state = PathCashState.for_paths(n_paths)
        sqrt_dt = np.sqrt(self.dt)
        current = wealth[:, 0].copy()

        for month in range(1, steps + 1):
            p, drift = self.params_for(month)

            jump = draw_jump_impact(rng, n_paths, p, self.dt)
            diffusion = p.sigma * sqrt_dt * rng.standard_normal(n_paths)
            current = current * np.exp(drift + diffusion + jump)

            flow = self.scheduler.apply(month, current, state)
            current = np.maximum(flow.wealth, 0.0)

            wealth[:, month] = current
            withdrawals[:, month] = flow.withdrawal
            savings[:, month] = flow.savings

        return PathEnsemble(wealth, withdrawals, savings)

    def simulate(
        self,
        iterations: int,
        seed: Optional[int] = None,
        parallel: bool = USE_PARALLEL_PROCESSING,
        chunk_size: int = CHUNK_SIZE,
    ) -> PathEnsemble:
        """
        Run all iterations in chunks and merge them.

        Every chunk draws from its own child of one SeedSequence, so the
        merged ensemble is identical whether chunks run serially or on
        worker threads. All chunks finish before this returns.
        """
        if iterations < 1:
            raise ValueError("iterations must be positive")
        chunk_size = max(1, chunk_size)

        sizes: List[int] = []
        remaining = iterations
        while remaining > 0:
            sizes.append(min(chunk_size, remaining))
            remaining -= sizes[-1]

        children = np.random.SeedSequence(seed).spawn(len(sizes))
        rngs = [np.random.default_rng(c) for c in children]

        if parallel and len(sizes) > 1:
            logger.debug("Simulating %d chunks on %d threads", len(sizes), MAX_WORKERS)
            with ThreadPoolExecutor(max_workers=MAX_WORKERS) as pool:
                parts = list(pool.map(self.simulate_chunk, sizes, rngs))
        else:
            parts = [self.simulate_chunk(n, rng) for n, rng in zip(sizes, rngs)]

        return PathEnsemble.concatenate(parts)
