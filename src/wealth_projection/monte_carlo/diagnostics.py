"""
Diagnostics for the portfolio return process.
Checks that the compensated jump-diffusion reproduces its inputs.
"""

import math
from typing import Any, Dict, Optional

import numpy as np
from scipy import stats

from ..config import DT, MONTHS_PER_YEAR
from .parameters import PortfolioParameters
from .paths import draw_jump_impact

QUANTILE_LEVELS = (1, 5, 10, 25, 50, 75, 90, 95, 99)
SHORTFALL_LEVELS = (1, 5)


def simulate_annual_returns(
    params: PortfolioParameters,
    n_years: int = 1,
    n_sims: int = 100_000,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Simple annual returns of the portfolio process with no cash flows.

    Returns:
        Array of shape (n_years, n_sims)
    """
    rng = np.random.default_rng(seed)
    steps = n_years * MONTHS_PER_YEAR
    log_r = np.zeros((steps, n_sims))
    drift = params.step_drift(DT)
    for t in range(steps):
        diffusion = params.sigma * math.sqrt(DT) * rng.standard_normal(n_sims)
        log_r[t] = drift + diffusion + draw_jump_impact(rng, n_sims, params, DT)
    annual_log = log_r.reshape(n_years, MONTHS_PER_YEAR, n_sims).sum(axis=1)
    return np.expm1(annual_log)


def _tail_mean(returns: np.ndarray, cutoff: float) -> float:
    """Expected shortfall: mean of the returns at or below cutoff."""
    tail = returns[returns <= cutoff]
    return float(tail.mean()) if tail.size else float(cutoff)


def compute_distribution_metrics(returns: np.ndarray) -> Dict[str, float]:
    """
    Moments, quantiles and expected shortfall of a sample of annual returns.

    Keys: mean, mean_log, std, skew, excess_kurt, q01..q99, es01, es05.
    """
    r = np.asarray(returns, dtype=float).ravel()
    summary = stats.describe(r)  # kurtosis is Fisher (excess) by default
    quantiles = dict(zip(QUANTILE_LEVELS, np.percentile(r, QUANTILE_LEVELS)))

    metrics = {
        "mean": float(summary.mean),
        "mean_log": float(np.log1p(r).mean()),
        "std": float(math.sqrt(summary.variance)),
        "skew": float(summary.skewness),
        "excess_kurt": float(summary.kurtosis),
    }
    metrics.update({f"q{p:02d}": float(q) for p, q in quantiles.items()})
    metrics.update({f"es{p:02d}": _tail_mean(r, quantiles[p]) for p in SHORTFALL_LEVELS})
    return metrics


def expected_annual_return(params: PortfolioParameters) -> float:
    """Arithmetic annual return implied by the compensated process: e^mu - 1."""
    return math.expm1(params.mu)


def expected_log_return(params: PortfolioParameters) -> float:
    """Mean annual log return: compensated drift plus expected jump sum."""
    return params.step_drift(1.0) + params.lam * params.jump_mean


def validate_against_inputs(
    metrics: Dict[str, float],
    params: PortfolioParameters,
    mean_tol: float = 0.01,
) -> Dict[str, Dict[str, Any]]:
    """
    Compare simulated metrics with what the parameters imply.

    Returns:
        Dictionary with pass/fail status per check plus an overall entry
    """
    target_mean = expected_annual_return(params)
    target_log = expected_log_return(params)
    checks = [
        ("mean", metrics["mean"], target_mean - mean_tol, target_mean + mean_tol),
        ("mean_log", metrics["mean_log"], target_log - mean_tol, target_log + mean_tol),
    ]

    results: Dict[str, Dict[str, Any]] = {}
    for name, value, low, high in checks:
        in_range = low <= value <= high
        results[name] = {
            "value": value,
            "target_range": (low, high),
            "in_range": in_range,
            "deviation": 0.0 if in_range else min(abs(value - low), abs(value - high)),
        }

    results["overall"] = {
        "all_pass": all(r["in_range"] for r in results.values()),
        "pass_count": sum(1 for r in results.values() if r.get("in_range", False)),
        "total_checks": len(checks),
    }
    return results


def compute_sequence_risk(
    returns: np.ndarray,
    years: int = 3,
    threshold: float = -0.30,
) -> float:
    """
    Share of rolling `years`-long windows whose compounded return is at or
    below threshold, pooled over every window start and every simulation.

    Args:
        returns: Array of shape (n_years, n_sims) with annual returns
    """
    if returns.shape[0] < years:
        raise ValueError(f"Need at least {years} years of data")

    # Rolling sums of log growth give every window's compounded return at once
    cum_log = np.cumsum(np.log1p(returns), axis=0)
    cum_log = np.vstack([np.zeros((1, returns.shape[1])), cum_log])
    window_log = cum_log[years:] - cum_log[:-years]
    return float((window_log <= math.log1p(threshold)).mean())


def format_diagnostics_report(
    params: PortfolioParameters,
    metrics: Dict[str, float],
    validation: Dict[str, Dict[str, Any]],
) -> str:
    """Plain-text summary of one diagnostics run."""
    overall = validation["overall"]
    lines = [
        "=" * 70,
        "PORTFOLIO RETURN DIAGNOSTICS",
        "=" * 70,
        f"Drift (mu):     {params.mu*100:6.2f}%",
        f"Volatility:     {params.sigma*100:6.2f}%",
        f"Jump intensity: {params.lam:6.3f} /yr",
        "",
        "ANNUAL RETURN DISTRIBUTION",
        "-" * 40,
        f"Mean:           {metrics['mean']*100:6.2f}%  Implied: {expected_annual_return(params)*100:6.2f}%",
        f"Std Dev:        {metrics['std']*100:6.2f}%",
        f"Skewness:       {metrics['skew']:6.3f}",
        f"Excess Kurt:    {metrics['excess_kurt']:6.2f}",
        f"ES 5% (CVaR):   {metrics['es05']*100:6.2f}%",
        "",
        "PERCENTILE DISTRIBUTION",
        "-" * 40,
    ]
    lines += [f"P{p:02d}: {metrics[f'q{p:02d}']*100:7.2f}%" for p in QUANTILE_LEVELS]
    lines += ["", f"Checks passed: {overall['pass_count']}/{overall['total_checks']}"]
    return "\n".join(lines)


def diagnose(
    params: PortfolioParameters,
    n_years: int = 5,
    n_sims: int = 20_000,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Full diagnostics bundle for one parameter set, including a text report."""
    returns = simulate_annual_returns(params, n_years=n_years, n_sims=n_sims, seed=seed)
    metrics = compute_distribution_metrics(returns[0])
    validation = validate_against_inputs(metrics, params)
    out: Dict[str, Any] = {
        "metrics": metrics,
        "validation": validation,
        "expected_annual_return": expected_annual_return(params),
        "report": format_diagnostics_report(params, metrics, validation),
    }
    if n_years >= 3:
        out["sequence_risk_3yr"] = compute_sequence_risk(returns, years=3, threshold=-0.30)
    return out
