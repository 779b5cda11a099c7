"""
Drawdown and worst-year statistics on a representative adverse path.
"""

from typing import List

import numpy as np

from ..config import MAX_FAILING_PATHS, MONTHS_PER_YEAR
from ..models import RiskPathPoint
from .aggregation import rank_index

ADVERSE_PERCENTILE = 0.10


def representative_path(wealth: np.ndarray, pct: float = ADVERSE_PERCENTILE) -> np.ndarray:
    """Path ranked at floor(N * pct) by terminal wealth."""
    order = np.argsort(wealth[:, -1], kind="stable")
    return wealth[order[rank_index(len(order), pct)]]


def drawdown_series(path: np.ndarray):
    """Running peak and fractional drawdown for every point of a path."""
    peak = np.maximum.accumulate(path)
    with np.errstate(divide="ignore", invalid="ignore"):
        dd = np.where(peak > 0, (peak - path) / peak, 0.0)
    return peak, dd


def max_drawdown(path: np.ndarray) -> float:
    """Largest peak-to-trough decline as a fraction (0.35 = 35%)."""
    _, dd = drawdown_series(path)
    return float(dd.max()) if dd.size else 0.0


def worst_trailing_year_return(path: np.ndarray) -> float:
    """Minimum trailing 12-month return; never positive."""
    if path.size <= MONTHS_PER_YEAR:
        return 0.0
    prev = path[:-MONTHS_PER_YEAR]
    cur = path[MONTHS_PER_YEAR:]
    valid = prev > 0
    if not valid.any():
        return 0.0
    rets = (cur[valid] - prev[valid]) / prev[valid]
    return float(min(0.0, rets.min()))


def risk_path(path: np.ndarray, start_year: int, years: int) -> List[RiskPathPoint]:
    """Yearly samples of (value, peak, drawdown) for charting."""
    points = []
    peak = path[0]
    for y in range(years + 1):
        value = float(path[y * MONTHS_PER_YEAR])
        peak = max(peak, value)
        drawdown = (peak - value) / peak if peak > 0 else 0.0
        points.append(RiskPathPoint(year=start_year + y, value=value, peak=float(peak), drawdown=drawdown))
    return points


def failing_paths(wealth: np.ndarray, limit: int = MAX_FAILING_PATHS) -> List[List[float]]:
    """Up to limit full paths that end at zero wealth."""
    failed = wealth[wealth[:, -1] <= 0]
    return failed[:limit].tolist()
