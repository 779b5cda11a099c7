"""
Per-asset breakdown of the projected portfolio, assuming annual rebalancing.
"""

import math
from typing import List, Sequence

from ..models import AssetClass, CompositionRow


def theoretical_cagr(asset: AssetClass) -> float:
    """Standalone geometric growth rate exp(mu - sigma^2/2) - 1, in percent."""
    geo = asset.expected_return - 0.5 * asset.volatility ** 2
    return (math.exp(geo) - 1.0) * 100.0


def composition_breakdown(
    assets: Sequence[AssetClass],
    initial_wealth: float,
    median_terminal_wealth: float,
) -> List[CompositionRow]:
    """
    Split start and median terminal wealth across held assets.

    End values follow the rebalanced weights; the theoretical CAGR shows
    how each slice would have grown on its own.
    """
    rows = [
        CompositionRow(
            category=a.category,
            start=initial_wealth * a.weight / 100.0,
            end=median_terminal_wealth * a.weight / 100.0,
            drift=a.expected_return,
            volatility=a.volatility,
            theoretical_cagr=theoretical_cagr(a),
        )
        for a in assets
        if a.weight > 0
    ]
    return sorted(rows, key=lambda r: r.end, reverse=True)
