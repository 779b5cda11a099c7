"""
Stress scenario adjustments applied during a crisis window.
"""

from dataclasses import dataclass
from typing import List, Sequence

from ..config import BASELINE_CORRELATION, CRISIS_CORRELATIONS, MONTHS_PER_YEAR
from ..models import AssetCategory, AssetClass, SimulationConfig, StressScenario
from .parameters import PortfolioParameters, portfolio_parameters

_EQUITY_LIKE = (AssetCategory.US_EQUITY, AssetCategory.INTL_EQUITY, AssetCategory.PRIVATE_EQUITY)


def _is_fixed_income(asset: AssetClass) -> bool:
    return asset.category == AssetCategory.FIXED_INCOME


def _is_equity_or_crypto(asset: AssetClass) -> bool:
    return asset.category in _EQUITY_LIKE or asset.category == AssetCategory.CRYPTO


@dataclass(frozen=True)
class CrisisWindow:
    """Half-open month range [start_month, end_month) where stress applies."""
    start_month: int
    end_month: int
    enabled: bool = True

    @classmethod
    def from_config(cls, config: SimulationConfig, scenario: StressScenario) -> "CrisisWindow":
        start = config.crisis_start_year * MONTHS_PER_YEAR
        end = start + config.crisis_duration * MONTHS_PER_YEAR
        return cls(start, end, enabled=scenario != StressScenario.NONE)

    def is_active(self, month: int) -> bool:
        return self.enabled and self.start_month <= month < self.end_month


def crisis_correlation(scenario: StressScenario) -> float:
    """Pairwise correlation assumed while the crisis is active."""
    return CRISIS_CORRELATIONS.get(scenario.value, BASELINE_CORRELATION)


def _adjust(asset: AssetClass, scenario: StressScenario) -> AssetClass:
    ret = asset.expected_return
    vol = asset.volatility
    lam = asset.jump_intensity
    jump_mean = asset.jump_mean

    if scenario == StressScenario.GFC_2008:
        vol *= 1.5
        lam *= 3.0
        ret -= 0.05
    elif scenario == StressScenario.INFLATION_SHOCK:
        if _is_fixed_income(asset):
            ret -= 0.06
            vol *= 2.0
        ret -= 0.03  # real-return haircut on everything
    elif scenario == StressScenario.TECH_BUBBLE:
        if _is_equity_or_crypto(asset):
            vol *= 2.0
            jump_mean = -0.5

    return asset.model_copy(update={
        "expected_return": ret,
        "volatility": vol,
        "jump_intensity": lam,
        "jump_mean": jump_mean,
    })


def stress_adjusted_assets(assets: Sequence[AssetClass], scenario: StressScenario) -> List[AssetClass]:
    """Return shocked copies of the asset list; the inputs are left untouched."""
    if scenario == StressScenario.NONE:
        return list(assets)
    return [_adjust(a, scenario) for a in assets]


def stressed_parameters(assets: Sequence[AssetClass], scenario: StressScenario) -> PortfolioParameters:
    """Portfolio parameters for the crisis window of the given scenario."""
    return portfolio_parameters(stress_adjusted_assets(assets, scenario), crisis_correlation(scenario))
