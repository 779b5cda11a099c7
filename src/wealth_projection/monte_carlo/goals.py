"""
Goal probability and shortfall in today's purchasing power.
"""

from typing import List

import numpy as np

from ..config import MONTHS_PER_YEAR
from ..models import Goal, GoalResult, SimulationConfig
from .aggregation import deflator, rank_index


def evaluate_goal(goal: Goal, wealth: np.ndarray, config: SimulationConfig) -> GoalResult:
    year_diff = goal.target_year - config.start_year
    if year_diff < 0:
        return GoalResult(goal_name=goal.name, probability=0.0, expected_amount=0.0, shortfall=0.0)

    step = min(year_diff * MONTHS_PER_YEAR, config.months)
    real = np.sort(wealth[:, step] / deflator(config.inflation_rate, year_diff))
    n = real.size

    return GoalResult(
        goal_name=goal.name,
        probability=float((real >= goal.target_amount).mean() * 100.0),
        expected_amount=float(real[rank_index(n, 0.5)]),
        shortfall=max(0.0, goal.target_amount - float(real[rank_index(n, 0.1)])),
    )


def evaluate_goals(wealth: np.ndarray, config: SimulationConfig) -> List[GoalResult]:
    return [evaluate_goal(g, wealth, config) for g in config.goals]
