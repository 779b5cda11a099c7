"""
Wealth projection: Monte Carlo simulation of household wealth under uncertainty.
"""

__version__ = "1.0.0"
