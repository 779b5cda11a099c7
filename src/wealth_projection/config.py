"""
Application configuration and constants.
"""

import logging
import os
from typing import Dict, List

from dotenv import load_dotenv

# Load environment overrides from .env if present
load_dotenv()

# API configuration
API_VERSION = "1.0.0"
API_TITLE = "Wealth Projection API"
API_DESCRIPTION = "Monte Carlo jump-diffusion engine for long-horizon wealth projection"

# CORS configuration
CORS_ORIGINS = ["*"]  # In production, replace with specific origins
CORS_CREDENTIALS = True
CORS_METHODS = ["*"]
CORS_HEADERS = ["*"]

# Simulation defaults
DEFAULT_ITERATIONS = 500  # Interactive budget: re-run on every input change
MIN_ITERATIONS = 1
MAX_ITERATIONS = 100000

# Time step (monthly)
MONTHS_PER_YEAR = 12
DT = 1.0 / MONTHS_PER_YEAR

# Poisson jump counts per monthly step are capped at this value
MAX_JUMPS_PER_STEP = 25

# Result bundle limits
MAX_FAILING_PATHS = 50

# Cash-flow defaults
DEFAULT_INFLATION_RATE = 0.025
DEFAULT_CRISIS_DURATION = 3

# Correlation assumptions
BASELINE_CORRELATION = 0.3
CRISIS_CORRELATIONS: Dict[str, float] = {
    "None": BASELINE_CORRELATION,
    "2008 Financial Crisis": 0.8,
    "Hyperinflation Shock": 0.6,
    "Tech Bubble Burst": 0.4,
}

# Default asset mix (weights in percent)
DEFAULT_ASSETS: List[Dict[str, object]] = [
    {"category": "US Equity", "weight": 75, "expected_return": 0.08, "volatility": 0.15,
     "jump_intensity": 0.10, "jump_mean": -0.20, "jump_sd": 0.10},
    {"category": "Intl Equity", "weight": 0, "expected_return": 0.07, "volatility": 0.18,
     "jump_intensity": 0.15, "jump_mean": -0.25, "jump_sd": 0.12},
    {"category": "Fixed Income", "weight": 25, "expected_return": 0.04, "volatility": 0.05,
     "jump_intensity": 0.05, "jump_mean": -0.05, "jump_sd": 0.02},
    {"category": "Real Estate", "weight": 0, "expected_return": 0.09, "volatility": 0.12,
     "jump_intensity": 0.08, "jump_mean": -0.30, "jump_sd": 0.15},
    {"category": "Private Equity", "weight": 0, "expected_return": 0.11, "volatility": 0.22,
     "jump_intensity": 0.10, "jump_mean": -0.15, "jump_sd": 0.20},
    {"category": "Crypto/Alts", "weight": 0, "expected_return": 0.15, "volatility": 0.80,
     "jump_intensity": 0.50, "jump_mean": -0.40, "jump_sd": 0.40},
]

# Performance settings
USE_PARALLEL_PROCESSING = os.getenv("WEALTH_PARALLEL", "false").lower() == "true"
CHUNK_SIZE = int(os.getenv("WEALTH_CHUNK_SIZE", "1000"))  # Iterations per worker chunk
MAX_WORKERS = 4

# Logging configuration
LOG_LEVEL = os.getenv("WEALTH_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for the application."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
