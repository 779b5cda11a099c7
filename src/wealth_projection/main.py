"""
FastAPI embedding layer for the wealth projection engine.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    API_DESCRIPTION,
    API_TITLE,
    API_VERSION,
    BASELINE_CORRELATION,
    CORS_CREDENTIALS,
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGINS,
    DEFAULT_ASSETS,
    configure_logging,
)
from .models import (
    AssetClass,
    CompositionRequest,
    CompositionRow,
    DiagnosticsRequest,
    IncomeFrequency,
    IncomeSource,
    SavedScenario,
    SimulateRequest,
    SimulationConfig,
    SimulationResult,
)
from .monte_carlo import (
    crisis_correlation,
    portfolio_parameters,
    stressed_parameters,
    uniform_correlation_matrix,
)
from .monte_carlo.composition import composition_breakdown
from .monte_carlo.diagnostics import diagnose
from .runner import LatestSimulationRunner, SimulationSuperseded

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=API_TITLE, version=API_VERSION, description=API_DESCRIPTION)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_CREDENTIALS,
    allow_methods=CORS_METHODS,
    allow_headers=CORS_HEADERS,
)

runner = LatestSimulationRunner()


@app.get("/")
def root():
    return {"message": API_TITLE, "docs": "Visit /docs for API documentation"}


@app.get("/api/default_scenario")
def default_scenario() -> SavedScenario:
    year = date.today().year
    config = SimulationConfig(
        initial_wealth=150_000,
        income_sources=[
            IncomeSource(name="Salary", amount=120_000, frequency=IncomeFrequency.YEARLY,
                         growth_rate=0.03, start_year=year, stops_at_retirement=True),
        ],
        savings_rate=20,
        retirement_delay_years=0,
        time_horizon_years=30,
        withdrawal_rate=0.04,
        inflation_rate=0.025,
        start_year=year,
        current_age=35,
    )
    return SavedScenario(
        name="Example",
        config=config,
        assets=[AssetClass(**a) for a in DEFAULT_ASSETS],
    )


@app.post("/api/simulate")
async def simulate(request: SimulateRequest) -> SimulationResult:
    try:
        return await runner.submit(
            request.client_id,
            request.assets,
            request.config,
            request.scenario,
            request.iterations,
        )
    except SimulationSuperseded as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/api/composition")
def composition(request: CompositionRequest) -> List[CompositionRow]:
    return composition_breakdown(request.assets, request.initial_wealth, request.median_terminal_wealth)


@app.post("/api/diagnostics")
def diagnostics(request: DiagnosticsRequest):
    try:
        base = portfolio_parameters(request.assets, BASELINE_CORRELATION)
        stressed = stressed_parameters(request.assets, request.scenario)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    n = len(request.assets)
    return {
        "baseline": {**asdict(base), **diagnose(base, n_sims=request.sims)},
        "stressed": asdict(stressed),
        "correlation": {
            "baseline": uniform_correlation_matrix(n, BASELINE_CORRELATION).tolist(),
            "crisis": uniform_correlation_matrix(n, crisis_correlation(request.scenario)).tolist(),
        },
    }
