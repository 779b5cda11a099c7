"""
Test the HTTP embedding layer.
"""

import pytest
from fastapi.testclient import TestClient

from wealth_projection.config import DEFAULT_ASSETS
from wealth_projection.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def payload():
    return {
        "assets": DEFAULT_ASSETS,
        "config": {
            "initial_wealth": 200_000,
            "income_sources": [{"name": "Salary", "amount": 90_000, "stops_at_retirement": True}],
            "goals": [{"name": "Cabin", "target_amount": 250_000, "target_year": 2035}],
            "savings_rate": 15,
            "retirement_delay_years": 5,
            "time_horizon_years": 20,
            "start_year": 2025,
        },
        "scenario": "2008 Financial Crisis",
        "iterations": 100,
    }


class TestEndpoints:
    """Test the HTTP endpoints end to end."""

    def test_root(self, client):
        """Test that the root endpoint answers with a banner."""
        r = client.get("/")
        assert r.status_code == 200
        assert "docs" in r.json()

    def test_default_scenario(self, client):
        """Test that the default scenario ships the six default asset classes."""
        r = client.get("/api/default_scenario")
        assert r.status_code == 200
        body = r.json()
        assert len(body["assets"]) == 6
        assert sum(a["weight"] for a in body["assets"]) == 100
        assert body["config"]["withdrawal_strategy"] == "FIXED_REAL"

    def test_simulate(self, client, payload):
        """Test that a simulate request returns yearly bands, goals and validation."""
        r = client.post("/api/simulate", json=payload)
        assert r.status_code == 200
        body = r.json()
        assert len(body["data"]) == 21
        assert body["data"][0]["year"] == 2025
        assert body["goals"][0]["goal_name"] == "Cabin"
        assert 0 <= body["summary"]["probability_of_success"] <= 100
        assert body["validation"]["assumed_correlation"] == 0.3

    def test_default_scenario_round_trips_into_simulate(self, client):
        """Test that the default scenario is accepted by simulate as-is."""
        scenario = client.get("/api/default_scenario").json()
        r = client.post("/api/simulate", json={
            "assets": scenario["assets"], "config": scenario["config"], "iterations": 20,
        })
        assert r.status_code == 200

    def test_zero_iterations_rejected(self, client, payload):
        """Test that iterations below the minimum fail request validation."""
        payload["iterations"] = 0
        assert client.post("/api/simulate", json=payload).status_code == 422

    def test_unknown_scenario_rejected(self, client, payload):
        """Test that an unknown stress scenario fails request validation."""
        payload["scenario"] = "Alien Invasion"
        assert client.post("/api/simulate", json=payload).status_code == 422

    def test_empty_assets_is_bad_request(self, client, payload):
        """Test that engine input errors map to HTTP 400."""
        payload["assets"] = []
        r = client.post("/api/simulate", json=payload)
        assert r.status_code == 400
        assert "must not be empty" in r.json()["detail"]

    def test_composition(self, client):
        """Test that the composition endpoint returns held assets by end value."""
        r = client.post("/api/composition", json={
            "assets": DEFAULT_ASSETS, "initial_wealth": 100_000, "median_terminal_wealth": 200_000,
        })
        assert r.status_code == 200
        rows = r.json()
        assert [row["category"] for row in rows] == ["US Equity", "Fixed Income"]
        assert rows[0]["end"] == pytest.approx(150_000)

    def test_diagnostics(self, client):
        """Test that diagnostics return blended parameters and correlation matrices."""
        r = client.post("/api/diagnostics", json={
            "assets": DEFAULT_ASSETS, "scenario": "Tech Bubble Burst", "sims": 2_000,
        })
        assert r.status_code == 200
        body = r.json()
        assert body["baseline"]["mu"] == pytest.approx(0.75 * 0.08 + 0.25 * 0.04)
        assert "metrics" in body["baseline"]
        assert "PORTFOLIO RETURN DIAGNOSTICS" in body["baseline"]["report"]
        assert body["correlation"]["crisis"][0][1] == 0.4
        assert len(body["correlation"]["baseline"]) == 6

    def test_diagnostics_empty_assets(self, client):
        """Test that diagnostics reject an empty asset list with HTTP 400."""
        r = client.post("/api/diagnostics", json={"assets": [], "sims": 2_000})
        assert r.status_code == 400
