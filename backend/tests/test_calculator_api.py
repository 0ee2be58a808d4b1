"""
Calculator API Tests
====================

In-process tests for the HTTP surface (FastAPI TestClient):
- POST /api/covered-call/calculate
- GET/PUT /api/covered-call/snapshot
- GET /api/stocks/symbol-info
- GET /api/health
"""

import inspect
import pytest
from fastapi.testclient import TestClient

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server import app
from services.snapshot_store import (
    InMemorySnapshotStore,
    DebouncedSnapshotWriter,
    get_snapshot_store,
    get_snapshot_writer,
)

FORM = {
    "symbol": "aapl",
    "stock_price": "95",
    "strike_price": "105",
    "premium": "2.75",
    "dividend_per_share": "0",
    "dividends_expected": "0",
    "shares": "100",
    "implied_volatility": "30",
    "expiration_date": "2099-01-01",
}


@pytest.fixture
def store():
    return InMemorySnapshotStore()


@pytest.fixture
def client(store):
    writer = DebouncedSnapshotWriter(store, delay_seconds=0.01)
    app.dependency_overrides[get_snapshot_store] = lambda: store
    app.dependency_overrides[get_snapshot_writer] = lambda: writer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestCalculateEndpoint:

    def test_calculate_returns_bundle(self, client):
        response = client.post("/api/covered-call/calculate", json=FORM)
        assert response.status_code == 200

        data = response.json()
        assert data["symbol"] == "AAPL"
        assert data["metrics"]["max_profit_per_share"] == 12.75
        assert data["metrics"]["max_profit_total"] == 1275.0
        assert data["metrics"]["breakeven_price"] == 92.25
        assert data["display"]["max_profit_total"] == "$1,275.00"
        assert 0 <= data["trade_quality"]["score"] <= 100
        assert data["trade_quality"]["label"] in {"Strong", "Reasonable", "Borderline", "Weak"}
        assert data["technical_score"] is None
        assert data["celebrate"] is False

    def test_technical_score_when_indicators_supplied(self, client):
        form = dict(FORM, rsi14="50", adx14="30", ma20="94", ma50="92", ma200="90")

        data = client.post("/api/covered-call/calculate", json=form).json()

        assert data["technical_score"]["score"] == 90
        assert data["technical_score"]["grade"] == "A"

    def test_missing_adx_means_no_technical_score(self, client):
        form = dict(FORM, rsi14="50", ma20="94")

        data = client.post("/api/covered-call/calculate", json=form).json()

        assert data["technical_score"] is None

    def test_bad_numbers_fall_back(self, client):
        form = dict(FORM, stock_price="ninety", implied_volatility="")

        response = client.post("/api/covered-call/calculate", json=form)

        assert response.status_code == 200
        data = response.json()
        assert data["inputs"]["stock_price"] == 0.0
        assert data["inputs"]["implied_volatility"] == 30.0
        assert data["metrics"]["total_return"] == 0.0

    def test_very_large_price_does_not_error(self, client):
        form = dict(FORM, stock_price="1e30", strike_price="1e30")

        response = client.post("/api/covered-call/calculate", json=form)

        assert response.status_code == 200
        assert response.json()["inputs"]["stock_price"] == 1e30

    def test_huge_share_count_does_not_error(self, client):
        form = dict(FORM, shares="1" + "0" * 400)

        response = client.post("/api/covered-call/calculate", json=form)

        assert response.status_code == 200
        assert response.json()["inputs"]["shares"] == 0

    def test_numeric_json_values_accepted(self, client):
        form = dict(FORM, stock_price=95, shares=100)

        response = client.post("/api/covered-call/calculate", json=form)

        assert response.status_code == 200
        assert response.json()["inputs"]["shares"] == 100

    def test_celebration_flag(self, client):
        response = client.post(
            "/api/covered-call/calculate",
            params={"previous_annualized_yield": 0.0},
            json=dict(FORM, expiration_date=_days_from_today(30)),
        )
        assert response.json()["celebrate"] is True

        response = client.post(
            "/api/covered-call/calculate",
            params={"previous_annualized_yield": 0.0, "prefers_reduced_motion": True},
            json=dict(FORM, expiration_date=_days_from_today(30)),
        )
        assert response.json()["celebrate"] is False


class TestSnapshotEndpoints:

    def test_defaults_when_nothing_saved(self, client):
        data = client.get("/api/covered-call/snapshot").json()

        assert data["source"] == "defaults"
        assert data["inputs"]["stock_price"] == "95"
        assert data["inputs"]["expiration_date"] != ""

    def test_flush_save_then_load(self, client):
        response = client.put("/api/covered-call/snapshot", params={"flush": True}, json=FORM)
        assert response.status_code == 202
        assert response.json() == {"status": "saved"}

        data = client.get("/api/covered-call/snapshot").json()
        assert data["source"] == "stored"
        for key, value in FORM.items():
            assert data["inputs"][key] == value

    def test_debounced_save_is_scheduled(self, client):
        response = client.put("/api/covered-call/snapshot", json=FORM)

        assert response.status_code == 202
        assert response.json() == {"status": "scheduled"}


class TestSymbolInfoEndpoint:

    def test_known_symbol(self, client):
        response = client.get("/api/stocks/symbol-info", params={"symbol": " aapl "})

        assert response.status_code == 200
        assert response.json() == {
            "symbol": "AAPL",
            "company_name": "Apple Inc.",
            "sector": "Technology",
        }

    def test_class_share_alias(self, client):
        response = client.get("/api/stocks/symbol-info", params={"symbol": "brk-b"})

        assert response.status_code == 200
        assert response.json()["symbol"] == "BRK.B"
        assert response.json()["sector"] == "Financials"

    def test_blank_symbol(self, client):
        response = client.get("/api/stocks/symbol-info", params={"symbol": "  "})

        assert response.status_code == 400
        assert response.json()["detail"] == "Symbol is required."

    def test_missing_symbol_param(self, client):
        assert client.get("/api/stocks/symbol-info").status_code == 400

    def test_unknown_symbol(self, client):
        response = client.get("/api/stocks/symbol-info", params={"symbol": "ZZZZ"})

        assert response.status_code == 404
        assert response.json()["detail"] == "No local company metadata available for this symbol yet."


class TestHealth:

    def test_health(self, client):
        data = client.get("/api/health").json()
        assert data["status"] == "ok"

    def test_dotenv_loaded_before_environment_is_read(self):
        import server
        source = inspect.getsource(server)
        assert source.index("load_dotenv(ROOT_DIR") < source.index("from utils.environment import")


def _days_from_today(days: int) -> str:
    from datetime import date, timedelta
    return (date.today() + timedelta(days=days)).isoformat()
