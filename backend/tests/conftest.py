"""
Shared test setup: backend on sys.path, ephemeral snapshot storage.
"""
import os
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SNAPSHOT_BACKEND", "memory")

from models.schemas import TradeInputs  # noqa: E402


# Fixed reference date: 2026-01-02 → 2026-02-01 is exactly 30 days
TODAY = date(2026, 1, 2)
EXPIRY_30_DAYS = "2026-02-01"


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def scenario_inputs():
    """95 stock, 105 strike, 2.75 premium, one 0.25 dividend, 100 shares, 30 days"""
    return TradeInputs(
        symbol="aapl",
        stock_price="95",
        strike_price="105",
        premium="2.75",
        dividend_per_share="0.25",
        dividends_expected="1",
        shares="100",
        implied_volatility="30",
        expiration_date=EXPIRY_30_DAYS,
    )
