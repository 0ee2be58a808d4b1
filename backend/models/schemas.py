"""
Pydantic models/schemas for the application
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Dict, Any
from datetime import date, timedelta


# ==================== FORM INPUT MODELS ====================

DEFAULT_DAYS_TO_EXPIRATION = 30

# Field defaults for a fresh form. expiration_date is filled per day by
# default_trade_inputs().
TRADE_INPUT_DEFAULTS: Dict[str, str] = {
    "symbol": "",
    "stock_price": "95",
    "strike_price": "105",
    "premium": "2.75",
    "dividend_per_share": "0",
    "dividends_expected": "0",
    "shares": "100",
    "implied_volatility": "30",
    "expiration_date": "",
    "atr14": "",
    "adx14": "",
    "rsi14": "",
    "ma20": "",
    "ma50": "",
    "ma200": "",
}


class TradeInputs(BaseModel):
    """Raw covered call form fields, exactly as typed by the user."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    symbol: str = ""
    stock_price: str = TRADE_INPUT_DEFAULTS["stock_price"]
    strike_price: str = TRADE_INPUT_DEFAULTS["strike_price"]
    premium: str = TRADE_INPUT_DEFAULTS["premium"]
    dividend_per_share: str = TRADE_INPUT_DEFAULTS["dividend_per_share"]
    dividends_expected: str = TRADE_INPUT_DEFAULTS["dividends_expected"]
    shares: str = TRADE_INPUT_DEFAULTS["shares"]
    implied_volatility: str = TRADE_INPUT_DEFAULTS["implied_volatility"]
    expiration_date: str = ""

    # Optional technical indicators - empty string means "not supplied"
    atr14: str = ""
    adx14: str = ""
    rsi14: str = ""
    ma20: str = ""
    ma50: str = ""
    ma200: str = ""


def default_expiration_date(today: Optional[date] = None) -> str:
    today = today or date.today()
    return (today + timedelta(days=DEFAULT_DAYS_TO_EXPIRATION)).isoformat()


def default_trade_inputs(today: Optional[date] = None) -> TradeInputs:
    """Fresh form: the original planner defaults, expiring 30 days out."""
    return TradeInputs(expiration_date=default_expiration_date(today))


# ==================== RESPONSE MODELS ====================

class SnapshotResponse(BaseModel):
    source: str = Field(..., description="stored or defaults")
    inputs: TradeInputs


class SnapshotSaveResponse(BaseModel):
    status: str = Field(..., description="scheduled or saved")


class SymbolInfoResponse(BaseModel):
    symbol: str
    company_name: str
    sector: str


class TradeQualityFactorOut(BaseModel):
    name: str
    value: float
    delta: int
    note: Optional[str] = None


class TradeQualityOut(BaseModel):
    score: int
    label: str
    notes: List[str] = Field(default_factory=list)
    has_elevated_risk_warning: bool = False
    subtitle: str = ""
    factors: List[TradeQualityFactorOut] = Field(default_factory=list)


class TechnicalScoreOut(BaseModel):
    score: int
    grade: str
    notes: List[str] = Field(default_factory=list)


class CoveredCallAnalysisResponse(BaseModel):
    symbol: str
    inputs: Dict[str, Any]
    metrics: Dict[str, Any]
    trade_quality: TradeQualityOut
    technical_score: Optional[TechnicalScoreOut] = None
    display: Dict[str, str]
    celebrate: bool = False
