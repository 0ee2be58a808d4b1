"""
Input Normalizer
================
Turns raw covered call form strings into safe numbers.

RULES:
- Every numeric field degrades to a default, never to NaN/inf
- Core money fields default to 0
- Optional technical indicators default to None (absent, not zero)
- Implied volatility defaults to 30 and is clamped to [5, 100]
- Never raises
"""
import math
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Any, Dict, Optional

from models.schemas import TradeInputs
from utils.pricing_utils import sanitize_float

DEFAULT_IMPLIED_VOLATILITY = 30.0
MIN_IMPLIED_VOLATILITY = 5.0
MAX_IMPLIED_VOLATILITY = 100.0


@dataclass(frozen=True)
class NormalizedInputs:
    """Numeric form values, ready for the valuation engine"""
    stock_price: float = 0.0
    strike_price: float = 0.0
    premium: float = 0.0
    dividend_per_share: float = 0.0
    dividends_expected: int = 0
    shares: int = 0
    implied_volatility: float = DEFAULT_IMPLIED_VOLATILITY
    days_until_expiration: int = 0
    atr14: Optional[float] = None
    adx14: Optional[float] = None
    rsi14: Optional[float] = None
    ma20: Optional[float] = None
    ma50: Optional[float] = None
    ma200: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_decimal(raw: Optional[str]) -> Optional[float]:
    """Parse a decimal string. Empty, malformed and non-finite text → None."""
    if raw is None:
        return None
    text = str(raw).strip().replace(",", "")
    if not text:
        return None
    return sanitize_float(text)


def parse_money(raw: Optional[str]) -> float:
    value = parse_decimal(raw)
    return 0.0 if value is None else value


def parse_integer(raw: Optional[str]) -> int:
    """
    Parse an integer count. Decimal text truncates toward zero ("100.9" → 100).
    Anything unparsable → 0.
    """
    if raw is None:
        return 0
    text = str(raw).strip().replace(",", "")
    try:
        count = int(text)
    except ValueError:
        value = sanitize_float(text)
        if value is None:
            return 0
        return int(value)
    # Digit strings past float range would overflow the engine arithmetic
    return count if sanitize_float(count) is not None else 0


def parse_implied_volatility(raw: Optional[str]) -> float:
    value = parse_decimal(raw)
    if value is None:
        value = DEFAULT_IMPLIED_VOLATILITY
    return max(MIN_IMPLIED_VOLATILITY, min(MAX_IMPLIED_VOLATILITY, value))


def parse_expiration_date(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    try:
        return datetime.strptime(str(raw).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def days_until(expiration: Optional[date], today: Optional[date] = None) -> int:
    """
    Calendar days from local midnight today to local midnight on expiration,
    rounded up and floored at 0.
    """
    if expiration is None:
        return 0
    today = today or date.today()
    seconds = (datetime.combine(expiration, datetime.min.time())
               - datetime.combine(today, datetime.min.time())).total_seconds()
    return max(0, math.ceil(seconds / 86400))


def normalize_trade_inputs(inputs: TradeInputs, today: Optional[date] = None) -> NormalizedInputs:
    """
    Normalize every raw form field.

    Args:
        inputs: Raw form strings
        today: Reference date for days-to-expiration (defaults to today)

    Returns:
        NormalizedInputs with only finite values
    """
    return NormalizedInputs(
        stock_price=parse_money(inputs.stock_price),
        strike_price=parse_money(inputs.strike_price),
        premium=parse_money(inputs.premium),
        dividend_per_share=parse_money(inputs.dividend_per_share),
        dividends_expected=max(0, parse_integer(inputs.dividends_expected)),
        shares=parse_integer(inputs.shares),
        implied_volatility=parse_implied_volatility(inputs.implied_volatility),
        days_until_expiration=days_until(parse_expiration_date(inputs.expiration_date), today),
        atr14=parse_decimal(inputs.atr14),
        adx14=parse_decimal(inputs.adx14),
        rsi14=parse_decimal(inputs.rsi14),
        ma20=parse_decimal(inputs.ma20),
        ma50=parse_decimal(inputs.ma50),
        ma200=parse_decimal(inputs.ma200),
    )
