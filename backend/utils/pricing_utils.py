"""
Pricing Utilities
=================
Numeric sanitizers and display formatting for calculator output.

NON-NEGOTIABLE:
- 2-decimal precision for ALL monetary values leaving the API
- No NaN / inf ever reaches a client
- Engine values stay unrounded; rounding happens at the edge
"""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# ============================================================
# CORE SANITIZERS
# ============================================================

def sanitize_float(x: Any) -> Optional[float]:
    """
    General float sanitizer - NO rounding.
    Returns None for invalid/NaN/inf values.

    Use for: percentages, ratios, non-monetary values
    """
    if x is None or isinstance(x, bool):
        return None
    try:
        f = float(x)
    except (ValueError, TypeError, OverflowError):
        return None
    if math.isnan(f) or math.isinf(f):
        return None
    return f


def finite_or(x: Any, default: float = 0.0) -> float:
    """sanitize_float with a fallback instead of None."""
    f = sanitize_float(x)
    return default if f is None else f


def sanitize_money(x: Any) -> Optional[float]:
    """
    Money sanitizer - STRICT 2 decimal precision.
    Uses Decimal for accurate rounding (ROUND_HALF_UP).

    Examples:
        147.50 → 147.50 (NOT 147.0)
        147.499 → 147.50
        91.745 → 91.75

    Values too large to quantize to cents return None.
    """
    f = sanitize_float(x)
    if f is None:
        return None
    try:
        return float(Decimal(str(f)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return None


def sanitize_percentage(x: Any, decimals: int = 2) -> Optional[float]:
    """
    Percentage sanitizer - configurable decimal places.
    Default 2 decimals for display.
    """
    f = sanitize_float(x)
    if f is None:
        return None
    precision = Decimal(1).scaleb(-decimals) if decimals > 0 else Decimal(1)
    try:
        return float(Decimal(str(f)).quantize(precision, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return None


# ============================================================
# MONETARY FIELD REGISTRY
# All fields that MUST use sanitize_money() in API payloads
# ============================================================

MONETARY_FIELDS = {
    # Raw inputs
    "stock_price",
    "strike_price",
    "premium",
    "dividend_per_share",

    # Economics
    "dividend_per_share_total",
    "gross_cost",
    "net_cost",
    "net_cost_per_share",
    "premium_total",
    "dividends_total",
    "max_profit_per_share",
    "max_profit_total",
    "breakeven_price",
    "upside_cap_value",
}


def sanitize_dict_with_money(d: Dict) -> Dict:
    """
    Recursively sanitize a dictionary.
    - Monetary fields get 2-decimal precision
    - Other floats get NaN/inf protection only
    - Nested dicts/lists handled recursively
    """
    if not isinstance(d, dict):
        return d

    result = {}
    for key, value in d.items():
        if isinstance(value, float):
            if key in MONETARY_FIELDS:
                money = sanitize_money(value)
                result[key] = money if money is not None else sanitize_float(value)
            else:
                result[key] = sanitize_float(value)
        elif isinstance(value, dict):
            result[key] = sanitize_dict_with_money(value)
        elif isinstance(value, list):
            result[key] = [
                sanitize_dict_with_money(item) if isinstance(item, dict)
                else sanitize_float(item) if isinstance(item, float)
                else item
                for item in value
            ]
        else:
            result[key] = value
    return result


# ============================================================
# DISPLAY FORMATTING
# ============================================================

def format_currency(value: Any) -> str:
    """
    USD with thousands grouping and 2 decimals.

    1234.5 → "$1,234.50", -12 → "-$12.00"
    """
    amount = sanitize_money(value)
    if amount is None:
        amount = finite_or(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percent(value: Any, is_fraction: bool = False) -> str:
    """
    Two decimals with a trailing '%'.

    Percent-unit values are formatted as-is (3.1578 → "3.16%"); fractions
    such as total_return are scaled first (0.1342 → "13.42%").
    """
    f = finite_or(value)
    if is_fraction:
        f = finite_or(f * 100)
    rounded = sanitize_percentage(f)
    return f"{f if rounded is None else rounded:.2f}%"
