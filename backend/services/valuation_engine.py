"""
Valuation Engine
================
Covered call economics from normalized inputs.

All divisions are guarded: a zero stock price or zero days to expiration
short-circuits the affected ratio to 0. The engine never raises and never
returns NaN/inf.
"""
import math
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any

from services.input_normalizer import NormalizedInputs
from utils.pricing_utils import finite_or

DAYS_PER_YEAR = 365


@dataclass(frozen=True)
class DerivedMetrics:
    """Covered call economics. Ratios named *_pct are in percent units."""
    days_until_expiration: int
    dividend_per_share_total: float
    gross_cost: float
    net_cost: float
    net_cost_per_share: float
    premium_total: float
    dividends_total: float
    max_profit_per_share: float
    max_profit_total: float
    breakeven_price: float
    upside_cap_value: float
    upside_cap_pct: float
    total_return: float  # fraction
    annualized_return: float  # fraction, may exceed 1
    premium_pct: float
    premium_per_day_pct: float
    downside_to_breakeven_pct: float
    annualized_premium_yield: float  # fraction, premium only

    @property
    def total_return_pct(self) -> float:
        return self.total_return * 100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_derived_metrics(inputs: NormalizedInputs) -> DerivedMetrics:
    """
    Compute all covered call metrics.

    Per share: max profit = strike - stock + premium + dividends, breakeven =
    stock - premium - dividends. Totals scale by share count.
    """
    stock = inputs.stock_price
    strike = inputs.strike_price
    premium = inputs.premium
    shares = inputs.shares
    days = inputs.days_until_expiration

    dividend_per_share_total = inputs.dividend_per_share * inputs.dividends_expected

    gross_cost = stock * shares
    premium_total = premium * shares
    dividends_total = dividend_per_share_total * shares
    net_cost = gross_cost - premium_total
    net_cost_per_share = stock - premium

    max_profit_per_share = strike - stock + premium + dividend_per_share_total
    max_profit_total = max_profit_per_share * shares
    breakeven_price = stock - premium - dividend_per_share_total
    upside_cap_value = strike - stock

    if stock > 0:
        total_return = max_profit_per_share / stock
        premium_pct = (premium / stock) * 100
        upside_cap_pct = ((strike - stock) / stock) * 100
        if math.isfinite(breakeven_price):
            downside_to_breakeven_pct = max(0.0, ((stock - breakeven_price) / stock) * 100)
        else:
            downside_to_breakeven_pct = 0.0
    else:
        total_return = 0.0
        premium_pct = 0.0
        upside_cap_pct = 0.0
        downside_to_breakeven_pct = 0.0

    if days > 0:
        premium_per_day_pct = premium_pct / days
        annualized_return = total_return * (DAYS_PER_YEAR / days)
        annualized_premium_yield = (premium / stock) * (DAYS_PER_YEAR / days) if stock > 0 else 0.0
    else:
        premium_per_day_pct = 0.0
        annualized_return = 0.0
        annualized_premium_yield = 0.0

    metrics = DerivedMetrics(
        days_until_expiration=days,
        dividend_per_share_total=dividend_per_share_total,
        gross_cost=gross_cost,
        net_cost=net_cost,
        net_cost_per_share=net_cost_per_share,
        premium_total=premium_total,
        dividends_total=dividends_total,
        max_profit_per_share=max_profit_per_share,
        max_profit_total=max_profit_total,
        breakeven_price=breakeven_price,
        upside_cap_value=upside_cap_value,
        upside_cap_pct=upside_cap_pct,
        total_return=total_return,
        annualized_return=annualized_return,
        premium_pct=premium_pct,
        premium_per_day_pct=premium_per_day_pct,
        downside_to_breakeven_pct=downside_to_breakeven_pct,
        annualized_premium_yield=annualized_premium_yield,
    )
    return _finite_metrics(metrics)


def _finite_metrics(metrics: DerivedMetrics) -> DerivedMetrics:
    # Huge inputs can overflow a product to inf; report those as 0.
    values = {}
    for f in fields(metrics):
        value = getattr(metrics, f.name)
        values[f.name] = value if isinstance(value, int) else finite_or(value)
    return DerivedMetrics(**values)
