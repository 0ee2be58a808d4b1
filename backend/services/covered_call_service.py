"""
Covered Call Service
====================
Runs the full calculator pipeline for one form submission:

raw form strings → normalize → valuation → trade quality + technical score
→ presentation bundle

Every step is pure; the same inputs (and reference date) always produce
the same bundle.
"""
import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Dict, Optional

from models.schemas import TradeInputs
from services.input_normalizer import NormalizedInputs, normalize_trade_inputs
from services.quality_score import TradeQuality, calculate_trade_quality_from_metrics, quality_subtitle
from services.technical_score import TechnicalScore, calculate_technical_score
from services.valuation_engine import DerivedMetrics, calculate_derived_metrics
from utils.pricing_utils import format_currency, format_percent, sanitize_dict_with_money

logger = logging.getLogger(__name__)

# Annualized premium yield that earns a celebration when first crossed
CELEBRATION_YIELD_THRESHOLD = 0.15


@dataclass
class CoveredCallAnalysis:
    symbol: str
    inputs: NormalizedInputs
    metrics: DerivedMetrics
    trade_quality: TradeQuality
    technical_score: Optional[TechnicalScore]
    celebrate: bool = False

    @property
    def quality_subtitle(self) -> str:
        return quality_subtitle(self.trade_quality)

    def display(self) -> Dict[str, str]:
        m = self.metrics
        return {
            "max_profit_total": format_currency(m.max_profit_total),
            "max_profit_per_share": format_currency(m.max_profit_per_share),
            "breakeven_price": format_currency(m.breakeven_price),
            "strike_price": format_currency(self.inputs.strike_price),
            "upside_cap_value": format_currency(m.upside_cap_value),
            "premium_total": format_currency(m.premium_total),
            "dividends_total": format_currency(m.dividends_total),
            "net_cost": format_currency(m.net_cost),
            "net_cost_per_share": format_currency(m.net_cost_per_share),
            "total_return": format_percent(m.total_return, is_fraction=True),
            "annualized_return": format_percent(m.annualized_return, is_fraction=True),
            "annualized_premium_yield": format_percent(m.annualized_premium_yield, is_fraction=True),
            "premium_pct": format_percent(m.premium_pct),
            "premium_per_day_pct": format_percent(m.premium_per_day_pct),
            "upside_cap_pct": format_percent(m.upside_cap_pct),
            "downside_to_breakeven_pct": format_percent(m.downside_to_breakeven_pct),
        }

    def to_dict(self) -> Dict[str, Any]:
        """API payload: money rounded to cents, everything NaN-safe."""
        quality = asdict(self.trade_quality)
        quality["subtitle"] = self.quality_subtitle
        for factor in quality["factors"]:
            factor.pop("elevated_risk", None)
        return {
            "symbol": self.symbol,
            "inputs": sanitize_dict_with_money(self.inputs.to_dict()),
            "metrics": sanitize_dict_with_money(self.metrics.to_dict()),
            "trade_quality": quality,
            "technical_score": asdict(self.technical_score) if self.technical_score else None,
            "display": self.display(),
            "celebrate": self.celebrate,
        }


def should_celebrate(
    previous_yield: Optional[float],
    current_yield: float,
    prefers_reduced_motion: bool = False,
    threshold: float = CELEBRATION_YIELD_THRESHOLD
) -> bool:
    """
    True only when the annualized premium yield crosses the threshold upward
    since the last submitted plan, and the client allows motion.
    """
    if previous_yield is None or prefers_reduced_motion:
        return False
    return previous_yield < threshold <= current_yield


def analyze_covered_call(
    inputs: TradeInputs,
    today: Optional[date] = None,
    previous_annualized_yield: Optional[float] = None,
    prefers_reduced_motion: bool = False
) -> CoveredCallAnalysis:
    """
    Run the calculator for one set of form inputs.

    Args:
        inputs: Raw form strings
        today: Reference date for days to expiration
        previous_annualized_yield: Yield of the last submitted plan, if any
        prefers_reduced_motion: Client opted out of animations

    Returns:
        CoveredCallAnalysis (technical_score is None when indicators are missing)
    """
    normalized = normalize_trade_inputs(inputs, today)
    metrics = calculate_derived_metrics(normalized)
    quality = calculate_trade_quality_from_metrics(metrics, normalized.implied_volatility)
    technical = calculate_technical_score(normalized)

    logger.debug(
        f"Analyzed {inputs.symbol or 'unnamed'}: quality={quality.score} "
        f"technical={technical.score if technical else None}"
    )

    return CoveredCallAnalysis(
        symbol=inputs.symbol.strip().upper(),
        inputs=normalized,
        metrics=metrics,
        trade_quality=quality,
        technical_score=technical,
        celebrate=should_celebrate(
            previous_annualized_yield,
            metrics.annualized_premium_yield,
            prefers_reduced_motion
        ),
    )
