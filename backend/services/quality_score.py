"""
Quality Score Module
Factor-based, explainable trade quality scoring for Covered Calls.

RULES:
- Start from a neutral base score of 50
- Each factor adds a signed delta from its band table
- Bands are ordered and non-overlapping; the first matching band wins
- Final score is clamped to 0-100
- Notes are the two factors with the largest absolute impact

COVERED CALL FACTORS (5):
1. Premium per day (% of stock price per day)
2. Downside cushion (% drop to breakeven)
3. Upside room (% from stock to strike)
4. Total return potential (% if called away)
5. Implied volatility level
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from services.valuation_engine import DerivedMetrics


BASE_SCORE = 50
MAX_NOTES = 2

ELEVATED_RISK_PHRASE = "Elevated risk: high premium often signals higher volatility"


@dataclass(frozen=True)
class Band:
    """
    One row of a band table.

    Matches values below `upper` (or equal to it when `inclusive`).
    Tables are read top-down, so each row only needs its upper edge.
    """
    upper: float
    inclusive: bool
    delta: int
    note: Optional[str] = None
    elevated_risk: bool = False

    def matches(self, value: float) -> bool:
        return value <= self.upper if self.inclusive else value < self.upper


INF = float("inf")

PREMIUM_PER_DAY_BANDS: Tuple[Band, ...] = (
    Band(0.05, False, -15, "Low premium per day"),
    Band(0.12, False, 0),
    Band(0.20, True, 10, "Attractive premium per day"),
    Band(INF, True, 15, "Very high premium per day", elevated_risk=True),
)

DOWNSIDE_CUSHION_BANDS: Tuple[Band, ...] = (
    Band(2, False, -20, "Thin downside cushion"),
    Band(5, True, 0),
    Band(8, True, 10, "Solid downside cushion"),
    Band(INF, True, 15, "Strong downside cushion"),
)

UPSIDE_ROOM_BANDS: Tuple[Band, ...] = (
    Band(1, False, -10, "Upside very capped"),
    Band(3, True, -5, "Upside capped"),
    Band(7, True, 5, "Fair upside room"),
    Band(INF, True, 10, "Healthy upside room"),
)

TOTAL_RETURN_BANDS: Tuple[Band, ...] = (
    Band(8, False, -10, "Limited total return"),
    Band(12, False, 0),
    Band(20, True, 10, "Strong total return"),
    Band(35, True, 15, "Very strong total return"),
    Band(INF, True, 20, "Exceptional total return"),
)

IMPLIED_VOLATILITY_BANDS: Tuple[Band, ...] = (
    Band(15, False, -8, "IV low for income"),
    Band(25, True, 0),
    Band(45, True, 10, "IV supports premium"),
    Band(65, True, 5, "IV elevated", elevated_risk=True),
    Band(INF, True, -5, "IV extremely elevated", elevated_risk=True),
)

# (threshold, label), highest first
LABEL_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (80, "Strong"),
    (65, "Reasonable"),
    (50, "Borderline"),
)
FALLBACK_LABEL = "Weak"


@dataclass
class ScoreFactor:
    """A single evaluated factor"""
    name: str
    value: float
    delta: int
    note: Optional[str] = None
    elevated_risk: bool = False


@dataclass
class TradeQuality:
    """Complete trade quality score with factor breakdown"""
    score: int
    label: str
    notes: List[str] = field(default_factory=list)
    has_elevated_risk_warning: bool = False
    factors: List[ScoreFactor] = field(default_factory=list)


def match_band(value: float, bands: Sequence[Band]) -> Band:
    for band in bands:
        if band.matches(value):
            return band
    # Only reachable for NaN, which compares False everywhere
    return Band(INF, True, 0)


def evaluate_factor(name: str, value: float, bands: Sequence[Band]) -> ScoreFactor:
    band = match_band(value, bands)
    return ScoreFactor(
        name=name,
        value=value,
        delta=band.delta,
        note=band.note,
        elevated_risk=band.elevated_risk,
    )


def clamp_score(score: float) -> int:
    return int(max(0, min(100, score)))


def quality_label(score: int) -> str:
    """Strong / Reasonable / Borderline / Weak for a clamped score."""
    for threshold, label in LABEL_THRESHOLDS:
        if score >= threshold:
            return label
    return FALLBACK_LABEL


def top_notes(factors: Sequence[ScoreFactor], limit: int = MAX_NOTES) -> List[str]:
    """Descriptions of the highest-impact factors; ties keep evaluation order."""
    scored = [f for f in factors if f.delta != 0 and f.note]
    ranked = sorted(scored, key=lambda f: abs(f.delta), reverse=True)
    return [f.note for f in ranked[:limit]]


def calculate_trade_quality(
    premium_per_day_pct: float,
    downside_to_breakeven_pct: float,
    upside_cap_pct: float,
    total_return_pct: float,
    implied_volatility_pct: float
) -> TradeQuality:
    """
    Score a covered call setup.

    Args:
        premium_per_day_pct: Premium as % of stock price, per day to expiration
        downside_to_breakeven_pct: % drop the stock can take before a loss
        upside_cap_pct: % from stock price to strike
        total_return_pct: Return if called away, in percent
        implied_volatility_pct: IV in percent (5-100)

    Returns:
        TradeQuality with score, label and up to two notes
    """
    factors = [
        evaluate_factor("premium_per_day", premium_per_day_pct, PREMIUM_PER_DAY_BANDS),
        evaluate_factor("downside_cushion", downside_to_breakeven_pct, DOWNSIDE_CUSHION_BANDS),
        evaluate_factor("upside_room", upside_cap_pct, UPSIDE_ROOM_BANDS),
        evaluate_factor("total_return", total_return_pct, TOTAL_RETURN_BANDS),
        evaluate_factor("implied_volatility", implied_volatility_pct, IMPLIED_VOLATILITY_BANDS),
    ]

    score = clamp_score(BASE_SCORE + sum(f.delta for f in factors))

    return TradeQuality(
        score=score,
        label=quality_label(score),
        notes=top_notes(factors),
        has_elevated_risk_warning=any(f.elevated_risk for f in factors),
        factors=factors,
    )


def calculate_trade_quality_from_metrics(
    metrics: DerivedMetrics,
    implied_volatility_pct: float
) -> TradeQuality:
    return calculate_trade_quality(
        premium_per_day_pct=metrics.premium_per_day_pct,
        downside_to_breakeven_pct=metrics.downside_to_breakeven_pct,
        upside_cap_pct=metrics.upside_cap_pct,
        total_return_pct=metrics.total_return_pct,
        implied_volatility_pct=implied_volatility_pct,
    )


def quality_subtitle(quality: TradeQuality) -> str:
    """One-line summary under the score: top notes plus the risk phrase."""
    parts = list(quality.notes[:MAX_NOTES])
    if quality.has_elevated_risk_warning:
        parts.append(ELEVATED_RISK_PHRASE)
    return " · ".join(parts)
