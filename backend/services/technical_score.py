"""
Technical Score Module
Optional 0-100 score from user-supplied technical indicators.

AVAILABILITY:
- RSI(14) and ADX(14) both supplied
- At least one of MA20 / MA50 / MA200 supplied
- Stock price > 0
Otherwise the score is unavailable (None), never zero.

COMPONENTS (4):
1. Trend strength (ADX) – 25 points
2. Momentum (RSI) – 30 points
3. Moving-average alignment – 35 points
4. Volatility (ATR % of price) – 10 points, only when ATR supplied
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from services.input_normalizer import NormalizedInputs

TREND_MAX = 25
MOMENTUM_MAX = 30
ALIGNMENT_MAX = 35
VOLATILITY_MAX = 10

# Per moving average: (points when price is above, points otherwise)
MA_ABOVE_POINTS = {"ma20": 6, "ma50": 8, "ma200": 10}
MA_BELOW_POINTS = 2
MA_BULLISH_STACK_BONUS = 11
MA_MIXED_STACK_BONUS = 5

GRADE_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (85, "A"),
    (70, "B"),
    (55, "C"),
    (40, "D"),
)
FALLBACK_GRADE = "F"

MAX_NOTES = 4


@dataclass
class TechnicalScore:
    """Technical score with component notes"""
    score: int
    grade: str
    notes: List[str] = field(default_factory=list)


def score_trend(adx: float) -> Tuple[int, str]:
    """
    Component 1: Trend strength (25 points max)

    Peaks in the 25-35 ADX zone; very strong trends taper off because
    they tend to run through the strike.
    """
    if adx < 15:
        return 6, f"Weak trend (ADX {adx:.1f})"
    if adx < 20:
        return 12, f"Developing trend (ADX {adx:.1f})"
    if adx < 25:
        return 18, f"Moderate trend (ADX {adx:.1f})"
    if adx <= 35:
        return 25, f"Strong trend (ADX {adx:.1f})"
    if adx <= 50:
        return 20, f"Very strong trend (ADX {adx:.1f})"
    return 14, f"Extreme trend (ADX {adx:.1f})"


def score_momentum(rsi: float) -> Tuple[int, str]:
    """
    Component 2: Momentum (30 points max)

    Balanced RSI (45-60) scores highest; points fall away as RSI moves
    toward either extreme.
    """
    if 45 <= rsi <= 60:
        return 30, f"Balanced momentum (RSI {rsi:.1f})"
    if 40 <= rsi < 45:
        return 24, f"Slightly soft momentum (RSI {rsi:.1f})"
    if 60 < rsi <= 65:
        return 24, f"Slightly firm momentum (RSI {rsi:.1f})"
    if 35 <= rsi < 40:
        return 18, f"Soft momentum (RSI {rsi:.1f})"
    if 65 < rsi <= 70:
        return 18, f"Firm momentum (RSI {rsi:.1f})"
    if 30 <= rsi < 35:
        return 14, f"Near oversold (RSI {rsi:.1f})"
    if 70 < rsi <= 75:
        return 14, f"Overbought (RSI {rsi:.1f})"
    if 20 <= rsi < 30:
        return 10, f"Oversold (RSI {rsi:.1f})"
    if 75 < rsi <= 80:
        return 10, f"Strongly overbought (RSI {rsi:.1f})"
    if rsi < 20:
        return 8, f"Deeply oversold (RSI {rsi:.1f})"
    return 6, f"Deeply overbought (RSI {rsi:.1f})"


def score_alignment(
    price: float,
    ma20: Optional[float] = None,
    ma50: Optional[float] = None,
    ma200: Optional[float] = None
) -> Tuple[int, str]:
    """
    Component 3: Moving-average alignment (35 points max)

    - Price vs each supplied MA: 6/8/10 above, 2 below
    - All three supplied: +11 bullish stack, +5 mixed, +0 bearish stack
    """
    averages = {"ma20": ma20, "ma50": ma50, "ma200": ma200}
    points = 0
    above = []
    for name, value in averages.items():
        if value is None:
            continue
        if price > value:
            points += MA_ABOVE_POINTS[name]
            above.append(name.upper())
        else:
            points += MA_BELOW_POINTS

    supplied = sum(1 for v in averages.values() if v is not None)

    if supplied == 3:
        if ma20 > ma50 > ma200:
            points += MA_BULLISH_STACK_BONUS
            note = "Bullish MA stack (20 > 50 > 200)"
        elif ma20 < ma50 < ma200:
            note = "Bearish MA stack (20 < 50 < 200)"
        else:
            points += MA_MIXED_STACK_BONUS
            note = "Mixed MA alignment"
    elif above:
        note = f"Price above {', '.join(above)}"
    else:
        note = "Price below supplied moving averages"

    return min(ALIGNMENT_MAX, points), note


def score_volatility(atr: float, price: float) -> Tuple[int, str]:
    """
    Component 4: Volatility (10 points max)

    ATR as a % of price; calmer names are easier to hold through expiration.
    """
    atr_pct = atr / price * 100
    if atr_pct < 1:
        points = 10
    elif atr_pct < 2:
        points = 8
    elif atr_pct < 3:
        points = 6
    elif atr_pct < 4:
        points = 4
    elif atr_pct < 5:
        points = 2
    else:
        points = 1
    return points, f"ATR {atr_pct:.1f}% of price"


def technical_grade(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return FALLBACK_GRADE


def is_technical_score_available(inputs: NormalizedInputs) -> bool:
    has_ma = any(v is not None for v in (inputs.ma20, inputs.ma50, inputs.ma200))
    return (
        inputs.rsi14 is not None
        and inputs.adx14 is not None
        and has_ma
        and inputs.stock_price > 0
    )


def calculate_technical_score(inputs: NormalizedInputs) -> Optional[TechnicalScore]:
    """
    Calculate the technical score, or None when indicators are missing.

    Notes follow component order: trend, momentum, alignment, volatility.
    """
    if not is_technical_score_available(inputs):
        return None

    price = inputs.stock_price
    components = [
        score_trend(inputs.adx14),
        score_momentum(inputs.rsi14),
        score_alignment(price, inputs.ma20, inputs.ma50, inputs.ma200),
    ]
    if inputs.atr14 is not None:
        components.append(score_volatility(inputs.atr14, price))

    score = int(max(0, min(100, sum(points for points, _ in components))))

    return TechnicalScore(
        score=score,
        grade=technical_grade(score),
        notes=[note for _, note in components][:MAX_NOTES],
    )
