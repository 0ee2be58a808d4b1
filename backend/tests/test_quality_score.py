"""
Unit Tests for Trade Quality Scoring
====================================

Tests:
1. Band edges for all five factors
2. Elevated risk flag
3. Label thresholds (80 Strong / 79 Reasonable)
4. Clamping to 0-100
5. Notes: two highest-impact factors
6. Subtitle composition
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.quality_score import (
    PREMIUM_PER_DAY_BANDS,
    DOWNSIDE_CUSHION_BANDS,
    UPSIDE_ROOM_BANDS,
    TOTAL_RETURN_BANDS,
    IMPLIED_VOLATILITY_BANDS,
    ELEVATED_RISK_PHRASE,
    match_band,
    quality_label,
    calculate_trade_quality,
    quality_subtitle,
)


class TestBandEdges:
    """Each value lands in exactly one band."""

    @pytest.mark.parametrize("value,delta", [
        (0.0, -15),
        (0.0499, -15),
        (0.05, 0),
        (0.1199, 0),
        (0.12, 10),
        (0.20, 10),
        (0.2001, 15),
        (0.25, 15),
    ])
    def test_premium_per_day(self, value, delta):
        assert match_band(value, PREMIUM_PER_DAY_BANDS).delta == delta

    @pytest.mark.parametrize("value,delta", [
        (1.99, -20),
        (2, 0),
        (5, 0),
        (5.01, 10),
        (8, 10),
        (8.01, 15),
    ])
    def test_downside_cushion(self, value, delta):
        assert match_band(value, DOWNSIDE_CUSHION_BANDS).delta == delta

    @pytest.mark.parametrize("value,delta", [
        (-4, -10),
        (0.99, -10),
        (1, -5),
        (3, -5),
        (3.01, 5),
        (7, 5),
        (7.01, 10),
    ])
    def test_upside_room(self, value, delta):
        assert match_band(value, UPSIDE_ROOM_BANDS).delta == delta

    @pytest.mark.parametrize("value,delta", [
        (7.99, -10),
        (8, 0),
        (11.99, 0),
        (12, 10),
        (20, 10),
        (20.01, 15),
        (35, 15),
        (35.01, 20),
    ])
    def test_total_return(self, value, delta):
        assert match_band(value, TOTAL_RETURN_BANDS).delta == delta

    @pytest.mark.parametrize("value,delta,risk", [
        (5, -8, False),
        (14.99, -8, False),
        (15, 0, False),
        (25, 0, False),
        (25.01, 10, False),
        (45, 10, False),
        (45.01, 5, True),
        (65, 5, True),
        (65.01, -5, True),
        (100, -5, True),
    ])
    def test_implied_volatility(self, value, delta, risk):
        band = match_band(value, IMPLIED_VOLATILITY_BANDS)
        assert band.delta == delta
        assert band.elevated_risk is risk


class TestElevatedRisk:
    """Very high premium or elevated IV raise the warning."""

    def test_very_high_premium_per_day(self):
        quality = calculate_trade_quality(0.25, 3, 2, 10, 20)

        premium_factor = quality.factors[0]
        assert premium_factor.delta == 15
        assert quality.has_elevated_risk_warning is True
        assert quality.score == 60
        assert quality.label == "Borderline"

    def test_no_warning_for_calm_setup(self):
        quality = calculate_trade_quality(0.10, 4, 5, 10, 30)
        assert quality.has_elevated_risk_warning is False

    def test_elevated_iv_warns(self):
        quality = calculate_trade_quality(0.10, 4, 5, 10, 70)
        assert quality.has_elevated_risk_warning is True


class TestLabels:
    """Strictly ordered label thresholds."""

    @pytest.mark.parametrize("score,label", [
        (100, "Strong"),
        (80, "Strong"),
        (79, "Reasonable"),
        (65, "Reasonable"),
        (64, "Borderline"),
        (50, "Borderline"),
        (49, "Weak"),
        (0, "Weak"),
    ])
    def test_quality_label(self, score, label):
        assert quality_label(score) == label

    def test_score_exactly_80_is_strong(self):
        # +10 premium/day, +10 cushion, +5 upside, 0 total return, +5 IV
        quality = calculate_trade_quality(0.15, 6, 5, 10, 50)

        assert quality.score == 80
        assert quality.label == "Strong"

    def test_score_65_is_reasonable(self):
        quality = calculate_trade_quality(0.10, 3, 5, 10, 30)

        assert quality.score == 65
        assert quality.label == "Reasonable"


class TestClamping:
    """Score always within 0-100."""

    def test_floor(self):
        quality = calculate_trade_quality(0.0, 0.0, 0.0, 0.0, 10)

        assert quality.score == 0
        assert quality.label == "Weak"

    def test_ceiling(self):
        quality = calculate_trade_quality(0.5, 20, 20, 50, 30)

        assert quality.score == 100
        assert quality.label == "Strong"

    @pytest.mark.parametrize("values", [
        (0.3, 1.0, 0.5, 50.0, 80.0),
        (0.01, 12.0, 15.0, 5.0, 40.0),
        (-1.0, -5.0, -30.0, -40.0, 5.0),
        (9.0, 90.0, 90.0, 900.0, 100.0),
    ])
    def test_bounds(self, values):
        assert 0 <= calculate_trade_quality(*values).score <= 100


class TestNotes:
    """Two highest-impact descriptions."""

    def test_largest_absolute_deltas_win(self):
        # -20 cushion and +20 total return beat the rest
        quality = calculate_trade_quality(0.13, 1.0, 5, 40, 30)

        assert quality.notes == ["Thin downside cushion", "Exceptional total return"]

    def test_ties_keep_evaluation_order(self):
        quality = calculate_trade_quality(0.10, 4, 10, 15, 30)

        assert quality.notes == ["Healthy upside room", "Strong total return"]

    def test_neutral_factors_have_no_notes(self):
        quality = calculate_trade_quality(0.10, 4, 3.5, 10, 20)

        assert quality.notes == ["Fair upside room"]


class TestSubtitle:
    """Presentation line under the score."""

    def test_notes_only(self):
        quality = calculate_trade_quality(0.10, 4, 10, 15, 30)
        assert quality_subtitle(quality) == "Healthy upside room · Strong total return"

    def test_with_risk_phrase(self):
        quality = calculate_trade_quality(0.25, 3, 2, 10, 20)
        assert quality_subtitle(quality) == (
            f"Very high premium per day · Upside capped · {ELEVATED_RISK_PHRASE}"
        )
