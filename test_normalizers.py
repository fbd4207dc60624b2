"""
Tests for the metric normalizers.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from opportunity_engine.errors import InvalidInputError
from opportunity_engine.models import CompetitionDensity, Difficulty
from opportunity_engine.normalizers import (
    break_even_speed,
    capital_burden,
    competition_density_from_count,
    competition_favorability,
    density_band_score,
    difficulty_ease,
    growth_score,
)


@pytest.mark.parametrize("density,expected", [
    ("Low", 90),
    ("Balanced", 70),
    ("High", 40),
    ("Oversaturated", 20),
])
def test_competition_favorability_bands(density, expected):
    assert competition_favorability(density) == expected
    assert competition_favorability(CompetitionDensity(density)) == expected


def test_competition_favorability_has_no_partial_credit():
    values = {competition_favorability(d) for d in CompetitionDensity}
    assert values == {90, 70, 40, 20}


def test_competition_favorability_rejects_unknown_band():
    with pytest.raises(InvalidInputError) as exc:
        competition_favorability("Crowded")
    assert exc.value.field == "competition_density"
    assert "Oversaturated" in exc.value.allowed


def test_density_labels_parse_case_insensitively():
    assert competition_favorability("oversaturated") == 20
    assert competition_favorability(" LOW ") == 90


@pytest.mark.parametrize("difficulty,expected", [
    ("Easy", 90),
    ("Moderate", 70),
    ("Difficult", 40),
    ("Very Difficult", 20),
    ("VeryDifficult", 20),
])
def test_difficulty_ease(difficulty, expected):
    assert difficulty_ease(difficulty) == expected


def test_difficulty_ease_accepts_profile_vocabulary():
    assert difficulty_ease("Medium") == difficulty_ease(Difficulty.MODERATE)
    assert difficulty_ease("Very High") == 20


def test_difficulty_ease_rejects_unknown():
    with pytest.raises(InvalidInputError):
        difficulty_ease("Impossible")


@pytest.mark.parametrize("ratio,expected", [
    (1.0, 0),
    (1.1, 20),
    (1.25, 50),
    (1.5, 100),
    (2.0, 100),
    (0.8, 0),
])
def test_growth_score(ratio, expected):
    assert growth_score(ratio) == pytest.approx(expected)


def test_growth_score_rejects_nan():
    with pytest.raises(InvalidInputError):
        growth_score(float("nan"))


@pytest.mark.parametrize("months,expected", [
    (0, 100),
    (18, 50),
    (36, 0),
    (48, 0),
])
def test_break_even_speed(months, expected):
    assert break_even_speed(months) == pytest.approx(expected)


def test_break_even_speed_rejects_negative_months():
    with pytest.raises(InvalidInputError):
        break_even_speed(-1)


def test_capital_burden_uses_configured_ceiling():
    assert capital_burden(0) == 100
    assert capital_burden(2_500_000) == pytest.approx(75)
    assert capital_burden(10_000_000) == 0
    assert capital_burden(25_000_000) == 0


def test_capital_burden_rejects_infinity():
    with pytest.raises(InvalidInputError):
        capital_burden(float("inf"))


@pytest.mark.parametrize("value", [0, 0.5, 1.0, 1.3, 5.0])
def test_normalizers_stay_in_range(value):
    assert 0 <= growth_score(value) <= 100
    assert 0 <= break_even_speed(value * 30) <= 100
    assert 0 <= capital_burden(value * 5_000_000) <= 100


def test_density_band_score():
    assert [density_band_score(d) for d in CompetitionDensity] == [15, 40, 65, 90]


class TestCompetitionDensityFromCount:

    def test_no_competitors_is_low(self):
        density, score = competition_density_from_count(0, radius_km=3)
        assert density == CompetitionDensity.LOW
        assert score == 0

    def test_saturation_caps_at_100(self):
        density, score = competition_density_from_count(1000, radius_km=1)
        assert density == CompetitionDensity.OVERSATURATED
        assert score == 100

    def test_bands_follow_score(self):
        # 5 per km² over pi km² saturates; half of that is a score of 50
        density, score = competition_density_from_count(8, radius_km=1)
        assert score == pytest.approx(8 / 3.141592653589793 / 5 * 100)
        assert density == CompetitionDensity.HIGH

    def test_default_radius_comes_from_config(self):
        from utils.config import Config
        explicit = competition_density_from_count(10, radius_km=Config.COMPETITION_SEARCH_RADIUS_KM)
        assert competition_density_from_count(10) == explicit

    @pytest.mark.parametrize("count,radius", [(-1, 3), (5, 0), (5, -2)])
    def test_rejects_bad_inputs(self, count, radius):
        with pytest.raises(InvalidInputError):
            competition_density_from_count(count, radius_km=radius)
