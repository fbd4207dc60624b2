"""
Tests for the BizScore engine and its forecast.
"""

import itertools
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from opportunity_engine.errors import InvalidInputError
from opportunity_engine.forecast import forecast_bizscores, trend_direction
from opportunity_engine.models import CompetitionDensity, MarketSignal, TrendDirection
from opportunity_engine.scoring import (
    Impact,
    OpportunityType,
    classify_opportunity,
    score,
    score_rating,
)


@pytest.fixture
def cafe_market():
    return MarketSignal(
        demand_index=72,
        competition_density="Balanced",
        competition_count=12,
        population_density=8000,
        avg_income=7,
        internet_penetration=70,
        literacy_rate=80,
    )


class TestScore:

    def test_weighted_sum(self, cafe_market):
        result = score(cafe_market, "Cafe", forecast_growth=1.15)
        assert result.overall == 67
        assert result.demand == 72
        assert result.competition == 60
        assert result.location == 40
        assert result.category_ease == 65
        assert result.strategic_opportunity == 32
        assert result.growth == 100
        assert result.economic == 73

    def test_growth_defaults_to_category_annual_rate(self, cafe_market):
        result = score(cafe_market, "Cafe")
        assert result.growth == 15
        assert result.overall == 50
        assert result.rating.rating == "Moderate"

    def test_unknown_category_uses_default_growth_rate(self, cafe_market):
        assert score(cafe_market, "Quantum Bakery").growth == 12

    def test_rating_and_type(self, cafe_market):
        result = score(cafe_market, "Cafe", forecast_growth=1.15)
        assert result.rating.rating == "Good"
        assert result.opportunity_type == OpportunityType.MODERATE_OPPORTUNITY

    def test_impact_factors_in_fixed_order(self, cafe_market):
        factors = score(cafe_market, "Cafe").factors
        assert [f.name for f in factors] == ["High Market Demand", "High Income Area"]
        assert all(f.impact == Impact.POSITIVE for f in factors)

    def test_explicit_scores_override_defaults(self, cafe_market):
        default = score(cafe_market, "Cafe", forecast_growth=1.15)
        harsher = score(cafe_market, "Cafe", forecast_growth=0.9,
                        competition_density_score=80, category_ease_score=20)
        assert harsher.overall < default.overall
        assert harsher.growth == 90
        assert harsher.competition == 20
        assert harsher.strategic_opportunity == 0

    def test_measured_density_score_is_preferred_over_band(self):
        by_band = MarketSignal(demand_index=60, competition_density="High")
        measured = MarketSignal(demand_index=60, competition_density="High", competition_density_score=95)
        assert score(measured).competition == 5
        assert score(by_band).competition == 35

    def test_rejects_nan_growth(self, cafe_market):
        with pytest.raises(InvalidInputError):
            score(cafe_market, "Cafe", forecast_growth=float("nan"))

    def test_to_dict_flattens_enums(self, cafe_market):
        data = score(cafe_market, "Cafe").to_dict()
        assert data["opportunity_type"] == "Moderate Opportunity"
        assert data["factors"][0]["impact"] == "positive"


def test_blue_ocean():
    market = MarketSignal(demand_index=90, competition_density="Low", population_density=20000)
    result = score(market)
    assert result.overall == 71
    assert result.opportunity_type == OpportunityType.BLUE_OCEAN


class TestClassification:

    def test_blue_ocean_is_checked_first(self):
        assert classify_opportunity(75, 30, 70) == OpportunityType.BLUE_OCEAN

    def test_avoid_outranks_competitive_but_doable(self):
        # saturation 80 with weak demand satisfies both rules
        assert classify_opportunity(60, 80, 50) == OpportunityType.AVOID_ZONE

    def test_competitive_but_doable(self):
        assert classify_opportunity(60, 70, 70) == OpportunityType.COMPETITIVE_BUT_DOABLE

    def test_low_overall_is_avoid(self):
        assert classify_opportunity(44, 10, 90) == OpportunityType.AVOID_ZONE

    def test_everything_else_is_moderate(self):
        assert classify_opportunity(60, 50, 60) == OpportunityType.MODERATE_OPPORTUNITY


@pytest.mark.parametrize("overall,rating", [
    (95, "Excellent"),
    (80, "Excellent"),
    (65, "Good"),
    (50, "Moderate"),
    (49, "Challenging"),
])
def test_score_rating(overall, rating):
    assert score_rating(overall).rating == rating


@pytest.mark.parametrize("demand,density,population,growth,ease", itertools.product(
    [0, 35, 70, 100, 140],
    list(CompetitionDensity),
    [0, 5000, 50000],
    [None, 0.5, 1.0, 1.6],
    [None, 0, 100],
))
def test_overall_is_bounded(demand, density, population, growth, ease):
    market = MarketSignal(demand_index=demand, competition_density=density, population_density=population)
    result = score(market, "retail", forecast_growth=growth, category_ease_score=ease)
    assert 0 <= result.overall <= 100


class TestForecast:

    def test_horizons(self, cafe_market):
        outlook = forecast_bizscores(cafe_market, "Cafe", score_today=50)
        assert outlook.growth_rate == pytest.approx(0.15)
        assert outlook.demand_6m == 77
        assert outlook.competition_6m == 42
        assert outlook.demand_12m == 83
        assert outlook.competition_12m == 44
        assert outlook.biz_score_6m == 52
        assert outlook.biz_score_12m == 54
        assert outlook.trend == TrendDirection.STABLE

    def test_growth_ratio_drives_rate(self, cafe_market):
        outlook = forecast_bizscores(cafe_market, "Cafe", forecast_growth=1.3)
        assert outlook.growth_rate == pytest.approx(0.3)

    def test_contracting_market_declines(self):
        market = MarketSignal(demand_index=80, competition_density="High", population_density=6000)
        outlook = forecast_bizscores(market, "retail", forecast_growth=0.6)
        assert outlook.biz_score_12m < outlook.biz_score_6m
        assert outlook.trend == TrendDirection.DECLINING

    def test_score_today_is_computed_when_missing(self, cafe_market):
        assert forecast_bizscores(cafe_market, "Cafe") == forecast_bizscores(cafe_market, "Cafe", score_today=50)

    def test_demand_is_capped(self):
        market = MarketSignal(demand_index=98, competition_density="Low")
        outlook = forecast_bizscores(market, "technology")
        assert outlook.demand_12m == 100


@pytest.mark.parametrize("today,future,expected", [
    (60, 66, TrendDirection.GROWING),
    (60, 65, TrendDirection.STABLE),
    (60, 55, TrendDirection.STABLE),
    (60, 54, TrendDirection.DECLINING),
])
def test_trend_direction(today, future, expected):
    assert trend_direction(today, future) == expected
