"""
Tests for the financial projection engine.
"""

import itertools
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from opportunity_engine.errors import InvalidInputError
from opportunity_engine.finance import (
    DEFAULT_SETUP_COST,
    FinancialViability,
    financial_viability,
    format_currency,
    location_multiplier,
    project,
)
from opportunity_engine.models import CompetitionDensity


@pytest.fixture
def profitable():
    """Tech support with very strong demand in a sparse area pays back quickly"""
    return project("Tech Support", 200, "Low", 500, 1.1, currency="INR")


@pytest.fixture
def loss_making():
    return project("Cafe", 78, "Balanced", 12000, 1.15, currency="INR")


class TestProject:

    def test_costs_scale_with_location(self, profitable):
        assert profitable.setup_cost.min == 255_000
        assert profitable.setup_cost.max == 680_000
        assert profitable.monthly_operating_cost.min == 30_600
        assert profitable.monthly_operating_cost.max == 108_800

    def test_revenue_band_spreads_around_midpoint(self, profitable):
        assert profitable.expected_monthly_revenue.min == 128_000
        assert profitable.expected_monthly_revenue.max == 192_000

    def test_break_even_is_ceiling_of_payback(self, profitable):
        # 467,500 setup / 90,300 monthly profit = 5.18
        assert profitable.break_even_months == 6
        assert profitable.reaches_break_even
        assert not profitable.is_break_even_sentinel

    def test_margins_are_clamped(self, profitable):
        assert profitable.profit_margin.min == 15
        assert profitable.profit_margin.max == 45

    def test_year_projections(self, profitable):
        assert profitable.year1.revenue.min == 1_689_600
        assert profitable.year1.revenue.max == 2_534_400
        assert profitable.year3.revenue.min > profitable.year1.revenue.min

    def test_viability(self, profitable, loss_making):
        assert profitable.viability == FinancialViability.EXCELLENT
        assert loss_making.viability == FinancialViability.POOR

    def test_loss_making_projection_uses_sentinel(self, loss_making):
        assert loss_making.break_even_months == 36
        assert not loss_making.reaches_break_even
        assert loss_making.is_break_even_sentinel
        assert loss_making.profit_margin.min == 5
        assert loss_making.profit_margin.max == 5

    @pytest.mark.parametrize("demand", [0, -10])
    def test_zero_or_negative_demand_is_degenerate_not_an_error(self, demand):
        result = project("Cafe", demand, "Low", 3000, 1.0)
        assert result.expected_monthly_revenue.min == 0
        assert result.expected_monthly_revenue.max == 0
        assert result.break_even_months == 36
        assert result.profit_margin.min == 5

    def test_unknown_business_type_uses_defaults(self):
        result = project("Llama Grooming", 60, "Balanced", 1000, 1.0)
        assert result.setup_cost.min == DEFAULT_SETUP_COST.min
        assert result.setup_cost.max == DEFAULT_SETUP_COST.max

    def test_business_type_lookup_ignores_case(self):
        assert project("CAFE", 60, "Low", 2000, 1.0) == project("cafe", 60, "Low", 2000, 1.0)

    def test_competition_penalty_lowers_revenue(self):
        revenues = [project("Gym", 70, density, 2000, 1.0).expected_monthly_revenue.max
                    for density in CompetitionDensity]
        assert revenues == sorted(revenues, reverse=True)

    def test_rejects_unknown_density(self):
        with pytest.raises(InvalidInputError):
            project("Cafe", 60, "Packed", 2000, 1.0)

    def test_rejects_nan(self):
        with pytest.raises(InvalidInputError):
            project("Cafe", float("nan"), "Low", 2000, 1.0)

    def test_currency(self, profitable):
        assert profitable.currency == "INR"
        assert project("Cafe", 60, "Low", 2000, 1.0, currency="USD").currency == "USD"

    def test_to_dict_includes_viability(self, profitable):
        data = profitable.to_dict()
        assert data["viability"] == "Excellent"
        assert data["setup_cost"] == {"min": 255_000, "max": 680_000}


@pytest.mark.parametrize("category,demand,density,population,growth", itertools.product(
    ["Cafe", "Tech Support", "Restaurant", "unknown"],
    [0, 35, 80, 150, 300],
    list(CompetitionDensity),
    [200, 4000, 20000],
    [0.8, 1.0, 1.4],
))
def test_projection_invariants(category, demand, density, population, growth):
    result = project(category, demand, density, population, growth)
    assert 1 <= result.break_even_months <= 36
    assert 5 <= result.profit_margin.min <= result.profit_margin.max <= 45
    assert result.year1.revenue.min <= result.year1.revenue.max
    assert result.year3.revenue.min <= result.year3.revenue.max

    monthly_profit = result.expected_monthly_revenue.midpoint - result.monthly_operating_cost.midpoint
    if monthly_profit <= 0:
        assert result.break_even_months == 36
        assert not result.reaches_break_even
    if not result.reaches_break_even:
        assert result.break_even_months == 36


@pytest.mark.parametrize("density,expected", [
    (0, 0.85),
    (999, 0.85),
    (1000, 1.0),
    (3000, 1.15),
    (5000, 1.3),
    (25000, 1.3),
])
def test_location_multiplier(density, expected):
    assert location_multiplier(density) == expected


@pytest.mark.parametrize("months,margin,expected", [
    (10, 20, FinancialViability.EXCELLENT),
    (10, 12, FinancialViability.GOOD),
    (18, 10, FinancialViability.GOOD),
    (20, 30, FinancialViability.FAIR),
    (36, 45, FinancialViability.POOR),
])
def test_financial_viability(months, margin, expected):
    assert financial_viability(months, margin) == expected


@pytest.mark.parametrize("amount,expected", [
    (12_500_000, "INR 1.25Cr"),
    (250_000, "INR 2.50L"),
    (5_000, "INR 5K"),
    (999, "INR 999"),
])
def test_format_currency(amount, expected):
    assert format_currency(amount, "INR") == expected
