"""
Financial Projection Engine

Derives setup cost, operating cost, revenue, break-even and multi-year
projections from a business type and its market inputs. All money figures
are in Config.CURRENCY (the base tables are INR).
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

from utils.config import Config

from .models import (
    CompetitionDensity,
    LabelEnum,
    ValueRange,
    band_for,
    clamp,
    require_finite,
    round_half_up,
    to_plain_dict,
)

logger = logging.getLogger(__name__)


# Base setup cost ranges by business type
BASE_SETUP_COSTS: Dict[str, ValueRange] = {
    "cafe": ValueRange(800_000, 2_000_000),
    "restaurant": ValueRange(1_500_000, 5_000_000),
    "gym": ValueRange(1_000_000, 3_000_000),
    "salon": ValueRange(500_000, 1_500_000),
    "grocery store": ValueRange(1_000_000, 2_500_000),
    "pharmacy": ValueRange(800_000, 2_000_000),
    "tech support": ValueRange(300_000, 800_000),
    "tutoring center": ValueRange(400_000, 1_000_000),
}
DEFAULT_SETUP_COST = ValueRange(500_000, 1_500_000)

# Monthly revenue per demand point
REVENUE_MULTIPLIERS: Dict[str, float] = {
    "cafe": 1200,
    "restaurant": 2000,
    "gym": 1500,
    "salon": 1000,
    "grocery store": 1800,
    "pharmacy": 1600,
    "tech support": 800,
    "tutoring center": 1000,
}
DEFAULT_REVENUE_MULTIPLIER = 1000

COMPETITION_REVENUE_PENALTY = {
    CompetitionDensity.LOW: 1.0,
    CompetitionDensity.BALANCED: 0.85,
    CompetitionDensity.HIGH: 0.7,
    CompetitionDensity.OVERSATURATED: 0.5,
}


class FinancialViability(LabelEnum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(frozen=True)
class YearProjection:
    revenue: ValueRange
    profit: ValueRange


@dataclass(frozen=True)
class FinancialProjection:
    """
    Financial outlook for one business at one location.

    break_even_months is capped at Config.BREAK_EVEN_HORIZON_MONTHS. The cap
    is a sentinel: reaches_break_even is False whenever the projection never
    pays back inside the horizon.
    """
    setup_cost: ValueRange
    monthly_operating_cost: ValueRange
    expected_monthly_revenue: ValueRange
    break_even_months: int
    profit_margin: ValueRange  # percent
    year1: YearProjection
    year3: YearProjection
    reaches_break_even: bool = True
    currency: str = "INR"

    @property
    def is_break_even_sentinel(self) -> bool:
        return not self.reaches_break_even

    @property
    def viability(self) -> FinancialViability:
        return financial_viability(self.break_even_months, self.profit_margin.min)

    def to_dict(self) -> Dict:
        data = to_plain_dict(self)
        data["viability"] = self.viability.value
        return data


def financial_viability(break_even_months: float, margin_min: float) -> FinancialViability:
    """Tier a projection by payback speed and its worst-case margin"""
    if break_even_months <= 12 and margin_min >= 15:
        return FinancialViability.EXCELLENT
    if break_even_months <= 18 and margin_min >= 10:
        return FinancialViability.GOOD
    if break_even_months <= 24:
        return FinancialViability.FAIR
    return FinancialViability.POOR


def location_multiplier(population_density: float) -> float:
    """Setup cost multiplier for denser (pricier) locations"""
    return band_for(population_density, [
        (5000, 1.3),
        (3000, 1.15),
        (1000, 1.0),
    ], 0.85)


def _business_key(category) -> str:
    return str(category).strip().lower() if category is not None else ""


def _margin(revenue: float, cost: float) -> float:
    if revenue <= 0:
        logger.debug(f"Non-positive revenue {revenue}, margin clamped to floor")
        return Config.PROFIT_MARGIN_FLOOR
    return round_half_up((revenue - cost) / revenue * 100)


def project(
    category,
    demand_index: float,
    competition_density,
    population_density: float,
    forecast_growth: float,
    currency: Optional[str] = None,
) -> FinancialProjection:
    """
    Build a financial projection.

    Args:
        category: Business type (e.g. "Cafe"); unknown types use default cost tables
        demand_index: Market demand 0-100; zero or negative gives a degenerate revenue band
        competition_density: Competition band (Low/Balanced/High/Oversaturated)
        population_density: People per km²
        forecast_growth: Growth ratio over a year (1.0 = flat)
        currency: Currency code, defaults to Config.CURRENCY

    Returns:
        FinancialProjection
    """
    density = CompetitionDensity.parse(competition_density, "competition_density")
    for name, value in (("demand_index", demand_index),
                        ("population_density", population_density),
                        ("forecast_growth", forecast_growth)):
        require_finite(value, name)

    key = _business_key(category)
    base_costs = BASE_SETUP_COSTS.get(key, DEFAULT_SETUP_COST)
    revenue_multiplier = REVENUE_MULTIPLIERS.get(key, DEFAULT_REVENUE_MULTIPLIER)
    if key not in BASE_SETUP_COSTS:
        logger.debug(f"No cost table for {category!r}, using defaults")

    # Setup and operating costs
    multiplier = location_multiplier(population_density)
    setup = ValueRange(
        round_half_up(base_costs.min * multiplier),
        round_half_up(base_costs.max * multiplier),
    )
    operating = ValueRange(
        round_half_up(setup.min * Config.OPERATING_COST_SHARE_MIN),
        round_half_up(setup.max * Config.OPERATING_COST_SHARE_MAX),
    )

    # Revenue band around the demand-driven midpoint
    midpoint = max(0.0, demand_index) * revenue_multiplier * COMPETITION_REVENUE_PENALTY[density]
    revenue = ValueRange(
        round_half_up(midpoint * (1 - Config.REVENUE_SPREAD)),
        round_half_up(midpoint * (1 + Config.REVENUE_SPREAD)),
    )

    # Break-even on average figures
    horizon = Config.BREAK_EVEN_HORIZON_MONTHS
    monthly_profit = revenue.midpoint - operating.midpoint
    if monthly_profit > 0:
        months = math.ceil(setup.midpoint / monthly_profit)
        reaches_break_even = months <= horizon
        break_even_months = int(clamp(months, 1, horizon))
    else:
        logger.debug(f"Average monthly profit {monthly_profit:.0f} <= 0, break-even capped at {horizon}")
        reaches_break_even = False
        break_even_months = horizon

    floor, ceiling = Config.PROFIT_MARGIN_FLOOR, Config.PROFIT_MARGIN_CEILING
    margin_min = clamp(_margin(revenue.min, operating.max), floor, ceiling)
    margin_max = clamp(_margin(revenue.max, operating.min), floor, ceiling)
    profit_margin = ValueRange(min(margin_min, margin_max), max(margin_min, margin_max))

    # Multi-year outlook
    year1_factor = min(forecast_growth, Config.YEAR1_GROWTH_CAP)
    year3_factor = forecast_growth ** 3
    year1_cost = operating.midpoint * 12
    year3_cost = year1_cost * Config.YEAR3_COST_INFLATION

    year1 = _year_projection(revenue, year1_factor, year1_cost)
    year3 = _year_projection(revenue, year3_factor, year3_cost)

    return FinancialProjection(
        setup_cost=setup,
        monthly_operating_cost=operating,
        expected_monthly_revenue=revenue,
        break_even_months=break_even_months,
        profit_margin=profit_margin,
        year1=year1,
        year3=year3,
        reaches_break_even=reaches_break_even,
        currency=currency or Config.CURRENCY,
    )


def _year_projection(monthly_revenue: ValueRange, growth_factor: float, cost: float) -> YearProjection:
    revenue_min, revenue_max = sorted((
        round_half_up(monthly_revenue.min * 12 * growth_factor),
        round_half_up(monthly_revenue.max * 12 * growth_factor),
    ))
    return YearProjection(
        revenue=ValueRange(revenue_min, revenue_max),
        profit=ValueRange(round_half_up(revenue_min - cost), round_half_up(revenue_max - cost)),
    )


def format_currency(amount: float, currency: Optional[str] = None) -> str:
    """Abbreviate a money figure with Cr / L / K suffixes"""
    currency = currency or Config.CURRENCY
    if amount >= 10_000_000:
        return f"{currency} {amount / 10_000_000:.2f}Cr"
    if amount >= 100_000:
        return f"{currency} {amount / 100_000:.2f}L"
    if amount >= 1000:
        return f"{currency} {amount / 1000:.0f}K"
    return f"{currency} {amount:,.0f}"
