"""
Metric normalizers

Pure functions that map categorical or raw inputs onto comparable 0-100
scores. Every function returns a value in [0, 100] for any documented input
and raises InvalidInputError for anything outside that domain.
"""

import logging
import math
from typing import Tuple

from utils.config import Config

from .errors import InvalidInputError
from .models import (
    DENSITY_BAND_SCORES,
    CompetitionDensity,
    Difficulty,
    band_for,
    clamp,
    require_finite,
)

logger = logging.getLogger(__name__)


COMPETITION_FAVORABILITY = {
    CompetitionDensity.LOW: 90,
    CompetitionDensity.BALANCED: 70,
    CompetitionDensity.HIGH: 40,
    CompetitionDensity.OVERSATURATED: 20,
}

DIFFICULTY_EASE = {
    Difficulty.EASY: 90,
    Difficulty.MODERATE: 70,
    Difficulty.DIFFICULT: 40,
    Difficulty.VERY_DIFFICULT: 20,
}


def competition_favorability(density) -> int:
    """Higher is better: fewer competitors, more room to enter"""
    return COMPETITION_FAVORABILITY[CompetitionDensity.parse(density, "competition_density")]


def difficulty_ease(difficulty) -> int:
    """Higher is better: easier categories score higher"""
    return DIFFICULTY_EASE[Difficulty.parse(difficulty, "difficulty")]


def growth_score(forecast_growth: float) -> float:
    """Forecast growth ratio (1.0 = flat) scaled so +50% saturates at 100"""
    require_finite(forecast_growth, "forecast_growth")
    return clamp((forecast_growth - 1) * 200)


def break_even_speed(months: float) -> float:
    """100 for instant payback, 0 at or beyond the break-even horizon"""
    require_finite(months, "break_even_months")
    if months < 0:
        raise InvalidInputError("break_even_months", months)
    return clamp(100 - (months / Config.BREAK_EVEN_HORIZON_MONTHS) * 100)


def capital_burden(setup_cost_max: float) -> float:
    """100 for no capital, 0 at or beyond Config.CAPITAL_CEILING"""
    require_finite(setup_cost_max, "setup_cost_max")
    if setup_cost_max < 0:
        raise InvalidInputError("setup_cost_max", setup_cost_max)
    return clamp(100 - (setup_cost_max / Config.CAPITAL_CEILING) * 100)


def density_band_score(density) -> int:
    """Representative saturation score of a density band (higher = more saturated)"""
    return DENSITY_BAND_SCORES[CompetitionDensity.parse(density, "competition_density")]


def competition_density_from_count(
    competitor_count: int,
    radius_km: float = None,
) -> Tuple[CompetitionDensity, float]:
    """
    Classify competition from a competitor count within a search radius.

    Args:
        competitor_count: Competitors found inside the radius
        radius_km: Search radius, defaults to Config.COMPETITION_SEARCH_RADIUS_KM

    Returns:
        (density band, saturation score 0-100)
    """
    radius_km = Config.COMPETITION_SEARCH_RADIUS_KM if radius_km is None else radius_km
    require_finite(radius_km, "radius_km")
    if radius_km <= 0:
        raise InvalidInputError("radius_km", radius_km)
    if competitor_count < 0:
        raise InvalidInputError("competitor_count", competitor_count)

    per_km2 = competitor_count / (math.pi * radius_km ** 2)
    score = min(100.0, per_km2 / Config.COMPETITION_SATURATION_PER_KM2 * 100)

    density = band_for(score, [
        (75, CompetitionDensity.OVERSATURATED),
        (50, CompetitionDensity.HIGH),
        (25, CompetitionDensity.BALANCED),
    ], CompetitionDensity.LOW)

    logger.debug(f"{competitor_count} competitors in {radius_km}km -> {density.value} ({score:.1f})")
    return density, score
