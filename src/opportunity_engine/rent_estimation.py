"""
Commercial rent and real-estate suitability

Estimates rent per square foot for a business type in a city and grades
how well the location suits it (suitability, affordability, A+ to D grade).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from utils.config import Config

from .errors import InvalidInputError
from .models import band_for, clamp, require_finite, round_half_up, to_plain_dict

logger = logging.getLogger(__name__)

BASE_RENT_PER_SQFT = 50

CITY_RENT_MULTIPLIERS = {
    "mumbai": 3.5,
    "delhi": 3.2,
    "bangalore": 3.0,
    "pune": 2.5,
    "hyderabad": 2.3,
    "chennai": 2.2,
    "kolkata": 2.0,
}
DEFAULT_CITY_MULTIPLIER = 1.5

BUSINESS_RENT_MULTIPLIERS = {
    "cafe": 1.2,
    "restaurant": 1.3,
    "retail": 1.4,
    "salon": 1.0,
    "gym": 1.1,
    "office": 0.9,
}

SPACE_RENT_MULTIPLIERS = {
    "Small": 0.8,
    "Medium": 1.0,
    "Large": 1.3,
}

# People/km² at which the density part of suitability saturates
SUITABILITY_DENSITY_CEILING = 150

# Average rent (per sqft) above which the area counts as expensive
HIGH_RENT_PER_SQFT = 80

LOCATION_GRADES = [
    (85, "A+"),
    (75, "A"),
    (65, "B+"),
    (55, "B"),
    (45, "C+"),
    (35, "C"),
]


@dataclass(frozen=True)
class LocationFactors:
    footfall: str  # High / Medium / Low
    accessibility: str  # Excellent / Good / Average / Poor
    competition: str  # Low / Moderate / High
    infrastructure: str  # Modern / Good / Average / Basic


@dataclass(frozen=True)
class RentEstimate:
    min_rent: int
    max_rent: int
    avg_rent: int
    suitability_score: int  # 0-100
    affordability_index: float  # 0-100, higher = more affordable
    location_grade: str
    factors: LocationFactors
    recommendations: Tuple[str, ...]
    currency: str = "INR"
    per: str = "sqft"

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def location_grade(suitability_score: float) -> str:
    return band_for(suitability_score, LOCATION_GRADES, "D")


def estimate_rent(
    city: str,
    category: str,
    required_space: str,
    population_density: float,
    demand_index: float,
) -> RentEstimate:
    """
    Estimate commercial rent and location suitability.

    Args:
        city: City name; unlisted cities use a tier-2 multiplier
        category: Business type (e.g. "Cafe")
        required_space: Small / Medium / Large
        population_density: People per km²
        demand_index: Demand 0-100

    Returns:
        RentEstimate with rent per sqft and suitability grading
    """
    if required_space not in SPACE_RENT_MULTIPLIERS:
        raise InvalidInputError("required_space", required_space, SPACE_RENT_MULTIPLIERS)
    require_finite(population_density, "population_density")
    require_finite(demand_index, "demand_index")

    rent = BASE_RENT_PER_SQFT
    rent *= CITY_RENT_MULTIPLIERS.get(city.strip().lower(), DEFAULT_CITY_MULTIPLIER)
    rent *= BUSINESS_RENT_MULTIPLIERS.get(category.strip().lower(), 1.0)
    rent *= SPACE_RENT_MULTIPLIERS[required_space]
    rent *= 1 + demand_index / 200

    min_rent = round_half_up(rent * 0.8)
    max_rent = round_half_up(rent * 1.4)
    avg_rent = round_half_up((min_rent + max_rent) / 2)

    density_score = min(100.0, population_density / SUITABILITY_DENSITY_CEILING * 100)
    suitability = round_half_up(density_score * 0.4 + demand_index * 0.6)
    affordability = clamp(100 - avg_rent / 100)
    grade = location_grade(suitability)

    factors = LocationFactors(
        footfall=band_for(demand_index, [(70, "High"), (50, "Medium")], "Low"),
        accessibility=band_for(suitability, [(70, "Excellent"), (50, "Good"), (30, "Average")], "Poor"),
        competition="High" if population_density > 100 else "Moderate" if population_density > 50 else "Low",
        infrastructure=band_for(suitability, [(75, "Modern"), (55, "Good"), (35, "Average")], "Basic"),
    )

    recommendations = []
    if avg_rent > HIGH_RENT_PER_SQFT:
        recommendations.append("High rent area - ensure strong revenue projections")
        recommendations.append("Consider negotiating long-term lease for better rates")
    else:
        recommendations.append("Reasonable rent expectations for this location")

    if factors.footfall == "High":
        recommendations.append("Excellent footfall potential - premium rent justified")

    if grade in ("A+", "A"):
        recommendations.append("Prime location - high visibility and customer access")
    elif grade in ("C", "D"):
        recommendations.append("Consider alternative locations with better infrastructure")

    logger.debug(f"Rent for {category} in {city}: {min_rent}-{max_rent}/sqft, grade {grade}")

    return RentEstimate(
        min_rent=min_rent,
        max_rent=max_rent,
        avg_rent=avg_rent,
        suitability_score=suitability,
        affordability_index=affordability,
        location_grade=grade,
        factors=factors,
        recommendations=tuple(recommendations),
        currency=Config.CURRENCY,
    )
