"""
Customer persona match

Builds the target customer persona for a business type and pricing level,
then scores how well the local demographics fit it.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from .errors import InvalidInputError
from .models import band_for, require_finite, round_half_up, to_plain_dict

logger = logging.getLogger(__name__)

# business type -> (age group, lifestyle, interests)
PERSONA_PROFILES = {
    "cafe": ("18-35", ("Urban", "Social", "Tech-savvy"),
             ("Coffee culture", "Socializing", "Remote work")),
    "restaurant": ("25-45", ("Family-oriented", "Food enthusiasts"),
                   ("Dining out", "Celebrations", "Cuisine variety")),
    "gym": ("20-40", ("Health-conscious", "Active"),
            ("Fitness", "Wellness", "Sports")),
    "salon": ("20-50", ("Fashion-conscious", "Appearance-focused"),
              ("Beauty", "Grooming", "Self-care")),
    "retail": ("18-60", ("Shopping enthusiasts", "Brand-conscious"),
               ("Fashion", "Lifestyle products", "Quality goods")),
}
FALLBACK_PERSONA = "retail"

# pricing level -> (income level, spending power)
PRICING_AUDIENCE = {
    "Affordable": ("Middle", 45),
    "Mid-Range": ("Upper-Middle", 65),
    "Premium": ("High", 85),
}

INCOME_ALIGNMENT_SCORES = {"Excellent": 90, "Good": 70, "Fair": 50, "Poor": 30}
LIFESTYLE_MATCH_SCORES = {"Strong": 80, "Moderate": 60, "Weak": 40}

COMMERCIAL_LOCATION_MARKERS = ("market", "mall")


@dataclass(frozen=True)
class CustomerPersona:
    age_group: str
    income_level: str  # Middle / Upper-Middle / High
    lifestyle: Tuple[str, ...]
    interests: Tuple[str, ...]
    spending_power: int  # 0-100
    match_score: int = 70  # 0-100


@dataclass(frozen=True)
class DemographicFit:
    youth_density: int  # % of population aged 18-35
    income_alignment: str  # Excellent / Good / Fair / Poor
    lifestyle_match: str  # Strong / Moderate / Weak
    zone_type: str  # Residential / Commercial / Mixed / Industrial


@dataclass(frozen=True)
class PersonaMatch:
    primary_persona: CustomerPersona
    overall_match: int
    demographic_fit: DemographicFit
    insights: Tuple[str, ...]
    warnings: Tuple[str, ...]
    secondary_persona: Optional[CustomerPersona] = None

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def generate_persona(category: str, pricing_level: str) -> CustomerPersona:
    """Target persona for a business type; unlisted types use the retail persona"""
    if pricing_level not in PRICING_AUDIENCE:
        raise InvalidInputError("pricing_level", pricing_level, PRICING_AUDIENCE)
    age_group, lifestyle, interests = PERSONA_PROFILES.get(
        category.strip().lower(), PERSONA_PROFILES[FALLBACK_PERSONA])
    income_level, spending_power = PRICING_AUDIENCE[pricing_level]
    return CustomerPersona(
        age_group=age_group,
        income_level=income_level,
        lifestyle=lifestyle,
        interests=interests,
        spending_power=spending_power,
    )


def _zone_type(location: str, population_density: float) -> str:
    name = location.lower()
    if any(marker in name for marker in COMMERCIAL_LOCATION_MARKERS):
        return "Commercial"
    if population_density > 80:
        return "Mixed"
    if population_density > 40:
        return "Residential"
    return "Industrial"


def _income_alignment(income_level: str, population_density: float) -> str:
    if income_level == "High" and population_density > 100:
        return "Excellent"
    if income_level == "Middle" and population_density > 30:
        return "Good"
    if income_level == "Upper-Middle":
        return "Good"
    return "Fair"


def calculate_persona_match(
    category: str,
    pricing_level: str,
    population_density: float,
    demand_index: float,
    location: str,
) -> PersonaMatch:
    """
    Score how well local demographics match the target persona.

    Args:
        category: Business type (e.g. "Cafe")
        pricing_level: Affordable / Mid-Range / Premium
        population_density: People per km²
        demand_index: Demand 0-100
        location: Location name; names mentioning a market or mall are commercial zones

    Returns:
        PersonaMatch
    """
    require_finite(population_density, "population_density")
    require_finite(demand_index, "demand_index")
    persona = generate_persona(category, pricing_level)

    youth_density = 45 if population_density > 100 else 35 if population_density > 50 else 25
    income_alignment = _income_alignment(persona.income_level, population_density)
    lifestyle_match = band_for(demand_index, [(70, "Strong"), (50, "Moderate")], "Weak")
    zone_type = _zone_type(location, population_density)

    density_score = min(100.0, youth_density / 50 * 100)
    overall = round_half_up(
        density_score * 0.3
        + INCOME_ALIGNMENT_SCORES[income_alignment] * 0.4
        + LIFESTYLE_MATCH_SCORES[lifestyle_match] * 0.3
    )

    insights, warnings = [], []
    if overall >= 75:
        insights.append("Excellent demographic match - target audience is prevalent")
        insights.append(f"{youth_density}% youth density aligns well with {category} category")
    elif overall >= 50:
        insights.append("Moderate demographic fit - marketing will be important")
    else:
        warnings.append("Demographic mismatch detected - consider repositioning")

    if zone_type == "Commercial":
        insights.append("Commercial zone - high foot traffic expected")
    elif zone_type == "Residential":
        insights.append("Residential area - focus on local customer base")

    if pricing_level == "Premium" and income_alignment != "Excellent":
        warnings.append("Premium pricing may not align with local income levels")

    logger.debug(f"Persona match for {category} at {location}: {overall} ({zone_type})")

    return PersonaMatch(
        primary_persona=replace(persona, match_score=overall),
        overall_match=overall,
        demographic_fit=DemographicFit(
            youth_density=youth_density,
            income_alignment=income_alignment,
            lifestyle_match=lifestyle_match,
            zone_type=zone_type,
        ),
        insights=tuple(insights),
        warnings=tuple(warnings),
    )
