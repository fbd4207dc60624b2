"""
Estimators over a parsed business idea

The idea parser is an external collaborator returning a fixed JSON shape
(tools.schema_validation.ParsedIdea). These functions turn that shape into
the difficulty, capital, demand and competition inputs the engines use.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Union

from tools.schema_validation import ParsedIdea, validate_schema

from .models import CompetitionDensity, Difficulty, ValueRange, clamp, round_half_up

logger = logging.getLogger(__name__)

BASE_CAPITAL = ValueRange(300_000, 1_000_000)

CAPITAL_INTENSITY_FACTORS = {
    "Very High": (5, 8),
    "High": (3, 5),
    "Medium": (1.5, 2.5),
    "Low": (0.5, 1),
}

SPACE_FACTORS = {
    "Large": (1.5, 2),
    "Small": (0.7, 0.8),
}

HIGH_DEMAND_BUSINESSES = {"cafe", "restaurant", "grocery store", "pharmacy"}
SATURATED_BUSINESSES = {"cafe", "restaurant", "salon", "retail"}

COMPETITION_LEVEL_DENSITY = {
    "Low": CompetitionDensity.LOW,
    "Moderate": CompetitionDensity.BALANCED,
    "High": CompetitionDensity.HIGH,
}


@dataclass(frozen=True)
class IdeaAnalysis:
    parsed: ParsedIdea
    category_difficulty: Difficulty
    estimated_capital: ValueRange
    demand_estimate: int
    competition_level: str  # Low / Moderate / High

    @property
    def competition_density(self) -> CompetitionDensity:
        return COMPETITION_LEVEL_DENSITY[self.competition_level]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parsed": self.parsed.model_dump(by_alias=True),
            "category_difficulty": self.category_difficulty.value,
            "estimated_capital": {"min": self.estimated_capital.min, "max": self.estimated_capital.max},
            "demand_estimate": self.demand_estimate,
            "competition_level": self.competition_level,
            "competition_density": self.competition_density.value,
        }


def _coerce(parsed: Union[ParsedIdea, Dict[str, Any]]) -> ParsedIdea:
    if isinstance(parsed, ParsedIdea):
        return parsed
    return validate_schema(parsed, ParsedIdea)


def map_to_category_difficulty(parsed) -> Difficulty:
    """Operational complexity wins, then capital intensity"""
    parsed = _coerce(parsed)
    complexity = parsed.operational_complexity
    if complexity in ("Very Difficult", "Difficult"):
        return Difficulty(complexity)
    if parsed.capital_intensity == "Very High":
        return Difficulty.VERY_DIFFICULT
    if parsed.capital_intensity == "High":
        return Difficulty.DIFFICULT
    if complexity == "Moderate":
        return Difficulty.MODERATE
    return Difficulty.EASY


def estimate_capital_requirements(parsed) -> ValueRange:
    """Setup capital range from capital intensity, space and inventory needs"""
    parsed = _coerce(parsed)
    low, high = BASE_CAPITAL.min, BASE_CAPITAL.max

    min_factor, max_factor = CAPITAL_INTENSITY_FACTORS[parsed.capital_intensity]
    low, high = low * min_factor, high * max_factor

    if parsed.required_space in SPACE_FACTORS:
        min_factor, max_factor = SPACE_FACTORS[parsed.required_space]
        low, high = low * min_factor, high * max_factor

    if parsed.inventory_needs == "High":
        low, high = low * 1.3, high * 1.5

    return ValueRange(round_half_up(low), round_half_up(high))


def estimate_demand(parsed) -> int:
    """Demand index estimate, clamped to 20-95"""
    parsed = _coerce(parsed)
    demand = 50

    if parsed.category.strip().lower() in HIGH_DEMAND_BUSINESSES:
        demand += 20

    if parsed.pricing_level == "Affordable":
        demand += 15
    elif parsed.pricing_level == "Premium":
        demand -= 5

    if len(parsed.target_audience) >= 3:
        demand += 10

    demand += len(parsed.unique_selling_points) * 5

    if parsed.technology_requirements == "Basic":
        demand += 10
    elif parsed.technology_requirements == "Advanced":
        demand -= 5

    return int(clamp(demand, 20, 95))


def estimate_competition(parsed) -> str:
    """Low / Moderate / High"""
    parsed = _coerce(parsed)
    if parsed.category.strip().lower() in SATURATED_BUSINESSES:
        return "Moderate" if len(parsed.unique_selling_points) >= 2 else "High"
    if parsed.operational_complexity == "Very Difficult":
        return "Low"
    if parsed.capital_intensity == "Very High":
        return "Low"
    return "Moderate"


def analyze_idea(parsed) -> IdeaAnalysis:
    """Run every estimator over one parsed idea"""
    parsed = _coerce(parsed)
    analysis = IdeaAnalysis(
        parsed=parsed,
        category_difficulty=map_to_category_difficulty(parsed),
        estimated_capital=estimate_capital_requirements(parsed),
        demand_estimate=estimate_demand(parsed),
        competition_level=estimate_competition(parsed),
    )
    logger.info(
        f"Analyzed idea '{parsed.category}': {analysis.category_difficulty.value}, "
        f"demand {analysis.demand_estimate}, competition {analysis.competition_level}"
    )
    return analysis
