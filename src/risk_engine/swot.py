"""
SWOT analysis from market metrics and the competitive landscape
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from opportunity_engine.models import CompetitionDensity, Difficulty, require_finite, to_plain_dict

logger = logging.getLogger(__name__)

FALLBACK_STRENGTH = "Location-specific advantages to be leveraged"
FALLBACK_WEAKNESS = "Standard market entry challenges expected"
FALLBACK_OPPORTUNITY = "Potential for strategic positioning exists"
FALLBACK_THREAT = "Monitor market dynamics and competitor activity"


@dataclass(frozen=True)
class SWOTInputs:
    demand_index: float
    competition_density: CompetitionDensity
    category_difficulty: Difficulty
    forecast_growth: float
    strategic_opportunity_index: float
    biz_score_today: float
    biz_score_12m: float
    population_density: float

    def __post_init__(self):
        object.__setattr__(self, "competition_density",
                           CompetitionDensity.parse(self.competition_density, "competition_density"))
        object.__setattr__(self, "category_difficulty",
                           Difficulty.parse(self.category_difficulty, "category_difficulty"))
        for name in ("demand_index", "forecast_growth", "strategic_opportunity_index",
                     "biz_score_today", "biz_score_12m", "population_density"):
            require_finite(getattr(self, name), name)


@dataclass(frozen=True)
class SWOTAnalysis:
    """Four ordered, never-empty lists of findings"""
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    opportunities: Tuple[str, ...]
    threats: Tuple[str, ...]

    @property
    def net_balance(self) -> int:
        """Positive findings minus negative findings"""
        return (len(self.strengths) + len(self.opportunities)
                - len(self.weaknesses) - len(self.threats))

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def generate_swot(inputs: SWOTInputs) -> SWOTAnalysis:
    """
    Run every threshold check and collect findings.

    Each list falls back to a placeholder when no check fires.
    """
    strengths, weaknesses, opportunities, threats = [], [], [], []
    density = inputs.competition_density
    difficulty = inputs.category_difficulty
    growth = inputs.forecast_growth

    # Strengths
    if inputs.demand_index >= 80:
        strengths.append("High market demand with strong customer base")
    elif inputs.demand_index >= 60:
        strengths.append("Solid market demand showing consistent interest")

    if growth >= 1.3:
        strengths.append("Excellent growth trajectory and positive market momentum")
    elif growth >= 1.15:
        strengths.append("Healthy growth potential with expanding market")

    if inputs.population_density >= 5000:
        strengths.append("Dense population providing large customer pool")

    if density in (CompetitionDensity.LOW, CompetitionDensity.BALANCED):
        strengths.append("Favorable competitive landscape with room for entry")

    if inputs.strategic_opportunity_index >= 75:
        strengths.append("Strong strategic positioning and market gaps identified")

    # Weaknesses
    if difficulty in (Difficulty.DIFFICULT, Difficulty.VERY_DIFFICULT):
        weaknesses.append("High operational complexity requiring specialized expertise")
    elif difficulty == Difficulty.MODERATE:
        weaknesses.append("Moderate entry barriers and operational requirements")

    if inputs.demand_index < 50:
        weaknesses.append("Limited market demand may impact revenue potential")

    if density in (CompetitionDensity.HIGH, CompetitionDensity.OVERSATURATED):
        weaknesses.append("Saturated market with intense competitive pressure")

    if growth < 1.05:
        weaknesses.append("Stagnant or declining market growth prospects")

    if inputs.biz_score_today < 60:
        weaknesses.append("Below-average market conditions requiring careful strategy")

    # Opportunities
    if growth >= 1.2:
        opportunities.append("Capitalize on rapidly expanding market demand")

    if density == CompetitionDensity.LOW:
        opportunities.append("First-mover advantage in underserved market")

    if inputs.strategic_opportunity_index >= 70:
        opportunities.append("Niche differentiation strategies available")

    if inputs.biz_score_12m > inputs.biz_score_today + 5:
        opportunities.append("Strong future outlook with improving conditions")

    if difficulty in (Difficulty.EASY, Difficulty.MODERATE):
        opportunities.append("Accessible entry with manageable operational complexity")

    if inputs.population_density >= 3000 and inputs.demand_index >= 60:
        opportunities.append("Large addressable market with proven demand")

    # Threats
    if density == CompetitionDensity.OVERSATURATED:
        threats.append("Severe market saturation leading to price wars")
    elif density == CompetitionDensity.HIGH:
        threats.append("Aggressive competitors with established market presence")

    if growth < 1.0:
        threats.append("Market contraction and declining customer base")

    if inputs.biz_score_12m < inputs.biz_score_today - 5:
        threats.append("Deteriorating market conditions over time")

    if difficulty == Difficulty.VERY_DIFFICULT:
        threats.append("High failure risk due to operational challenges")

    if inputs.demand_index < 40:
        threats.append("Insufficient demand may not sustain business operations")

    if density != CompetitionDensity.LOW and growth < 1.1:
        threats.append("New market entrants may intensify competition")

    swot = SWOTAnalysis(
        strengths=tuple(strengths or [FALLBACK_STRENGTH]),
        weaknesses=tuple(weaknesses or [FALLBACK_WEAKNESS]),
        opportunities=tuple(opportunities or [FALLBACK_OPPORTUNITY]),
        threats=tuple(threats or [FALLBACK_THREAT]),
    )
    logger.debug(
        f"SWOT: {len(swot.strengths)}S {len(swot.weaknesses)}W "
        f"{len(swot.opportunities)}O {len(swot.threats)}T"
    )
    return swot
