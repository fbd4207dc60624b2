"""
Composite Scoring Engine (BizScore)

Combines six weighted components into one 0-100 opportunity score:
- Demand (35%)
- Forecast growth (20%)
- Population density (15%)
- Competition penalty (10%)
- Category ease (10%)
- Strategic opportunity (10%)

Weights live in Config.BIZSCORE_WEIGHTS.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from utils.config import Config

from .category_intelligence import annual_growth_rate, profile_for
from .models import (
    LabelEnum,
    MarketSignal,
    clamp,
    first_match,
    require_finite,
    round_half_up,
    to_plain_dict,
)

logger = logging.getLogger(__name__)


class OpportunityType(LabelEnum):
    BLUE_OCEAN = "Blue Ocean"
    MODERATE_OPPORTUNITY = "Moderate Opportunity"
    COMPETITIVE_BUT_DOABLE = "Competitive but Doable"
    AVOID_ZONE = "Avoid Zone"


class Impact(LabelEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class ImpactFactor:
    name: str
    impact: Impact
    description: str


@dataclass(frozen=True)
class ScoreRating:
    rating: str
    description: str


@dataclass(frozen=True)
class BizScoreBreakdown:
    """Composite BizScore and its named sub-scores (all 0-100)"""
    overall: int
    demand: int
    competition: int
    location: int
    economic: int
    category_ease: int
    strategic_opportunity: int
    growth: int
    opportunity_type: OpportunityType
    factors: Tuple[ImpactFactor, ...] = ()

    @property
    def rating(self) -> ScoreRating:
        return score_rating(self.overall)

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def score(
    market: MarketSignal,
    category=None,
    forecast_growth: Optional[float] = None,
    competition_density_score: Optional[float] = None,
    category_ease_score: Optional[float] = None,
) -> BizScoreBreakdown:
    """
    Calculate the BizScore for a market/category pairing.

    Args:
        market: Market inputs for the location
        category: Category id or business type, used for default growth and ease
        forecast_growth: Growth ratio (1.0 = flat); the category annual growth rate when omitted
        competition_density_score: Saturation 0-100; taken from the market signal when omitted
        category_ease_score: Ease 0-100; taken from the category profile when omitted

    Returns:
        BizScoreBreakdown with overall score, sub-scores, opportunity type and impact factors
    """
    profile = profile_for(category)
    weights = Config.BIZSCORE_WEIGHTS

    if forecast_growth is None:
        growth = clamp(annual_growth_rate(category) * 100)
    else:
        growth = clamp(require_finite(forecast_growth, "forecast_growth") * 100)
    density_score = market.density_score if competition_density_score is None else clamp(
        require_finite(competition_density_score, "competition_density_score"))
    ease = profile.category_ease_score if category_ease_score is None else clamp(
        require_finite(category_ease_score, "category_ease_score"))

    demand = clamp(market.demand_index)
    location = min(100.0, market.population_density / Config.POPULATION_DENSITY_CEILING * 100)
    competition_penalty = max(0.0, 100 - density_score)
    strategic = max(0.0, demand - density_score)

    weighted = (
        demand * weights["demand"]
        + growth * weights["growth"]
        + location * weights["location"]
        + competition_penalty * weights["competition"]
        + ease * weights["category_ease"]
        + strategic * weights["strategic_opportunity"]
    )
    overall = round_half_up(clamp(weighted))

    economic = economic_score(market)

    opportunity_type = classify_opportunity(overall, density_score, demand)
    factors = impact_factors(market, density_score, ease, strategic)

    logger.debug(f"BizScore {overall} ({opportunity_type.value}) for category {category!r}")

    return BizScoreBreakdown(
        overall=overall,
        demand=round_half_up(demand),
        competition=round_half_up(competition_penalty),
        location=round_half_up(location),
        economic=round_half_up(economic),
        category_ease=round_half_up(ease),
        strategic_opportunity=round_half_up(strategic),
        growth=round_half_up(growth),
        opportunity_type=opportunity_type,
        factors=tuple(factors),
    )


def economic_score(market: MarketSignal) -> float:
    """Income (lakhs/year), internet penetration and literacy, 0-100"""
    return clamp(
        (market.avg_income / 10) * 33
        + market.internet_penetration * 0.33
        + market.literacy_rate * 0.33
    )


def classify_opportunity(overall: float, competition_density_score: float, demand_index: float) -> OpportunityType:
    """Ordered rules, first match wins"""
    return first_match([
        (lambda: demand_index > 65 and competition_density_score < 40 and overall > 70,
         OpportunityType.BLUE_OCEAN),
        (lambda: overall < 45 or (competition_density_score > 75 and demand_index < 60),
         OpportunityType.AVOID_ZONE),
        (lambda: competition_density_score > 60 and overall >= 55,
         OpportunityType.COMPETITIVE_BUT_DOABLE),
    ], OpportunityType.MODERATE_OPPORTUNITY)


def impact_factors(
    market: MarketSignal,
    competition_density_score: float,
    category_ease: float,
    strategic_opportunity: float,
) -> List[ImpactFactor]:
    """Notable drivers behind a score, in a fixed order"""
    factors = []

    if market.demand_index > 70:
        factors.append(ImpactFactor("High Market Demand", Impact.POSITIVE,
                                    "Strong consumer interest in this business category"))
    elif market.demand_index < 40:
        factors.append(ImpactFactor("Low Market Demand", Impact.NEGATIVE,
                                    "Limited consumer interest may affect revenue"))

    if competition_density_score < 30:
        factors.append(ImpactFactor("Low Competition", Impact.POSITIVE,
                                    "Excellent market entry opportunity with minimal competitive pressure"))
    elif competition_density_score > 70:
        factors.append(ImpactFactor("High Competition", Impact.NEGATIVE,
                                    "Saturated market requires strong differentiation strategy"))

    if strategic_opportunity > 40:
        factors.append(ImpactFactor("Strategic Opportunity", Impact.POSITIVE,
                                    "Demand significantly exceeds competition - ideal market conditions"))

    if category_ease > 70:
        factors.append(ImpactFactor("Business-Friendly Category", Impact.POSITIVE,
                                    "Category has lower barriers to entry and operational complexity"))
    elif category_ease < 50:
        factors.append(ImpactFactor("Complex Category", Impact.NEGATIVE,
                                    "High barriers to entry and operational challenges"))

    if market.population_density > 10000:
        factors.append(ImpactFactor("High Population Density", Impact.POSITIVE,
                                    "Dense population provides larger customer base"))

    if market.avg_income > 6:
        factors.append(ImpactFactor("High Income Area", Impact.POSITIVE,
                                    "Above-average income supports premium pricing"))

    if market.internet_penetration > 75:
        factors.append(ImpactFactor("Strong Digital Infrastructure", Impact.POSITIVE,
                                    "High internet penetration enables online channels"))

    return factors


def score_rating(overall: float) -> ScoreRating:
    """Verbal rating for a BizScore"""
    return first_match([
        (lambda: overall >= Config.SCORE_RATING_EXCELLENT,
         ScoreRating("Excellent", "Highly promising opportunity with strong market potential")),
        (lambda: overall >= Config.SCORE_RATING_GOOD,
         ScoreRating("Good", "Solid business opportunity worth serious consideration")),
        (lambda: overall >= Config.SCORE_RATING_MODERATE,
         ScoreRating("Moderate", "Viable but requires careful planning and differentiation")),
    ], ScoreRating("Challenging", "Significant challenges present, consider alternatives"))
