"""
Recommendation engine

Accumulates points across five factors (0-100):
- BizScore today (30)
- 12-month growth trajectory (25)
- SWOT balance (20)
- Financial viability (15)
- Competition and category (10)

The total picks one of four recommendation tiers via
Config.RECOMMENDATION_BREAKPOINTS.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from utils.config import Config

from opportunity_engine.finance import FinancialProjection
from opportunity_engine.models import (
    CompetitionDensity,
    Difficulty,
    LabelEnum,
    RiskLevel,
    require_finite,
    to_plain_dict,
)

from .swot import SWOTAnalysis

logger = logging.getLogger(__name__)


class RecommendationType(LabelEnum):
    START_NOW = "start-now"
    START_CAUTION = "start-caution"
    WAIT_MONITOR = "wait-monitor"
    AVOID = "avoid"


@dataclass(frozen=True)
class Recommendation:
    type: RecommendationType
    label: str
    confidence: int  # 0-95
    risk_level: RiskLevel
    timeframe: str
    reasoning: Tuple[str, ...]
    action_steps: Tuple[str, ...]
    points: int = 0

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def _biz_score_points(today: float) -> Tuple[int, str]:
    if today >= 80:
        return 30, "Excellent current market conditions with high BizScore"
    if today >= 65:
        return 20, "Solid market conditions showing good potential"
    if today >= 50:
        return 10, "Moderate market conditions requiring careful approach"
    return 0, "Challenging market conditions with below-average scores"


def _trajectory_points(change: float) -> Tuple[int, str]:
    if change >= 10:
        return 25, "Strong positive growth trajectory over next 12 months"
    if change >= 5:
        return 18, "Improving market outlook with steady growth"
    if change >= 0:
        return 10, "Stable market with consistent performance expected"
    return 0, "Declining market conditions anticipated"


def _swot_points(balance: int) -> Tuple[int, str]:
    if balance >= 3:
        return 20, "SWOT analysis reveals strong competitive positioning"
    if balance >= 0:
        return 12, "Balanced SWOT with manageable risks"
    if balance >= -2:
        return 5, "SWOT shows challenges that require mitigation strategies"
    return 0, "SWOT analysis indicates significant challenges ahead"


def _financial_points(financials: FinancialProjection) -> Tuple[int, str]:
    months = financials.break_even_months
    margin = financials.profit_margin.min
    if financials.reaches_break_even:
        if months <= 12 and margin >= 15:
            return 15, "Strong financial viability with quick break-even"
        if months <= 18 and margin >= 10:
            return 10, "Acceptable financial projections with reasonable timeline"
        if months <= 24:
            return 5, "Extended break-even period requires patience"
    return 0, "Financial projections show challenging profitability timeline"


def _competition_points(density: CompetitionDensity, difficulty: Difficulty) -> Tuple[int, Optional[str]]:
    if density == CompetitionDensity.LOW and difficulty in (Difficulty.EASY, Difficulty.MODERATE):
        return 10, "Favorable competition and manageable operational complexity"
    if density == CompetitionDensity.BALANCED:
        return 6, "Competitive but accessible market environment"
    if density == CompetitionDensity.OVERSATURATED:
        return 0, "Highly saturated market with intense competition"
    return 0, None


def recommend(
    biz_score_today: float,
    biz_score_12m: float,
    competition_density,
    category_difficulty,
    swot: SWOTAnalysis,
    financials: FinancialProjection,
    forecast_growth: Optional[float] = None,
) -> Recommendation:
    """
    Turn an analysed opportunity into a go / no-go recommendation.

    Args:
        biz_score_today: Current BizScore
        biz_score_12m: Forecast BizScore in 12 months
        competition_density: Competition band
        category_difficulty: Difficulty tier
        swot: SWOT analysis for the opportunity
        financials: Financial projection
        forecast_growth: Growth ratio, carried for reporting only

    Returns:
        Recommendation
    """
    density = CompetitionDensity.parse(competition_density, "competition_density")
    difficulty = Difficulty.parse(category_difficulty, "category_difficulty")
    require_finite(biz_score_today, "biz_score_today")
    require_finite(biz_score_12m, "biz_score_12m")
    if forecast_growth is not None:
        require_finite(forecast_growth, "forecast_growth")

    change = biz_score_12m - biz_score_today
    factors = [
        _biz_score_points(biz_score_today),
        _trajectory_points(change),
        _swot_points(swot.net_balance),
        _financial_points(financials),
        _competition_points(density, difficulty),
    ]
    points = sum(p for p, _ in factors)
    reasoning = [reason for _, reason in factors if reason]

    start_now, start_caution, wait_monitor = Config.RECOMMENDATION_BREAKPOINTS
    action_steps: List[str] = []

    if points >= start_now:
        rec_type = RecommendationType.START_NOW
        label = "Start Now"
        risk_level = RiskLevel.LOW
        timeframe = "Launch within 2-3 months"
        confidence = min(95, points + 10)
        action_steps.extend([
            "Secure location and finalize business plan immediately",
            "Complete legal registrations and obtain necessary licenses",
            "Begin vendor negotiations and supply chain setup",
            "Launch marketing campaign to build pre-opening buzz",
            "Hire and train core team members",
        ])
    elif points >= start_caution:
        rec_type = RecommendationType.START_CAUTION
        label = "Start with Caution"
        risk_level = RiskLevel.HIGH if difficulty == Difficulty.VERY_DIFFICULT else RiskLevel.MODERATE
        timeframe = "Launch within 4-6 months after preparation"
        confidence = min(85, points + 15)
        action_steps.extend([
            "Conduct detailed competitive analysis and positioning study",
            "Develop robust differentiation strategy to stand out",
            "Create conservative financial projections with contingency plans",
            "Test market with soft launch or pilot program if possible",
            "Build strong supplier relationships and negotiate favorable terms",
        ])
        if density == CompetitionDensity.HIGH:
            action_steps.append("Identify unique value proposition to compete effectively")
    elif points >= wait_monitor:
        rec_type = RecommendationType.WAIT_MONITOR
        label = "Wait & Monitor"
        risk_level = RiskLevel.HIGH
        timeframe = "Monitor for 3-6 months before deciding"
        confidence = min(75, points + 20)
        action_steps.extend([
            "Track market trends and competitor movements closely",
            "Wait for more favorable conditions or improved indicators",
            "Explore alternative locations or adjacent categories",
            "Build financial reserves and improve preparation",
            "Network with industry experts and potential mentors",
        ])
        if change > 0:
            action_steps.append("Re-evaluate in 6 months as growth trajectory improves")
    else:
        rec_type = RecommendationType.AVOID
        label = "Avoid This Location"
        risk_level = RiskLevel.VERY_HIGH
        timeframe = "Consider different location or category"
        confidence = min(90, 100 - points)
        action_steps.extend([
            "Explore alternative locations with better market conditions",
            "Consider different business categories with higher potential",
            "Conduct deeper market research before any investment",
            "Consult with industry veterans about viability concerns",
        ])
        if financials.break_even_months > 24:
            action_steps.append("Re-evaluate business model for better financial efficiency")

    if difficulty in (Difficulty.DIFFICULT, Difficulty.VERY_DIFFICULT):
        action_steps.append("Secure expert consultation for operational complexity")

    logger.debug(f"Recommendation {rec_type.value} ({points} points)")

    return Recommendation(
        type=rec_type,
        label=label,
        confidence=int(confidence),
        risk_level=risk_level,
        timeframe=timeframe,
        reasoning=tuple(reasoning),
        action_steps=tuple(action_steps),
        points=points,
    )
